"""Helpers shared by the file tree tools."""
