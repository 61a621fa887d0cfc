"""Command driver and command-line tool for the in-memory file tree."""
