"""Pydantic models for file tree results and settings."""

from __future__ import annotations

import codecs
import json
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class StatResult(BaseModel):
    """What ``stat`` reports about a path."""

    model_config = ConfigDict(frozen=True)

    is_file: bool
    size: int | None = Field(default=None, ge=0, description="Content length, files only")


class TreeSettings(BaseModel):
    """Settings for tools that drive a file tree."""

    loglevel: str = Field(default="INFO", description="Logging level name")
    logfile: str | None = Field(default=None, description="Log file, ~/.filetree/log.txt if unset")
    encoding: str = Field(default="utf-8", description="Text encoding for file contents")
    check_invariants: bool = Field(default=False, description="Validate the tree after each mutation")

    @field_validator("loglevel")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value!r}") from exc
        return value

    def merge(self, patch: Mapping[str, Any]) -> TreeSettings:
        """Return new settings with ``patch`` applied."""
        payload = self.model_dump(mode="python")
        payload.update(patch)
        return TreeSettings.model_validate(payload)
# ---------------------------------------------------------------------------
# helpers


def coerce_settings(value: Any) -> TreeSettings:
    """Normalize supported inputs into a TreeSettings instance."""
    if value is None:
        return TreeSettings()
    if isinstance(value, TreeSettings):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    else:
        raise TypeError("Unsupported value for settings")
    try:
        return TreeSettings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid settings payload") from exc


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError:
        payload = json.loads(text)
    if not isinstance(payload, Mapping):
        raise ValueError("Settings must be a mapping")
    return payload


__all__ = [
    "StatResult",
    "TreeSettings",
    "coerce_settings",
]
