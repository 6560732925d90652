"""Runtime settings resolution for the CLI: defaults, env, YAML config, flags."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared import config

logger = logging.getLogger(__name__)


class SplitSettings(BaseModel):
    """Options of one split run (mirrors the ``bqsplit split`` flags)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    quests: str = Field(default=config.QUESTS_PATH, description="Path to DefaultQuests.json")
    complete: str = Field(default=config.COMPLETE_TEXT, description="Name of the quest rewired to chapter tails")
    output: str = Field(default=config.OUTPUT_DIR, description="Root directory of the split tree")
    change: bool = Field(default=config.CHANGE, description="Run edit mode reset, lang codes and tail relinking")
    lang_path: str = Field(default=config.LANG_PATH, description="Directory holding <locale>.lang files")
    lang_prefix: str = Field(default=config.LANG_PREFIX, description="First segment of generated lang codes")

    @field_validator("quests", "output", "lang_path")
    @classmethod
    def _non_empty_path(cls, v: str) -> str:
        if not (v or "").strip():
            raise ValueError("path options must not be empty")
        return v

    @field_validator("lang_prefix")
    @classmethod
    def _valid_prefix(cls, v: str) -> str:
        token = (v or "").strip()
        if not token or not all(part.isidentifier() for part in token.split(".")):
            raise ValueError("lang_prefix must be dot-separated word segments")
        return token


def env_flag(name: str, default: bool = False, environ: Mapping[str, str] | None = None) -> bool:
    """Read boolean env values from common truthy/falsey forms."""
    env = os.environ if environ is None else environ
    val = env.get(name, "").strip().lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


def settings_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect the options present in the environment."""
    env = os.environ if environ is None else environ
    out: dict[str, Any] = {}
    for field, var in (
        ("quests", "BQ_QUESTS_PATH"),
        ("complete", "BQ_COMPLETE_TEXT"),
        ("output", "BQ_OUTPUT_DIR"),
        ("lang_path", "BQ_LANG_PATH"),
        ("lang_prefix", "BQ_LANG_PREFIX"),
    ):
        raw = env.get(var, "")
        if raw.strip():
            out[field] = raw
    if env.get("BQ_CHANGE", "").strip():
        out["change"] = env_flag("BQ_CHANGE", default=True, environ=env)
    return out


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML options file. Keys use the flag names with underscores."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Config file {path} is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    logger.debug("Loaded %d option(s) from %s", len(data), path)
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def load_split_settings(
    overrides: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> SplitSettings:
    """Resolve settings with precedence: overrides > config file > env > defaults.

    ``None`` values in ``overrides`` mean "not given on the command line".
    """
    merged: dict[str, Any] = settings_from_env(environ)
    if config_path is not None:
        merged.update(load_config_file(config_path))
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    return SplitSettings.model_validate(merged)
