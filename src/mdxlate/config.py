"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mdxlate.core.errors import ConfigError
from mdxlate.core.extract.blocks import ADMONITION_KINDS
from mdxlate.core.utils.paths import ASSET_PREFIX
from mdxlate.core.utils.tokens import RESERVED_WORDS, check_reserved_words


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDXLATE_"


class Settings(BaseModel):
    app_name:    str = "mdxlate"
    input_dir:   Optional[str] = Field(default=None, description="Source tree of .md/.mdx documents")
    output_dir:  str = Field(default="dist", description="Root for preprocess/, build/ and the build report")
    model:       str = Field(default="gpt-4o-mini", description="Chat completion model name")
    prompt:      Optional[str] = Field(default=None, description="System prompt sent with every document")
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    timeout:     float = Field(default=120.0, gt=0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=2, ge=0, description="Client-side retries on transient API errors")
    workers:     int = Field(default=1, ge=1, description="Documents processed concurrently")
    reserved_words:   list[str] = Field(default=list(RESERVED_WORDS), description="Literal words kept untranslated")
    admonition_kinds: list[str] = Field(default=list(ADMONITION_KINDS), min_length=1)
    asset_prefix: str = Field(default=ASSET_PREFIX, description="Static asset prefix rewritten on output")
    asset_depth:  int = Field(default=2, ge=0, description="Directory levels prepended to asset_prefix; 0 disables")
    report_name:  str = Field(default="ai-build-report.json")
    log_level:    str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("reserved_words")
    @classmethod
    def reserved_words_safe(cls, v: list[str]) -> list[str]:
        return check_reserved_words(v)


def _split_list(val: str) -> list[str]:
    return [v.strip() for v in val.split(",") if v.strip()]


def load_config(overrides: dict[str, Any] = None, config_file: str = None) -> Settings:
    """Load Settings from config.yaml, then MDXLATE_<FIELD> env vars, then non-None CLI overrides.

    List fields accept comma-separated env values.
    """
    path = Path(config_file or CONFIG_FILE)
    if config_file and not path.exists():
        raise ValueError(f"Config file not found: {path}")

    data: dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")

    for name, info in Settings.model_fields.items():
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = _split_list(val) if info.annotation == list[str] else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def require(settings: Settings, *fields: str) -> None:
    """Raise ConfigError naming every required field that is unset or blank."""
    missing = [f for f in fields if not str(getattr(settings, f) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required configuration option(s): {', '.join(missing)}")
