"""Application settings loaded from .env via pydantic-settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class OverlaySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    output_root: Path = Field(default=Path("outputs"), validation_alias="GLYPH_TRAILS_OUTPUTS")

    @field_validator("output_root", mode="before")
    @classmethod
    def _expand_root(cls, value) -> Path:
        return Path(value).expanduser().resolve()


_settings: Optional[OverlaySettings] = None


def get_settings() -> OverlaySettings:
    global _settings
    if _settings is None:
        _settings = OverlaySettings()
        logger.debug("Output root resolved to %s", _settings.output_root)
    return _settings


def output_root() -> Path:
    root = get_settings().output_root
    root.mkdir(parents=True, exist_ok=True)
    return root


def reset_settings_cache() -> None:
    global _settings
    _settings = None
