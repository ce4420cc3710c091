"""Service configuration.

Values come from environment variables prefixed ``GANGSHEETS_`` and from a
``.env`` file in the working directory, which is loaded with python-dotenv
before the settings object is built.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gangsheets.domain.units import to_inches
from gangsheets.domain.value_objects import PackingSettings

ENV_PATH = Path.cwd() / ".env"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class AppSettings(BaseSettings):
    """Runtime configuration of the gangsheet service."""

    # --- App ---
    app_name: str = "PrintNest Gangsheets"
    log_level: str = "INFO"

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./gangsheets.db"

    # --- Rendered files ---
    storage_dir: Path = Path("./storage")
    public_base_url: str = "http://127.0.0.1:8000/files"

    # --- Design lookup ---
    design_service_url: str | None = None
    design_service_timeout: float = Field(default=10.0, gt=0)

    # --- Rendering ---
    render_timeout_seconds: float = Field(default=120.0, gt=0)
    render_mode: Literal["background", "inline"] = "background"

    # --- System packing defaults (inches) ---
    default_roll_width: float = Field(default=22.0, gt=0)
    default_roll_length: float | None = Field(default=60.0, gt=0)
    default_dpi: int = Field(default=300, gt=0)
    default_gap: float = Field(default=0.3, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="GANGSHEETS_",
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def system_packing_settings(self) -> PackingSettings:
        """Fallback packing settings for tenants without stored defaults."""
        defaults = PackingSettings.default()
        return PackingSettings.from_inches(
            roll_width=self.default_roll_width,
            roll_length=self.default_roll_length,
            dpi=self.default_dpi,
            gap=self.default_gap,
            border=defaults.border,
            border_size=to_inches(defaults.border_size),
            border_color=defaults.border_color,
        )


@lru_cache
def get_app_settings() -> AppSettings:
    """Load settings once per process."""
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH)
    return AppSettings()


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger for the CLI and the ASGI app."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
