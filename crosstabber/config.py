"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """The nearest .env at or above the working directory."""
    cwd = Path.cwd().resolve()
    for directory in (cwd, *cwd.parents):
        if (directory / ".env").is_file():
            return directory / ".env"
    return None


class CrosstabberSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CROSSTABBER_",
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Analysis
    apply_templates: bool = True

    # Output
    output_dir: Path | None = None  # log file goes to <output_dir>/.crosstabber/
    json_indent: int = Field(default=2, ge=0)
    max_label_length: int = Field(default=35, ge=4)  # chart labels


def load_settings(**overrides: object) -> CrosstabberSettings:
    """Load settings with optional CLI overrides.

    ``None`` overrides are dropped so an unset CLI flag never masks a value
    from the environment or .env file.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return CrosstabberSettings(**overrides)  # type: ignore[arg-type]
