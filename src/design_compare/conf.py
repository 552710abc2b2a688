from __future__ import annotations

import functools
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from design_compare import __version__

ENV_PREFIX = "DESIGN_COMPARE_"

DEFAULT_SUPPORTED_FORMATS = ("PNG", "JPEG", "WEBP", "GIF", "TIFF", "BMP")

ENV_FIELDS = {
    "THRESHOLD": "threshold",
    "FORMATS": "supported_formats",
    "INCLUDE_AA": "include_aa",
    "DIFF_ALPHA": "diff_alpha",
    "LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    # Pillow format identifiers; detection is by content, never by extension.
    supported_formats: tuple[str, ...] = DEFAULT_SUPPORTED_FORMATS
    include_aa: bool = False
    diff_alpha: float = Field(default=0.1, ge=0.0, le=1.0)
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    server_name: str = "mcp-design-comparison"
    server_version: str = __version__

    @field_validator("supported_formats", mode="before")
    @classmethod
    def _split_formats(cls, value: object) -> object:
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple)):
            formats = tuple(str(part).strip().upper() for part in value)
            if not formats:
                raise ValueError("at least one image format must be supported")
            return formats
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    if environ is None:
        environ = os.environ

    values: dict[str, object] = {}
    for name, field in ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + name)
        if raw:
            values[field] = raw
    if environ.get("SENTRY_DSN"):
        values["sentry_dsn"] = environ["SENTRY_DSN"]

    return Settings(**values)


@functools.cache
def get_settings() -> Settings:
    return settings_from_env()
