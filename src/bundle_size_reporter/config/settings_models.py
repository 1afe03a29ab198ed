from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class UserSettings(BaseModel):
    output_path: str = Field(default="dist", min_length=1)
    source_path: str = Field(default="src", min_length=1)
    bundler_command: str = Field(default="npx webpack --json", min_length=1)
    log_level: str | None = Field(default=None)
    build_timeout_seconds: int | None = Field(default=None, ge=1)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = str(value or "").strip().lower()
        if not normalized:
            return None
        if normalized not in {"debug", "info", "warn", "warning", "error"}:
            raise ValueError("LOG_LEVEL must be one of: debug, info, warn, error")
        return "warning" if normalized == "warn" else normalized
