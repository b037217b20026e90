import logging
import os

from pydantic import BaseModel, Field, field_validator

__all__ = ["Settings", "settings"]


def _getenv(name: str) -> str | None:
    # Empty variables count as unset
    value = os.getenv(name)
    return value if value else None


class Settings(BaseModel):
    LOG_LEVEL: str = Field(
        "WARNING", description="Level of the package logger (DEBUG, WARN, ...)."
    )
    TRACE: bool = Field(
        False, description="Log every step as it is appended to a pipeline."
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        known = logging.getLevelNamesMapping()
        if level not in known:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(sorted(known))}, got '{value}'."
            )
        return level

    @classmethod
    def load(cls) -> "Settings":
        """Build settings from ``PAIRFLOW_*`` environment variables.

        ``PAIRFLOW_LOG_LEVEL`` falls back to the generic ``LOG_LEVEL``.
        """
        values: dict = {}

        log_level = _getenv("PAIRFLOW_LOG_LEVEL") or _getenv("LOG_LEVEL")
        if log_level:
            values["LOG_LEVEL"] = log_level

        trace = _getenv("PAIRFLOW_TRACE")
        if trace is not None:
            values["TRACE"] = trace

        return cls(**values)


settings = Settings.load()
