from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from .paths import CODEOWNERS_PATH_CANDIDATES, normalize_relpath

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class OwnershipConfig(BaseModel):
    root: str = "."
    candidates: tuple[str, ...] = Field(default=CODEOWNERS_PATH_CANDIDATES)
    include_threshold: int = Field(default=3, ge=1)
    log_level: str = "WARNING"

    @field_validator("candidates")
    @classmethod
    def _normalize_candidates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        out = tuple(normalize_relpath(c) for c in value)
        if not out or any(not c for c in out):
            raise ValueError("candidates must be non-empty relative file paths")
        return out

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level


def configure_logging(log_level: str = "WARNING") -> None:
    """Route all loggers through a single stream handler on the root logger."""
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
