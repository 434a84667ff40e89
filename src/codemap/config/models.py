"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CODEMAP__SECTION__KEY)
3. Repo YAML (.codemap/config.yaml)
4. Global YAML (~/.config/codemap/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CODEMAP__<SECTION>__<KEY>=<VALUE>

Examples:
    CODEMAP__LOGGING__LEVEL=DEBUG
    CODEMAP__INDEXER__MAX_WORKERS=4
    CODEMAP__SCORING__DEPTH_DECAY=0.75
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CODEMAP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every skipped or failed file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexerConfig(BaseModel):
    """Per-file extraction configuration.

    Env vars:
        CODEMAP__INDEXER__MAX_WORKERS: Parallel parse/extract workers
        CODEMAP__INDEXER__MAX_FILE_SIZE_MB: Skip files larger than this
    """

    max_workers: int | None = Field(
        default=None,
        description="Parallel extraction workers. None sizes the pool to the CPU count. "
        "1 runs extraction sequentially in the calling thread.",
    )
    max_file_size_mb: float = Field(
        default=10,
        description="Files larger than this (MB) contribute no definitions or references.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class ScoringConfig(BaseModel):
    """Definition scoring configuration.

    A file one directory deeper is scaled by ``depth_decay``. The density
    bonus is capped below the gap between two adjacent depths, so a
    shallower definition always outranks a deeper one.

    Env vars:
        CODEMAP__SCORING__DEPTH_DECAY: Per-directory score multiplier
        CODEMAP__SCORING__DENSITY_WEIGHT: Maximum bonus for sparse files
        CODEMAP__SCORING__CALL_BOOST: Scale scores by external call counts
        CODEMAP__SCORING__PRECISION: Significant digits kept in reported scores
    """

    depth_decay: float = Field(
        default=0.8,
        description="Score multiplier per path segment. Must be in (0, 1).",
    )
    density_weight: float = Field(
        default=0.2,
        description="Maximum relative bonus for files with few definitions per line.",
    )
    call_boost: bool = Field(
        default=True,
        description="Multiply reported scores by 1 + ln(1 + external call count).",
    )
    precision: int = Field(
        default=6,
        description="Significant digits kept in reported scores. A token whose "
        "definers would round to equal scores is reported unrounded.",
    )

    @field_validator("depth_decay")
    @classmethod
    def validate_depth_decay(cls, v: float) -> float:
        if not (0 < v < 1):
            raise ValueError(f"depth_decay must be in (0, 1), got {v}")
        return v

    @field_validator("precision")
    @classmethod
    def validate_precision(cls, v: int) -> int:
        if not (1 <= v <= 15):
            raise ValueError(f"precision must be 1-15, got {v}")
        return v

    @model_validator(mode="after")
    def validate_density_bound(self) -> "ScoringConfig":
        limit = (1 - self.depth_decay) / self.depth_decay
        if not (0 <= self.density_weight < limit):
            raise ValueError(
                f"density_weight must be in [0, {limit:.4f}) for depth_decay "
                f"{self.depth_decay}, got {self.density_weight}"
            )
        return self


class CodeMapConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
