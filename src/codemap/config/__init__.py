"""Config module exports."""

from codemap.config.loader import load_config
from codemap.config.models import (
    CodeMapConfig,
    IndexerConfig,
    LoggingConfig,
    LogOutputConfig,
    ScoringConfig,
)

__all__ = [
    "load_config",
    "CodeMapConfig",
    "IndexerConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ScoringConfig",
]
