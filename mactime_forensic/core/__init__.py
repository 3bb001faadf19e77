"""Core modules for timeline generation.

This package provides the timeline builder that chains the parser and the
timeline stages, along with run configuration loading.
"""

from mactime_forensic.core.builder import (
    TimelineBuilder,
    TimelineResult,
    generate_timeline,
)
from mactime_forensic.core.config import (
    ENV_VAR_FILTER,
    ENV_VAR_SORT,
    TimelineConfig,
    load_config,
    load_config_file,
)

__all__ = [
    # Builder
    "TimelineBuilder",
    "TimelineResult",
    "generate_timeline",
    # Configuration
    "ENV_VAR_FILTER",
    "ENV_VAR_SORT",
    "TimelineConfig",
    "load_config",
    "load_config_file",
]
