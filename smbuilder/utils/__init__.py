"""Utility modules for smbuilder."""

from smbuilder.utils.files import OutputFile, OutputFiles, atomic_write
from smbuilder.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    log_stage_timing,
    set_stage,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_stage",
    "log_stage_timing",
    # Files
    "OutputFile",
    "OutputFiles",
    "atomic_write",
]
