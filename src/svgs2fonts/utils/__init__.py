"""Utility functions for svgs2fonts.

This module provides:

- Logging setup and configuration
- Build phase timing
"""

from svgs2fonts.utils.logging import (
    PerformanceTracker,
    PhaseTiming,
    configure_logging,
)

__all__ = [
    "PerformanceTracker",
    "PhaseTiming",
    "configure_logging",
]
