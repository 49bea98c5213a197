"""Utility functions for hitboxer.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics and progress event logging
"""

from hitboxer.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
