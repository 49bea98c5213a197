"""Configuration management for hitboxer.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- TracingConfig: Alpha threshold and trace iteration cap
- ToleranceConfig: Simplification tolerance per accuracy tier
- DecompositionConfig: Convex decomposition and optimization settings
- ProcessingConfig: Sprite sheet processing settings
- LoggingConfig: Logging settings
- HitboxerSettings: Main application settings
"""

from hitboxer.config.settings import (
    DecompositionConfig,
    HitboxerSettings,
    LoggingConfig,
    ProcessingConfig,
    ToleranceConfig,
    TracingConfig,
    get_default_settings,
)

__all__ = [
    "DecompositionConfig",
    "HitboxerSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "ToleranceConfig",
    "TracingConfig",
    "get_default_settings",
]
