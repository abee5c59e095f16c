"""
Runtime Configuration Module

Provides configuration loading for the eligibility client.
"""

from .runtime import (
    ZERO_ROOT,
    ArtifactConfig,
    CacheConfig,
    HttpConfig,
    PhaseConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ZERO_ROOT",
    "ArtifactConfig",
    "CacheConfig",
    "HttpConfig",
    "PhaseConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
