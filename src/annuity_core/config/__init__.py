"""
Configuration: frozen settings and centralized tolerances.
"""

from annuity_core.config.settings import (
    SETTINGS,
    OptionConfig,
    Settings,
    ValidationConfig,
)
from annuity_core.config.tolerances import TOLERANCE_REGISTRY, get_tolerance

__all__ = [
    "SETTINGS",
    "OptionConfig",
    "Settings",
    "ValidationConfig",
    "TOLERANCE_REGISTRY",
    "get_tolerance",
]
