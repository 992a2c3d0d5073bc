"""
Frozen configuration settings for the pricing core.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Validation tolerances can be overridden per process through environment
variables; they are resolved once, when the config object is built.
"""

import math
import os
from dataclasses import dataclass, field

from annuity_core.config.tolerances import (
    ANTI_PATTERN_TOLERANCE,
    NO_ARBITRAGE_HALT_TOLERANCE,
    PUT_CALL_PARITY_HALT_TOLERANCE,
)

# =============================================================================
# Environment Overrides
# =============================================================================

ARBITRAGE_PASS_TOL_ENV = "ANNUITY_CORE_ARBITRAGE_PASS_TOL"
ARBITRAGE_HALT_TOL_ENV = "ANNUITY_CORE_ARBITRAGE_HALT_TOL"
PARITY_PASS_TOL_ENV = "ANNUITY_CORE_PARITY_PASS_TOL"
PARITY_HALT_TOL_ENV = "ANNUITY_CORE_PARITY_HALT_TOL"


def _resolve_tolerance(env_var: str, default: float) -> float:
    """
    Resolve a tolerance with environment variable override.

    Priority:
    1. Environment variable (if set and non-empty)
    2. Default from config/tolerances.py

    Raises
    ------
    ValueError
        If the environment value is not a number
    """
    raw = os.environ.get(env_var)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(
            f"CRITICAL: {env_var} must be a number, got {raw!r}"
        ) from exc


# =============================================================================
# Option Pricing Configuration
# =============================================================================

@dataclass(frozen=True)
class OptionConfig:
    """
    Immutable option pricing configuration. [T1: Academic standard]

    Attributes
    ----------
    vega_scale : float
        Vega is reported per 1 vol point (dV/dσ × 0.01)
    rho_scale : float
        Rho is reported per 1 rate point (dV/dr × 0.01)

    Note
    ----
    Theta is reported per year as -dV/dT (negative for time decay).
    """

    vega_scale: float = 0.01
    rho_scale: float = 0.01


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable validation gate configuration.

    Each check maps an absolute deviation to a verdict:
    deviation <= pass tolerance -> PASS, <= halt tolerance -> WARN,
    otherwise HALT.

    Attributes
    ----------
    arbitrage_pass_tolerance : float
        PASS band for model-free option bounds
    arbitrage_halt_tolerance : float
        WARN/HALT boundary for model-free option bounds
    parity_pass_tolerance : float
        PASS band for put-call parity
    parity_halt_tolerance : float
        WARN/HALT boundary for put-call parity
    """

    arbitrage_pass_tolerance: float = field(
        default_factory=lambda: _resolve_tolerance(ARBITRAGE_PASS_TOL_ENV, ANTI_PATTERN_TOLERANCE)
    )
    arbitrage_halt_tolerance: float = field(
        default_factory=lambda: _resolve_tolerance(
            ARBITRAGE_HALT_TOL_ENV, NO_ARBITRAGE_HALT_TOLERANCE
        )
    )
    parity_pass_tolerance: float = field(
        default_factory=lambda: _resolve_tolerance(PARITY_PASS_TOL_ENV, ANTI_PATTERN_TOLERANCE)
    )
    parity_halt_tolerance: float = field(
        default_factory=lambda: _resolve_tolerance(
            PARITY_HALT_TOL_ENV, PUT_CALL_PARITY_HALT_TOLERANCE
        )
    )

    def __post_init__(self) -> None:
        """Validate tolerance bands."""
        _check_band("arbitrage", self.arbitrage_pass_tolerance, self.arbitrage_halt_tolerance)
        _check_band("parity", self.parity_pass_tolerance, self.parity_halt_tolerance)


def _check_band(name: str, pass_tolerance: float, halt_tolerance: float) -> None:
    if not (math.isfinite(pass_tolerance) and math.isfinite(halt_tolerance)):
        raise ValueError(
            f"CRITICAL: {name} tolerances must be finite, "
            f"got pass={pass_tolerance}, halt={halt_tolerance}"
        )
    if pass_tolerance < 0:
        raise ValueError(
            f"CRITICAL: {name} pass tolerance must be >= 0, got {pass_tolerance}"
        )
    if halt_tolerance < pass_tolerance:
        raise ValueError(
            f"CRITICAL: {name} halt tolerance ({halt_tolerance}) cannot be below "
            f"pass tolerance ({pass_tolerance})"
        )


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from annuity_core.config.settings import SETTINGS
    >>> SETTINGS.validation.parity_halt_tolerance
    1e-06
    """

    option: OptionConfig = field(default_factory=OptionConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)


# Singleton instance - import this
SETTINGS = Settings()
