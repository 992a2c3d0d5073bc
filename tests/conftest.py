"""
Centralized pytest fixtures for the annuity-core test suite.

This module provides shared fixtures used across all test categories:
- anti_patterns/
- unit/
- properties/
- validation/
- integration/

Fixture Categories:
1. Tolerance tiers - Precision expected per test category
2. Market Parameters - Standard market conditions for option pricing
3. Hull Examples - Textbook examples for validation
4. Payoff Fixtures - One configured instance of every crediting variant
5. Validation Config - Isolation from environment overrides
"""

from dataclasses import dataclass

import numpy as np
import pytest

from annuity_core.config.settings import (
    ARBITRAGE_HALT_TOL_ENV,
    ARBITRAGE_PASS_TOL_ENV,
    PARITY_HALT_TOL_ENV,
    PARITY_PASS_TOL_ENV,
    ValidationConfig,
)
from annuity_core.options.payoffs import (
    BufferPayoff,
    BufferWithFloorPayoff,
    CappedCallPayoff,
    FloorPayoff,
    ParticipationPayoff,
    SpreadPayoff,
    StepRateBufferPayoff,
    TriggerPayoff,
)

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Anti-pattern tests: Very tight (fundamental violations)
    anti_pattern: float = 1e-10

    # Validation tests: Library precision
    validation: float = 1e-6

    # Integration tests: Workflow correctness
    integration: float = 1e-4


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class MarketParams:
    """Standard market parameters for option pricing tests."""

    spot: float = 100.0
    strike: float = 100.0
    rate: float = 0.05
    dividend: float = 0.02
    volatility: float = 0.20
    time_to_expiry: float = 1.0

    def as_args(self) -> tuple[float, ...]:
        """Positional arguments in Black-Scholes order."""
        return (
            self.spot,
            self.strike,
            self.rate,
            self.dividend,
            self.volatility,
            self.time_to_expiry,
        )


@pytest.fixture
def market_params() -> MarketParams:
    """Standard ATM market parameters."""
    return MarketParams()


# =============================================================================
# HULL TEXTBOOK EXAMPLES
# =============================================================================

@dataclass(frozen=True)
class HullExample:
    """A textbook example from Hull (2021) Options, Futures, and Other Derivatives."""

    name: str
    chapter: int
    spot: float
    strike: float
    rate: float
    dividend: float
    volatility: float
    time_to_expiry: float
    expected_call: float | None = None
    expected_put: float | None = None
    expected_delta: float | None = None


# Hull (2021) Chapter 15, Example 15.6
HULL_EXAMPLE_15_6 = HullExample(
    name="Hull Example 15.6",
    chapter=15,
    spot=42.0,
    strike=40.0,
    rate=0.10,
    dividend=0.0,
    volatility=0.20,
    time_to_expiry=0.5,
    expected_call=4.76,
    expected_put=0.81,
)

# Hull (2021) Chapter 19 Greeks examples
HULL_EXAMPLE_19_1 = HullExample(
    name="Hull Example 19.1 (Delta)",
    chapter=19,
    spot=49.0,
    strike=50.0,
    rate=0.05,
    dividend=0.0,
    volatility=0.20,
    time_to_expiry=0.3846,  # 20 weeks
    expected_delta=0.522,
)


@pytest.fixture
def hull_example_15_6() -> HullExample:
    """Hull Chapter 15 Example 15.6: European call on non-dividend stock."""
    return HULL_EXAMPLE_15_6


@pytest.fixture
def hull_example_19_1() -> HullExample:
    """Hull Chapter 19 Example 19.1: Delta calculation."""
    return HULL_EXAMPLE_19_1


# =============================================================================
# PAYOFF FIXTURES
# =============================================================================

ALL_PAYOFFS = (
    CappedCallPayoff(cap_rate=0.10),
    ParticipationPayoff(participation_rate=0.80, cap_rate=0.15),
    SpreadPayoff(spread_rate=0.02),
    TriggerPayoff(trigger_rate=0.05),
    BufferPayoff(buffer_rate=0.10, cap_rate=0.20),
    FloorPayoff(floor_rate=-0.10, cap_rate=0.20),
    BufferWithFloorPayoff(buffer_rate=0.10, floor_rate=-0.20, cap_rate=0.15),
    StepRateBufferPayoff(
        tier1_buffer=0.10, tier2_buffer=0.10, tier2_protection=0.50, cap_rate=0.12
    ),
)


@pytest.fixture(params=ALL_PAYOFFS, ids=lambda p: type(p).__name__)
def any_payoff(request):
    """Every crediting variant, one configured instance each."""
    return request.param


@pytest.fixture
def index_return_grid() -> np.ndarray:
    """Dense grid of index returns over [-100%, +100%], including 0."""
    return np.concatenate([np.linspace(-1.0, 1.0, 401), [0.0, -0.10, -0.20, 0.10]])


# =============================================================================
# VALIDATION CONFIG
# =============================================================================

@pytest.fixture
def clean_tolerance_env(monkeypatch):
    """Remove validation tolerance overrides from the environment."""
    for env_var in (
        ARBITRAGE_PASS_TOL_ENV,
        ARBITRAGE_HALT_TOL_ENV,
        PARITY_PASS_TOL_ENV,
        PARITY_HALT_TOL_ENV,
    ):
        monkeypatch.delenv(env_var, raising=False)
    return monkeypatch


@pytest.fixture
def validation_config(clean_tolerance_env) -> ValidationConfig:
    """Default validation tolerances, independent of the environment."""
    return ValidationConfig()


# =============================================================================
# NUMPY RANDOM GENERATOR
# =============================================================================

@pytest.fixture
def reproducible_rng():
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
