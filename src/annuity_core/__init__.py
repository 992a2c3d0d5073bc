"""
annuity-core: Option pricing, crediting payoffs and no-arbitrage gates
for FIA and RILA products.

Quick Start
-----------
>>> from annuity_core import black_scholes_call, BufferPayoff, validate_no_arbitrage
>>> price = black_scholes_call(100.0, 100.0, 0.05, 0.02, 0.20, 1.0)
>>> BufferPayoff(buffer_rate=0.10).calculate(-0.08).credited_return
0.0

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Options Pricing
# =============================================================================
from annuity_core.options.pricing import (
    BSGreeks,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
)

# =============================================================================
# Payoffs
# =============================================================================
from annuity_core.options.payoffs import (
    BufferPayoff,
    BufferWithFloorPayoff,
    CappedCallPayoff,
    CreditingMethod,
    FloorPayoff,
    OptionType,
    ParticipationPayoff,
    PayoffFlag,
    PayoffResult,
    PayoffSpec,
    SpreadPayoff,
    StepRateBufferPayoff,
    TriggerPayoff,
    calculate,
    calculate_vectorized,
)

# =============================================================================
# Validation
# =============================================================================
from annuity_core.validation import (
    GateStatus,
    ValidationOutcome,
    ValidationReport,
    validate_no_arbitrage,
    validate_option_quote,
    validate_put_call_parity,
)

# =============================================================================
# Configuration and Errors
# =============================================================================
from annuity_core.config.settings import SETTINGS, ValidationConfig
from annuity_core.errors import AnnuityCoreError, ConstructionError, DomainError

__all__ = [
    "__version__",
    # Options pricing
    "BSGreeks",
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    "black_scholes_greeks",
    # Payoffs
    "OptionType",
    "CreditingMethod",
    "PayoffFlag",
    "PayoffResult",
    "PayoffSpec",
    "CappedCallPayoff",
    "ParticipationPayoff",
    "SpreadPayoff",
    "TriggerPayoff",
    "BufferPayoff",
    "FloorPayoff",
    "BufferWithFloorPayoff",
    "StepRateBufferPayoff",
    "calculate",
    "calculate_vectorized",
    # Validation
    "GateStatus",
    "ValidationOutcome",
    "ValidationReport",
    "validate_no_arbitrage",
    "validate_put_call_parity",
    "validate_option_quote",
    # Configuration and errors
    "SETTINGS",
    "ValidationConfig",
    "AnnuityCoreError",
    "ConstructionError",
    "DomainError",
]
