"""
Validation framework for option quotes.

Provides HALT/WARN/PASS gates:
- validate_no_arbitrage: Model-free call/put price bounds
- validate_put_call_parity: C - P = S·e^(-qT) - K·e^(-rT)
- validate_option_quote: All checks for a call/put pair
"""

from annuity_core.validation.gates import (
    GateStatus,
    ValidationOutcome,
    ValidationReport,
    validate_no_arbitrage,
    validate_option_quote,
    validate_put_call_parity,
)

__all__ = [
    "GateStatus",
    "ValidationOutcome",
    "ValidationReport",
    "validate_no_arbitrage",
    "validate_put_call_parity",
    "validate_option_quote",
]
