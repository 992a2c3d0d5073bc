"""
Error taxonomy for the pricing core.

All errors subclass ValueError so callers that already guard pricing calls
with ``except ValueError`` keep working.

- ConstructionError: payoff parameters outside their economic range
- DomainError: Black-Scholes input violates a mathematical precondition

Validation verdicts (HALT/WARN/PASS) are NOT exceptions. They are returned
as values by annuity_core.validation.gates.
"""


class AnnuityCoreError(ValueError):
    """Base class for all pricing-core errors."""


class ConstructionError(AnnuityCoreError):
    """
    Payoff parameters violate the variant's declared range.

    Raised at construction time, never at calculation time.
    """


class DomainError(AnnuityCoreError):
    """
    Pricing input outside the model's mathematical domain.

    [T1] Black-Scholes requires S > 0, K > 0, σ >= 0, T >= 0.
    Inputs are never silently clamped.
    """
