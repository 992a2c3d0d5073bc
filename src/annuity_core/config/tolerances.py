"""
Centralized tolerance framework for the pricing core.

All tolerances are derived from precision requirements, not ad hoc tuning.
Values are absolute and expressed in price units (or decimal return units
for payoff tolerances).

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Cross-Check): Finite-difference and textbook precision bounds
    Gate (Validation): PASS/WARN/HALT bands used by validation.gates

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Hull (2021) Ch. 15 - Options pricing precision requirements
"""

from typing import Final

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================
# For closed-form solutions where machine precision is achievable.
# Derived from: machine_epsilon (~2.2e-16) × safety_factor

#: No-arbitrage bounds: option price in [0, S] or [0, K*exp(-rT)]
#: Tolerance: ~1e-10 allows for float64 accumulation errors
#: Also the PASS band of both validation gates.
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity: C - P = S*exp(-qT) - K*exp(-rT)
#: Tolerance: sqrt(2 * machine_epsilon) * 10^4 safety factor
#: Well-conditioned for typical S, K, r, q, T values
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8

#: Greeks numerical stability
#: Tolerance: sqrt(machine_epsilon) ≈ 1.5e-8
GREEKS_NUMERICAL_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 2: Cross-Check Tolerances
# =============================================================================

#: Analytical Greeks vs central finite differences of the price.
#: Truncation error O(h²) with h ~ 1e-4, plus cancellation ~ eps/h.
GREEKS_FINITE_DIFFERENCE_TOLERANCE: Final[float] = 1e-5

#: Hull textbook example tolerance
#: Hull examples quoted to 2 decimal places; allow 0.02 absolute
HULL_EXAMPLE_TOLERANCE: Final[float] = 0.02


# =============================================================================
# Validation Gate Tolerances
# =============================================================================
# deviation <= PASS band            -> PASS
# PASS band < deviation <= HALT     -> WARN  (floating-point noise, surfaced)
# deviation > HALT                  -> HALT  (economically wrong number)

#: WARN/HALT boundary for model-free option bounds
NO_ARBITRAGE_HALT_TOLERANCE: Final[float] = 1e-6

#: WARN/HALT boundary for put-call parity
PUT_CALL_PARITY_HALT_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Domain-Specific Tolerances
# =============================================================================

#: FIA/RILA payoff floor enforcement: credited return >= floor
#: Very tight since floor is a hard contract guarantee
FLOOR_ENFORCEMENT_TOLERANCE: Final[float] = 1e-10

#: Buffer absorption tolerance: buffer should fully absorb losses up to buffer level
BUFFER_ABSORPTION_TOLERANCE: Final[float] = 1e-10

#: Cap enforcement tolerance: credited return <= cap
CAP_ENFORCEMENT_TOLERANCE: Final[float] = 1e-10


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "greeks_numerical": GREEKS_NUMERICAL_TOLERANCE,
    # Tier 2: Cross-Check
    "greeks_finite_difference": GREEKS_FINITE_DIFFERENCE_TOLERANCE,
    "hull_example": HULL_EXAMPLE_TOLERANCE,
    # Validation gates
    "no_arbitrage_halt": NO_ARBITRAGE_HALT_TOLERANCE,
    "put_call_parity_halt": PUT_CALL_PARITY_HALT_TOLERANCE,
    # Domain-Specific
    "floor_enforcement": FLOOR_ENFORCEMENT_TOLERANCE,
    "buffer_absorption": BUFFER_ABSORPTION_TOLERANCE,
    "cap_enforcement": CAP_ENFORCEMENT_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
