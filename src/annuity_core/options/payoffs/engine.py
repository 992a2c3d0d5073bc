"""
Payoff calculation engine.

The crediting formulas form a closed set of eight frozen dataclasses.
calculate() and calculate_vectorized() dispatch over exactly that set;
anything else is rejected with TypeError rather than duck-typed.
"""

from typing import Union

import numpy as np

from annuity_core.options.payoffs.base import PayoffResult
from annuity_core.options.payoffs.fia import (
    CappedCallPayoff,
    ParticipationPayoff,
    SpreadPayoff,
    TriggerPayoff,
)
from annuity_core.options.payoffs.rila import (
    BufferPayoff,
    BufferWithFloorPayoff,
    FloorPayoff,
    StepRateBufferPayoff,
)

PayoffSpec = Union[
    CappedCallPayoff,
    ParticipationPayoff,
    SpreadPayoff,
    TriggerPayoff,
    BufferPayoff,
    FloorPayoff,
    BufferWithFloorPayoff,
    StepRateBufferPayoff,
]

PAYOFF_VARIANTS: tuple[type, ...] = (
    CappedCallPayoff,
    ParticipationPayoff,
    SpreadPayoff,
    TriggerPayoff,
    BufferPayoff,
    FloorPayoff,
    BufferWithFloorPayoff,
    StepRateBufferPayoff,
)


def _require_variant(payoff) -> None:
    # Exact type match: subclasses are not part of the closed set
    if type(payoff) not in PAYOFF_VARIANTS:
        raise TypeError(
            f"CRITICAL: unsupported payoff type {type(payoff).__name__}. "
            f"Expected one of: {', '.join(v.__name__ for v in PAYOFF_VARIANTS)}"
        )


def calculate(payoff: PayoffSpec, index_return: float) -> PayoffResult:
    """
    Credit one period's index return under a payoff specification.

    Parameters
    ----------
    payoff : PayoffSpec
        One of the eight crediting-formula variants
    index_return : float
        Raw index return (decimal, e.g., 0.15 = +15%)

    Returns
    -------
    PayoffResult
        Credited return, raw return and diagnostic flags

    Raises
    ------
    TypeError
        If payoff is not a member of the closed variant set

    Examples
    --------
    >>> calculate(CappedCallPayoff(cap_rate=0.10), 0.15).credited_return
    0.1
    """
    _require_variant(payoff)
    return payoff.calculate(index_return)


def calculate_vectorized(payoff: PayoffSpec, index_returns) -> np.ndarray:
    """
    Credit an array of index returns under a payoff specification.

    Element-wise identical to calling calculate() in a loop.

    Parameters
    ----------
    payoff : PayoffSpec
        One of the eight crediting-formula variants
    index_returns : array_like
        Raw index returns (decimal)

    Returns
    -------
    np.ndarray
        Credited returns, same shape as index_returns
    """
    _require_variant(payoff)
    returns = np.asarray(index_returns, dtype=float)
    return np.asarray(payoff.calculate_vectorized(returns), dtype=float)
