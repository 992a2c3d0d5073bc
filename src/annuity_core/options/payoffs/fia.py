"""
FIA (Fixed Indexed Annuity) crediting payoffs.

Implements payoffs for FIA crediting methods:
- Cap: Point-to-point with maximum return cap
- Participation: Partial participation in index returns
- Spread: Index return minus spread/margin
- Trigger: Performance triggered fixed rate

Each payoff is an immutable value object. Parameters are validated at
construction and calculate() is a pure function of the index return.

[T1] FIA payoffs default to a 0% floor (principal protection).
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from annuity_core.errors import ConstructionError
from annuity_core.options.payoffs.base import (
    CreditingMethod,
    PayoffFlag,
    PayoffResult,
    _clamp,
)


def _validate_optional_cap(cap_rate: Optional[float], floor_rate: float) -> None:
    if cap_rate is None:
        return
    if cap_rate < 0:
        raise ConstructionError(f"CRITICAL: cap_rate must be >= 0 if provided, got {cap_rate}")
    if floor_rate > cap_rate:
        raise ConstructionError(
            f"CRITICAL: floor_rate ({floor_rate}) cannot exceed cap_rate ({cap_rate})"
        )


def _validate_floor(floor_rate: float) -> None:
    if floor_rate < -1:
        raise ConstructionError(f"CRITICAL: floor_rate cannot be < -1 (-100%), got {floor_rate}")


@dataclass(frozen=True)
class CappedCallPayoff:
    """
    Point-to-point with cap crediting method.

    [T1] Payoff = max(floor, min(index_return, cap))

    Parameters
    ----------
    cap_rate : float
        Maximum return cap (decimal, e.g., 0.10 = 10% cap)
    floor_rate : float, default 0.0
        Minimum return floor (typically 0% for principal protection)

    Examples
    --------
    >>> payoff = CappedCallPayoff(cap_rate=0.10)
    >>> payoff.calculate(0.15).credited_return  # 15% index return
    0.1
    """

    cap_rate: float
    floor_rate: float = 0.0

    method: ClassVar[CreditingMethod] = CreditingMethod.CAP

    def __post_init__(self) -> None:
        if self.cap_rate < 0:
            raise ConstructionError(f"CRITICAL: cap_rate must be >= 0, got {self.cap_rate}")
        _validate_floor(self.floor_rate)
        if self.floor_rate > self.cap_rate:
            raise ConstructionError(
                f"CRITICAL: floor_rate ({self.floor_rate}) cannot exceed cap_rate ({self.cap_rate})"
            )

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return."""
        return self.floor_rate, self.cap_rate

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate capped call payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with cap/floor applied
        """
        credited_return, flags = _clamp(index_return, self.floor_rate, self.cap_rate)
        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized capped call payoff calculation.

        [T1] Payoff = max(floor, min(index_return, cap))
        """
        return np.clip(index_returns, self.floor_rate, self.cap_rate)


@dataclass(frozen=True)
class ParticipationPayoff:
    """
    Participation rate crediting method.

    [T1] Payoff = max(floor, min(participation_rate × index_return, cap))

    Parameters
    ----------
    participation_rate : float
        Participation rate (decimal, e.g., 0.80 = 80% participation)
    cap_rate : float, optional
        Optional maximum cap. None means unbounded upside.
    floor_rate : float, default 0.0
        Minimum return floor

    Examples
    --------
    >>> payoff = ParticipationPayoff(participation_rate=0.80)
    >>> round(payoff.calculate(0.10).credited_return, 10)  # 80% of 10%
    0.08
    """

    participation_rate: float
    cap_rate: Optional[float] = None
    floor_rate: float = 0.0

    method: ClassVar[CreditingMethod] = CreditingMethod.PARTICIPATION

    def __post_init__(self) -> None:
        if self.participation_rate < 0:
            raise ConstructionError(
                f"CRITICAL: participation_rate must be >= 0, got {self.participation_rate}"
            )
        _validate_floor(self.floor_rate)
        _validate_optional_cap(self.cap_rate, self.floor_rate)

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return; highest is inf when uncapped."""
        return self.floor_rate, float("inf") if self.cap_rate is None else self.cap_rate

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate participation payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with participation applied
        """
        credited_return, flags = _clamp(
            self.participation_rate * index_return, self.floor_rate, self.cap_rate
        )
        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized participation payoff calculation.

        [T1] Payoff = max(floor, min(cap, participation × return))
        """
        return np.clip(self.participation_rate * index_returns, self.floor_rate, self.cap_rate)


@dataclass(frozen=True)
class SpreadPayoff:
    """
    Spread/margin crediting method.

    [T1] Payoff = max(floor, min(index_return - spread, cap))

    The spread is deducted before the floor and cap are applied.

    Parameters
    ----------
    spread_rate : float
        Spread/margin deducted from return (decimal, e.g., 0.02 = 2% spread)
    cap_rate : float, optional
        Optional maximum cap
    floor_rate : float, default 0.0
        Minimum return floor

    Examples
    --------
    >>> payoff = SpreadPayoff(spread_rate=0.02)
    >>> result = payoff.calculate(0.10)  # 10% - 2% spread
    >>> round(result.credited_return, 10)
    0.08
    """

    spread_rate: float
    cap_rate: Optional[float] = None
    floor_rate: float = 0.0

    method: ClassVar[CreditingMethod] = CreditingMethod.SPREAD

    def __post_init__(self) -> None:
        if self.spread_rate < 0:
            raise ConstructionError(f"CRITICAL: spread_rate must be >= 0, got {self.spread_rate}")
        _validate_floor(self.floor_rate)
        _validate_optional_cap(self.cap_rate, self.floor_rate)

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return; highest is inf when uncapped."""
        return self.floor_rate, float("inf") if self.cap_rate is None else self.cap_rate

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate spread payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with spread applied
        """
        credited_return, flags = _clamp(
            index_return - self.spread_rate, self.floor_rate, self.cap_rate
        )
        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """Vectorized spread payoff calculation."""
        return np.clip(index_returns - self.spread_rate, self.floor_rate, self.cap_rate)


@dataclass(frozen=True)
class TriggerPayoff:
    """
    Performance triggered crediting method.

    [T1] Payoff = trigger_rate if index_return >= trigger_threshold, else floor

    The payout is fixed regardless of how far the return exceeds the
    threshold. The threshold is inclusive.

    Parameters
    ----------
    trigger_rate : float
        Fixed return if trigger condition met (decimal)
    trigger_threshold : float, default 0.0
        Minimum return needed to trigger
    floor_rate : float, default 0.0
        Return if trigger not met

    Examples
    --------
    >>> payoff = TriggerPayoff(trigger_rate=0.05, trigger_threshold=0.0)
    >>> payoff.calculate(0.001).credited_return  # Trigger met
    0.05
    """

    trigger_rate: float
    trigger_threshold: float = 0.0
    floor_rate: float = 0.0

    method: ClassVar[CreditingMethod] = CreditingMethod.TRIGGER

    def __post_init__(self) -> None:
        if self.trigger_rate < 0:
            raise ConstructionError(f"CRITICAL: trigger_rate must be >= 0, got {self.trigger_rate}")
        _validate_floor(self.floor_rate)
        if self.floor_rate > self.trigger_rate:
            raise ConstructionError(
                f"CRITICAL: floor_rate ({self.floor_rate}) cannot exceed "
                f"trigger_rate ({self.trigger_rate})"
            )

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return."""
        return self.floor_rate, self.trigger_rate

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate trigger payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return based on trigger condition
        """
        if index_return >= self.trigger_threshold:
            credited_return = self.trigger_rate
            flag = PayoffFlag.TRIGGER_MET
        else:
            credited_return = self.floor_rate
            flag = PayoffFlag.FLOORED

        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset({flag}),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized trigger payoff calculation.

        [T1] Payoff = trigger_rate if return >= threshold, else floor
        """
        return np.where(
            index_returns >= self.trigger_threshold,
            self.trigger_rate,
            self.floor_rate,
        )


def create_fia_payoff(
    method: str,
    cap_rate: Optional[float] = None,
    participation_rate: Optional[float] = None,
    spread_rate: Optional[float] = None,
    trigger_rate: Optional[float] = None,
    trigger_threshold: float = 0.0,
    floor_rate: float = 0.0,
):
    """
    Factory function to create FIA payoff from parameters.

    Parameters
    ----------
    method : str
        Crediting method: 'cap', 'participation', 'spread', 'trigger'
    cap_rate : float, optional
        Cap rate (required for 'cap' method, optional otherwise)
    participation_rate : float, optional
        Participation rate (required for 'participation' method)
    spread_rate : float, optional
        Spread rate (required for 'spread' method)
    trigger_rate : float, optional
        Trigger rate (required for 'trigger' method)
    trigger_threshold : float, default 0.0
        Trigger threshold ('trigger' method only)
    floor_rate : float, default 0.0
        Floor rate

    Returns
    -------
    CappedCallPayoff | ParticipationPayoff | SpreadPayoff | TriggerPayoff
        Configured payoff object

    Raises
    ------
    ConstructionError
        If required parameters missing for method or method unknown
    """
    method = method.lower()

    if method == CreditingMethod.CAP.value:
        if cap_rate is None:
            raise ConstructionError("CRITICAL: cap_rate required for 'cap' method")
        return CappedCallPayoff(cap_rate=cap_rate, floor_rate=floor_rate)

    elif method == CreditingMethod.PARTICIPATION.value:
        if participation_rate is None:
            raise ConstructionError(
                "CRITICAL: participation_rate required for 'participation' method"
            )
        return ParticipationPayoff(
            participation_rate=participation_rate,
            cap_rate=cap_rate,
            floor_rate=floor_rate,
        )

    elif method == CreditingMethod.SPREAD.value:
        if spread_rate is None:
            raise ConstructionError("CRITICAL: spread_rate required for 'spread' method")
        return SpreadPayoff(
            spread_rate=spread_rate,
            cap_rate=cap_rate,
            floor_rate=floor_rate,
        )

    elif method == CreditingMethod.TRIGGER.value:
        if trigger_rate is None:
            raise ConstructionError("CRITICAL: trigger_rate required for 'trigger' method")
        return TriggerPayoff(
            trigger_rate=trigger_rate,
            trigger_threshold=trigger_threshold,
            floor_rate=floor_rate,
        )

    else:
        raise ConstructionError(
            f"CRITICAL: Unknown crediting method '{method}'. "
            f"Valid methods: cap, participation, spread, trigger"
        )
