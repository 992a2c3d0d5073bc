"""
RILA (Registered Index-Linked Annuity) protection payoffs.

Implements payoffs for RILA protection mechanisms:
- Buffer: Absorbs first X% of losses (insurer takes first hit)
- Floor: Limits maximum loss to X% (policyholder never loses more than X%)
- Buffer + Floor: Buffer first, floor as backstop on the remaining loss
- Step-rate buffer: Tiered buffer with partial protection in tier 2

[T1] Buffer and Floor are fundamentally different protection mechanisms.
[T1] Buffer = long ATM put - short OTM put (put spread)
[T1] Floor = long OTM put at floor strike
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


def _validate_buffer(name: str, buffer_rate: float) -> None:
    if not 0 <= buffer_rate <= 1:
        raise ConstructionError(f"CRITICAL: {name} must be in [0, 1], got {buffer_rate}")


def _validate_loss_floor(floor_rate: float) -> None:
    if floor_rate > 0:
        raise ConstructionError(
            f"CRITICAL: floor_rate should be <= 0 for loss protection, got {floor_rate}. "
            f"Use negative values (e.g., -0.10 for -10% floor)."
        )
    if floor_rate < -1:
        raise ConstructionError(f"CRITICAL: floor_rate cannot be < -1 (-100%), got {floor_rate}")


def _validate_cap(cap_rate: Optional[float]) -> None:
    if cap_rate is not None and cap_rate < 0:
        raise ConstructionError(f"CRITICAL: cap_rate must be >= 0 if provided, got {cap_rate}")


def _upside(index_return, cap_rate: Optional[float]) -> tuple[float, set[PayoffFlag]]:
    """Positive-return branch shared by all RILA payoffs: min(return, cap)."""
    if cap_rate is not None and index_return > cap_rate:
        return cap_rate, {PayoffFlag.CAPPED}
    return index_return, set()


def _upside_vectorized(index_returns: np.ndarray, cap_rate: Optional[float]) -> np.ndarray:
    if cap_rate is None:
        return index_returns
    return np.minimum(index_returns, cap_rate)


def _upper_bound(cap_rate: Optional[float]) -> float:
    return float("inf") if cap_rate is None else cap_rate


@dataclass(frozen=True)
class BufferPayoff:
    """
    Buffer protection crediting method.

    [T1] Buffer absorbs the FIRST X% of index losses.
    - Positive returns: Full upside (subject to cap if specified)
    - Negative returns: Insurer absorbs first buffer_rate%, then dollar-for-dollar

    Payoff formula:
    - If index_return >= 0: min(index_return, cap)
    - If -buffer <= index_return < 0: 0
    - If index_return < -buffer: index_return + buffer

    Parameters
    ----------
    buffer_rate : float
        Buffer percentage in [0, 1] (decimal, e.g., 0.10 = 10% buffer)
    cap_rate : float, optional
        Maximum return cap (decimal)

    Examples
    --------
    >>> payoff = BufferPayoff(buffer_rate=0.10)  # 10% buffer
    >>> # Index down 8% → 0% credited (buffer absorbs all)
    >>> payoff.calculate(-0.08).credited_return
    0.0
    >>> # Index up 12% → 12% credited (full upside)
    >>> payoff.calculate(0.12).credited_return
    0.12

    Notes
    -----
    The buffer is not a hard floor: losses beyond the buffer pass
    through, reduced by the buffer amount.

    Replication: Buffer ≈ Long ATM put - Short OTM put (put spread)
    """

    buffer_rate: float
    cap_rate: Optional[float] = None

    method: ClassVar[CreditingMethod] = CreditingMethod.BUFFER

    def __post_init__(self) -> None:
        _validate_buffer("buffer_rate", self.buffer_rate)
        _validate_cap(self.cap_rate)

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return for index returns >= -100%."""
        return self.buffer_rate - 1.0, _upper_bound(self.cap_rate)

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate buffer payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with buffer protection applied
        """
        if index_return >= 0:
            credited_return, flags = _upside(index_return, self.cap_rate)
        elif index_return >= -self.buffer_rate:
            # Within buffer zone: fully protected
            credited_return = 0.0
            flags = {PayoffFlag.BUFFER_APPLIED}
        else:
            # Example: -15% return with 10% buffer → -15% + 10% = -5%
            credited_return = index_return + self.buffer_rate
            flags = {PayoffFlag.BUFFER_APPLIED, PayoffFlag.BUFFER_EXHAUSTED}

        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized buffer payoff calculation.

        [T1] Buffer absorbs first X% of losses.
        """
        return np.where(
            index_returns >= 0,
            _upside_vectorized(index_returns, self.cap_rate),
            np.minimum(index_returns + self.buffer_rate, 0.0),
        )


@dataclass(frozen=True)
class FloorPayoff:
    """
    Floor protection crediting method.

    [T1] Floor limits MAXIMUM loss to X%.
    - Positive returns: Full upside (subject to cap if specified)
    - Negative returns: Dollar-for-dollar loss until floor, then protected

    Payoff formula:
    - If index_return >= floor_rate: min(index_return, cap)
    - If index_return < floor_rate: floor_rate

    Parameters
    ----------
    floor_rate : float
        Maximum loss in [-1, 0] (decimal, e.g., -0.10 = -10% floor)
    cap_rate : float, optional
        Maximum return cap (decimal)

    Examples
    --------
    >>> payoff = FloorPayoff(floor_rate=-0.10)  # -10% floor
    >>> payoff.calculate(-0.08).credited_return  # No protection yet
    -0.08
    >>> payoff.calculate(-0.15).credited_return  # Floored
    -0.1

    Notes
    -----
    Replication: Floor ≈ Long OTM put at (1 + floor_rate) strike
    """

    floor_rate: float
    cap_rate: Optional[float] = None

    method: ClassVar[CreditingMethod] = CreditingMethod.FLOOR

    def __post_init__(self) -> None:
        _validate_loss_floor(self.floor_rate)
        _validate_cap(self.cap_rate)

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return for index returns >= -100%."""
        return self.floor_rate, _upper_bound(self.cap_rate)

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate floor payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with floor protection applied
        """
        credited_return, flags = _clamp(index_return, self.floor_rate, self.cap_rate)
        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized floor payoff calculation.

        [T1] Floor limits maximum loss to X%.
        """
        return np.clip(index_returns, self.floor_rate, self.cap_rate)


@dataclass(frozen=True)
class BufferWithFloorPayoff:
    """
    Combined buffer and floor protection.

    Some RILA products offer both mechanisms:
    - Buffer absorbs first X% of losses
    - Floor provides backstop on the loss remaining after the buffer

    [T1] Payoff = min(return, cap) for return >= 0,
                  max(min(return + buffer, 0), floor) for return < 0

    Parameters
    ----------
    buffer_rate : float
        Buffer percentage in [0, 1] (decimal, e.g., 0.10 = 10% buffer)
    floor_rate : float
        Maximum loss after buffer in [-1, 0] (decimal, e.g., -0.20)
    cap_rate : float, optional
        Maximum return cap

    Examples
    --------
    >>> payoff = BufferWithFloorPayoff(buffer_rate=0.10, floor_rate=-0.20)
    >>> # Index down 8% → 0% (buffer absorbs)
    >>> payoff.calculate(-0.08).credited_return
    0.0
    >>> # Index down 35% → -25% after buffer → floored to -20%
    >>> payoff.calculate(-0.35).credited_return
    -0.2
    """

    buffer_rate: float
    floor_rate: float
    cap_rate: Optional[float] = None

    method: ClassVar[CreditingMethod] = CreditingMethod.BUFFER_FLOOR

    def __post_init__(self) -> None:
        _validate_buffer("buffer_rate", self.buffer_rate)
        _validate_loss_floor(self.floor_rate)
        _validate_cap(self.cap_rate)

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return for index returns >= -100%."""
        return max(self.buffer_rate - 1.0, self.floor_rate), _upper_bound(self.cap_rate)

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate combined buffer + floor payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with both protections applied
        """
        if index_return >= 0:
            credited_return, flags = _upside(index_return, self.cap_rate)
        elif index_return >= -self.buffer_rate:
            credited_return = 0.0
            flags = {PayoffFlag.BUFFER_APPLIED}
        else:
            credited_return = index_return + self.buffer_rate
            flags = {PayoffFlag.BUFFER_APPLIED, PayoffFlag.BUFFER_EXHAUSTED}

            # Floor as backstop on the excess loss
            if credited_return < self.floor_rate:
                credited_return = self.floor_rate
                flags.add(PayoffFlag.FLOORED)

        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """Vectorized buffer + floor payoff calculation."""
        return np.where(
            index_returns >= 0,
            _upside_vectorized(index_returns, self.cap_rate),
            np.maximum(np.minimum(index_returns + self.buffer_rate, 0.0), self.floor_rate),
        )


@dataclass(frozen=True)
class StepRateBufferPayoff:
    """
    Step-rate buffer protection (tiered buffer).

    Some RILAs have tiered buffers:
    - Tier 1: 100% protection on the first tier1_buffer of loss; the
      protected band credits step_rate (0 by default)
    - Tier 2: tier2_protection of the next tier2_buffer of loss absorbed,
      i.e. the policyholder participates at (1 - tier2_protection)
    - Beyond tier 2: dollar-for-dollar

    Payoff formula (loss = -index_return):
    - index_return >= 0: max(step_rate, min(index_return, cap))
    - loss <= tier1: step_rate
    - loss <= tier1 + tier2: -(loss - tier1) × (1 - tier2_protection)
    - otherwise: index_return + tier1 + tier2 × tier2_protection

    With step_rate = 0 every tier transition is continuous. A positive
    step_rate is a deliberate cliff at loss = tier1.

    Parameters
    ----------
    tier1_buffer : float
        First tier buffer (100% protection, e.g., 0.10 = first 10%)
    tier2_buffer : float
        Second tier width (e.g., 0.10 = next 10%)
    tier2_protection : float
        Protection rate in tier 2, in [0, 1] (e.g., 0.50 = 50% absorbed)
    cap_rate : float, optional
        Maximum return cap, must be >= step_rate
    step_rate : float, default 0.0
        Fixed credit while the return stays within the protected band

    Examples
    --------
    >>> payoff = StepRateBufferPayoff(
    ...     tier1_buffer=0.10,
    ...     tier2_buffer=0.10,
    ...     tier2_protection=0.50
    ... )
    >>> payoff.calculate(-0.08).credited_return  # Within tier 1
    0.0
    """

    tier1_buffer: float
    tier2_buffer: float
    tier2_protection: float
    cap_rate: Optional[float] = None
    step_rate: float = 0.0

    method: ClassVar[CreditingMethod] = CreditingMethod.STEP_RATE_BUFFER

    def __post_init__(self) -> None:
        _validate_buffer("tier1_buffer", self.tier1_buffer)
        if self.tier2_buffer < 0:
            raise ConstructionError(f"CRITICAL: tier2_buffer must be >= 0, got {self.tier2_buffer}")
        if self.tier1_buffer + self.tier2_buffer > 1:
            raise ConstructionError(
                f"CRITICAL: tier1_buffer + tier2_buffer cannot exceed 1 (100%), "
                f"got {self.tier1_buffer + self.tier2_buffer}"
            )
        if not 0 <= self.tier2_protection <= 1:
            raise ConstructionError(
                f"CRITICAL: tier2_protection must be in [0, 1], got {self.tier2_protection}"
            )
        if self.step_rate < 0:
            raise ConstructionError(f"CRITICAL: step_rate must be >= 0, got {self.step_rate}")
        _validate_cap(self.cap_rate)
        if self.cap_rate is not None and self.step_rate > self.cap_rate:
            raise ConstructionError(
                f"CRITICAL: step_rate ({self.step_rate}) cannot exceed cap_rate ({self.cap_rate})"
            )

    @property
    def max_absorption(self) -> float:
        """Total loss absorbed once both tiers are exhausted."""
        return self.tier1_buffer + self.tier2_buffer * self.tier2_protection

    @property
    def credit_bounds(self) -> tuple[float, float]:
        """(lowest, highest) credited return for index returns >= -100%."""
        return self.max_absorption - 1.0, _upper_bound(self.cap_rate)

    def calculate(self, index_return: float) -> PayoffResult:
        """
        Calculate step-rate buffer payoff.

        Parameters
        ----------
        index_return : float
            Raw index return (decimal)

        Returns
        -------
        PayoffResult
            Credited return with tiered buffer applied
        """
        if index_return >= 0:
            credited_return, flags = _upside(index_return, self.cap_rate)
            if credited_return < self.step_rate:
                credited_return = self.step_rate
                flags.add(PayoffFlag.STEP_RATE_APPLIED)
        else:
            loss = -index_return
            flags = {PayoffFlag.BUFFER_APPLIED}

            if loss <= self.tier1_buffer:
                credited_return = self.step_rate
                if self.step_rate > 0:
                    flags.add(PayoffFlag.STEP_RATE_APPLIED)
            elif loss <= self.tier1_buffer + self.tier2_buffer:
                credited_return = -(loss - self.tier1_buffer) * (1 - self.tier2_protection)
                flags.add(PayoffFlag.TIER2_APPLIED)
            else:
                credited_return = index_return + self.max_absorption
                flags.add(PayoffFlag.BUFFER_EXHAUSTED)

        return PayoffResult(
            credited_return=credited_return,
            index_return=index_return,
            flags=frozenset(flags),
        )

    def calculate_vectorized(self, index_returns: np.ndarray) -> np.ndarray:
        """Vectorized step-rate buffer payoff calculation."""
        loss = -index_returns
        downside = np.where(
            loss <= self.tier1_buffer,
            self.step_rate,
            np.where(
                loss <= self.tier1_buffer + self.tier2_buffer,
                -(loss - self.tier1_buffer) * (1 - self.tier2_protection),
                index_returns + self.max_absorption,
            ),
        )
        upside = np.maximum(_upside_vectorized(index_returns, self.cap_rate), self.step_rate)
        return np.where(index_returns >= 0, upside, downside)


def create_rila_payoff(
    protection_type: str,
    buffer_rate: Optional[float] = None,
    floor_rate: Optional[float] = None,
    cap_rate: Optional[float] = None,
):
    """
    Factory function to create RILA payoff from parameters.

    Parameters
    ----------
    protection_type : str
        Protection type: 'buffer', 'floor', or 'buffer_floor'
    buffer_rate : float, optional
        Buffer rate (required for 'buffer' and 'buffer_floor')
    floor_rate : float, optional
        Floor rate (required for 'floor' and 'buffer_floor')
    cap_rate : float, optional
        Cap rate

    Returns
    -------
    BufferPayoff | FloorPayoff | BufferWithFloorPayoff
        Configured RILA payoff object

    Raises
    ------
    ConstructionError
        If required parameters missing for protection type
    """
    protection_type = protection_type.lower()

    if protection_type == CreditingMethod.BUFFER.value:
        if buffer_rate is None:
            raise ConstructionError("CRITICAL: buffer_rate required for 'buffer' protection")
        return BufferPayoff(buffer_rate=buffer_rate, cap_rate=cap_rate)

    elif protection_type == CreditingMethod.FLOOR.value:
        if floor_rate is None:
            raise ConstructionError("CRITICAL: floor_rate required for 'floor' protection")
        return FloorPayoff(floor_rate=floor_rate, cap_rate=cap_rate)

    elif protection_type == CreditingMethod.BUFFER_FLOOR.value:
        if buffer_rate is None:
            raise ConstructionError("CRITICAL: buffer_rate required for 'buffer_floor' protection")
        if floor_rate is None:
            raise ConstructionError("CRITICAL: floor_rate required for 'buffer_floor' protection")
        return BufferWithFloorPayoff(
            buffer_rate=buffer_rate, floor_rate=floor_rate, cap_rate=cap_rate
        )

    else:
        raise ConstructionError(
            f"CRITICAL: Unknown protection type '{protection_type}'. "
            f"Valid types: buffer, floor, buffer_floor"
        )


def compare_buffer_vs_floor(
    buffer_rate: float,
    floor_rate: float,
    index_returns: np.ndarray,
    cap_rate: Optional[float] = None,
) -> dict:
    """
    Compare buffer vs floor protection across a range of index returns.

    Parameters
    ----------
    buffer_rate : float
        Buffer percentage (e.g., 0.10 for 10%)
    floor_rate : float
        Floor percentage (e.g., -0.10 for -10%)
    index_returns : np.ndarray
        Array of index returns to evaluate
    cap_rate : float, optional
        Cap rate for both products

    Returns
    -------
    dict
        Comparison results with credited returns for each mechanism
    """
    buffer_payoff = BufferPayoff(buffer_rate=buffer_rate, cap_rate=cap_rate)
    floor_payoff = FloorPayoff(floor_rate=floor_rate, cap_rate=cap_rate)

    buffer_credits = np.array([buffer_payoff.calculate(r).credited_return for r in index_returns])
    floor_credits = np.array([floor_payoff.calculate(r).credited_return for r in index_returns])

    return {
        "index_returns": index_returns,
        "buffer_credits": buffer_credits,
        "floor_credits": floor_credits,
        "buffer_better": buffer_credits > floor_credits,
        "floor_better": floor_credits > buffer_credits,
        "same": np.isclose(buffer_credits, floor_credits),
        "buffer_rate": buffer_rate,
        "floor_rate": floor_rate,
        "cap_rate": cap_rate,
    }
