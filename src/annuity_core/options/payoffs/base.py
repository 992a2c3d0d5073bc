"""
Base types for crediting-formula payoffs.

Defines the enums and the immutable result shared by every payoff variant.
The variants themselves live in fia.py and rila.py; the closed set and the
module-level calculate() dispatch live in engine.py.
"""

from dataclasses import dataclass, field
from enum import Enum


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, option_type) -> "OptionType":
        """
        Resolve a member or its value ('call' / 'put').

        Raises
        ------
        ValueError
            If option_type is neither
        """
        try:
            return cls(option_type)
        except ValueError as exc:
            raise ValueError(
                f"CRITICAL: option_type must be 'call' or 'put', got {option_type!r}"
            ) from exc


class CreditingMethod(Enum):
    """FIA/RILA crediting method enumeration."""

    # FIA methods
    CAP = "cap"  # Point-to-point with cap
    PARTICIPATION = "participation"  # Participation rate
    SPREAD = "spread"  # Spread/margin deduction
    TRIGGER = "trigger"  # Performance triggered

    # RILA methods
    BUFFER = "buffer"  # Buffer absorbs first X% losses
    FLOOR = "floor"  # Floor limits max loss to X%
    BUFFER_FLOOR = "buffer_floor"  # Buffer first, floor as backstop
    STEP_RATE_BUFFER = "step_rate_buffer"  # Tiered buffer


class PayoffFlag(Enum):
    """
    Diagnostic flags naming which boundary produced a credited return.

    A flag is set only when the index return strictly crosses the
    boundary; landing exactly on a cap or floor leaves the return
    unchanged and sets nothing.
    """

    CAPPED = "capped"
    FLOORED = "floored"
    BUFFER_APPLIED = "buffer_applied"  # Negative return, buffer absorbing
    BUFFER_EXHAUSTED = "buffer_exhausted"  # Loss beyond the (last) buffer tier
    TRIGGER_MET = "trigger_met"
    STEP_RATE_APPLIED = "step_rate_applied"  # Fixed step rate credited
    TIER2_APPLIED = "tier2_applied"  # Loss within the partial-protection tier


@dataclass(frozen=True)
class PayoffResult:
    """
    Immutable payoff calculation result.

    Attributes
    ----------
    credited_return : float
        Return credited to policyholder (decimal)
    index_return : float
        Raw index return (decimal)
    flags : frozenset[PayoffFlag]
        Boundaries crossed while crediting
    """

    credited_return: float
    index_return: float
    flags: frozenset[PayoffFlag] = field(default_factory=frozenset)

    def has_flag(self, flag: PayoffFlag) -> bool:
        """Check whether a diagnostic flag was set."""
        return flag in self.flags

    @property
    def cap_applied(self) -> bool:
        """Whether the cap bound the credited return."""
        return PayoffFlag.CAPPED in self.flags

    @property
    def floor_applied(self) -> bool:
        """Whether a floor bound the credited return."""
        return PayoffFlag.FLOORED in self.flags

    @property
    def buffer_applied(self) -> bool:
        """Whether buffer protection was engaged."""
        return PayoffFlag.BUFFER_APPLIED in self.flags


def _clamp(value, floor_rate, cap_rate) -> tuple[float, set[PayoffFlag]]:
    """
    Clamp value into [floor_rate, cap_rate], inclusive at both bounds.

    cap_rate None means unbounded upside.
    """
    flags: set[PayoffFlag] = set()
    if value < floor_rate:
        value = floor_rate
        flags.add(PayoffFlag.FLOORED)
    elif cap_rate is not None and value > cap_rate:
        value = cap_rate
        flags.add(PayoffFlag.CAPPED)
    return value, flags
