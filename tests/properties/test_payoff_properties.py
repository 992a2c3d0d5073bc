"""
Property-based tests for FIA and RILA payoffs.

Uses Hypothesis to verify payoff invariants hold across randomly
generated inputs. Tests the fundamental contractual guarantees.

Properties tested:
1. FIA floor: credited_return >= floor_rate (principal protection at 0%)
2. FIA cap: credited_return <= cap_rate
3. Buffer absorption: -buffer <= return < 0 → credited_return = 0
4. Buffer pass-through: return < -buffer → credited_return = return + buffer
5. Floor protection: credited_return >= floor_rate always
6. Monotonicity: cap/participation/spread are non-decreasing in the return
7. Trigger binary: credited_return ∈ {floor_rate, trigger_rate}
8. Declared bounds: every variant stays within credit_bounds on [-1, +∞)
9. Flags: set only on strict boundary crossing

References:
    [T1] SEC RILA Final Rule 2024
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from annuity_core.config.tolerances import (
    BUFFER_ABSORPTION_TOLERANCE,
    CAP_ENFORCEMENT_TOLERANCE,
    FLOOR_ENFORCEMENT_TOLERANCE,
)
from annuity_core.options.payoffs.base import PayoffFlag
from annuity_core.options.payoffs.engine import calculate
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

# =============================================================================
# Strategy Definitions
# =============================================================================

def _rate(min_value: float, max_value: float):
    return st.floats(
        min_value=min_value, max_value=max_value, allow_nan=False, allow_infinity=False
    )


# Index return: full economic range, a total loss at worst
return_strategy = _rate(-1.0, 1.0)

# Cap rate: non-negative, typical FIA range
cap_strategy = _rate(0.0, 0.30)

# Buffer rate: full admissible range
buffer_strategy = _rate(0.0, 1.0)

# Floor rate: negative, typical RILA range
floor_strategy = _rate(-1.0, 0.0)

# Participation rate: typically 0% to 300%
participation_strategy = _rate(0.0, 3.0)

# Spread rate: small non-negative
spread_strategy = _rate(0.0, 0.10)

# Trigger rate: fixed bonus
trigger_strategy = _rate(0.0, 0.15)


@st.composite
def payoff_strategy(draw):
    """Any of the eight crediting variants with valid parameters."""
    cap = draw(st.one_of(st.none(), cap_strategy))
    kind = draw(st.sampled_from(range(8)))

    if kind == 0:
        return CappedCallPayoff(cap_rate=draw(cap_strategy))
    if kind == 1:
        return ParticipationPayoff(participation_rate=draw(participation_strategy), cap_rate=cap)
    if kind == 2:
        return SpreadPayoff(spread_rate=draw(spread_strategy), cap_rate=cap)
    if kind == 3:
        return TriggerPayoff(
            trigger_rate=draw(trigger_strategy), trigger_threshold=draw(_rate(-0.10, 0.10))
        )
    if kind == 4:
        return BufferPayoff(buffer_rate=draw(buffer_strategy), cap_rate=cap)
    if kind == 5:
        return FloorPayoff(floor_rate=draw(floor_strategy), cap_rate=cap)
    if kind == 6:
        return BufferWithFloorPayoff(
            buffer_rate=draw(buffer_strategy), floor_rate=draw(floor_strategy), cap_rate=cap
        )
    tier1 = draw(_rate(0.0, 0.5))
    tier2 = draw(_rate(0.0, 0.5))
    step_rate = draw(_rate(0.0, 0.05))
    return StepRateBufferPayoff(
        tier1_buffer=tier1,
        tier2_buffer=tier2,
        tier2_protection=draw(_rate(0.0, 1.0)),
        cap_rate=None if cap is None else max(cap, step_rate),
        step_rate=step_rate,
    )


# =============================================================================
# FIA Cap Properties
# =============================================================================

class TestCappedCallProperties:
    """[T1] Capped call payoff: max(floor, min(index_return, cap))."""

    @given(index_return=return_strategy, cap_rate=cap_strategy)
    @settings(max_examples=200)
    def test_floor_enforced(self, index_return: float, cap_rate: float) -> None:
        """[T1] FIA floor is 0% by default (principal protection)."""
        result = CappedCallPayoff(cap_rate=cap_rate).calculate(index_return)

        assert result.credited_return >= -FLOOR_ENFORCEMENT_TOLERANCE, (
            f"FLOOR VIOLATION: credited {result.credited_return} < 0 for return {index_return}"
        )

    @given(index_return=return_strategy, cap_rate=cap_strategy)
    @settings(max_examples=200)
    def test_cap_enforced(self, index_return: float, cap_rate: float) -> None:
        """[T1] Credited return never exceeds the cap."""
        result = CappedCallPayoff(cap_rate=cap_rate).calculate(index_return)

        assert result.credited_return <= cap_rate + CAP_ENFORCEMENT_TOLERANCE

    @given(a=return_strategy, b=return_strategy, cap_rate=cap_strategy)
    @settings(max_examples=200)
    def test_monotone(self, a: float, b: float, cap_rate: float) -> None:
        """Higher index return never credits less."""
        low, high = sorted((a, b))
        payoff = CappedCallPayoff(cap_rate=cap_rate)

        assert payoff.calculate(low).credited_return <= payoff.calculate(high).credited_return

    @given(cap_rate=cap_strategy)
    @settings(max_examples=100)
    def test_no_flag_exactly_at_cap(self, cap_rate: float) -> None:
        """Landing exactly on the cap is not a crossing."""
        result = CappedCallPayoff(cap_rate=cap_rate).calculate(cap_rate)

        assert result.credited_return == cap_rate
        assert result.flags == frozenset()


class TestParticipationProperties:
    """[T1] Participation payoff: clamp(p × return, floor, cap)."""

    @given(index_return=_rate(0.0, 1.0), participation=participation_strategy)
    @settings(max_examples=200)
    def test_uncapped_scaling(self, index_return: float, participation: float) -> None:
        """Uncapped positive returns are scaled exactly."""
        result = ParticipationPayoff(participation_rate=participation).calculate(index_return)
        assert result.credited_return == participation * index_return

    @given(a=return_strategy, b=return_strategy, participation=participation_strategy,
           cap_rate=cap_strategy)
    @settings(max_examples=200)
    def test_monotone(self, a: float, b: float, participation: float, cap_rate: float) -> None:
        low, high = sorted((a, b))
        payoff = ParticipationPayoff(participation_rate=participation, cap_rate=cap_rate)

        assert payoff.calculate(low).credited_return <= payoff.calculate(high).credited_return


class TestSpreadProperties:
    """[T1] Spread payoff: clamp(return - spread, floor, cap)."""

    @given(index_return=return_strategy, spread=spread_strategy)
    @settings(max_examples=200)
    def test_never_exceeds_index_return_above_floor(self, index_return: float, spread: float) -> None:
        """The spread only ever reduces a positive credit."""
        credited = SpreadPayoff(spread_rate=spread).calculate(index_return).credited_return
        assert credited <= max(index_return, 0.0)

    @given(a=return_strategy, b=return_strategy, spread=spread_strategy)
    @settings(max_examples=200)
    def test_monotone(self, a: float, b: float, spread: float) -> None:
        low, high = sorted((a, b))
        payoff = SpreadPayoff(spread_rate=spread)

        assert payoff.calculate(low).credited_return <= payoff.calculate(high).credited_return


class TestTriggerProperties:
    """[T1] Trigger payoff is binary."""

    @given(index_return=return_strategy, trigger=trigger_strategy,
           threshold=_rate(-0.10, 0.10))
    @settings(max_examples=200)
    def test_binary(self, index_return: float, trigger: float, threshold: float) -> None:
        payoff = TriggerPayoff(trigger_rate=trigger, trigger_threshold=threshold)
        result = payoff.calculate(index_return)

        assert result.credited_return in (0.0, trigger)
        assert result.has_flag(PayoffFlag.TRIGGER_MET) == (index_return >= threshold)


# =============================================================================
# RILA Properties
# =============================================================================

class TestBufferProperties:
    """[T1] Buffer absorbs the first X% of losses."""

    @given(buffer_rate=buffer_strategy, fraction=_rate(0.0, 1.0))
    @settings(max_examples=200)
    def test_absorption(self, buffer_rate: float, fraction: float) -> None:
        """Losses within the buffer credit 0%."""
        index_return = -buffer_rate * fraction
        assume(index_return < 0)

        result = BufferPayoff(buffer_rate=buffer_rate).calculate(index_return)
        assert abs(result.credited_return) <= BUFFER_ABSORPTION_TOLERANCE

    @given(buffer_rate=buffer_strategy, index_return=_rate(-1.0, 0.0))
    @settings(max_examples=200)
    def test_pass_through(self, buffer_rate: float, index_return: float) -> None:
        """Losses beyond the buffer are reduced by exactly the buffer."""
        assume(index_return < -buffer_rate)

        result = BufferPayoff(buffer_rate=buffer_rate).calculate(index_return)
        assert result.credited_return == pytest.approx(index_return + buffer_rate, abs=1e-12)
        assert result.has_flag(PayoffFlag.BUFFER_EXHAUSTED)

    @given(buffer_rate=buffer_strategy, index_return=return_strategy)
    @settings(max_examples=200)
    def test_never_worse_than_index(self, buffer_rate: float, index_return: float) -> None:
        """Uncapped buffer credits at least the raw return."""
        result = BufferPayoff(buffer_rate=buffer_rate).calculate(index_return)
        assert result.credited_return >= index_return


class TestFloorProperties:
    """[T1] Floor limits the maximum loss."""

    @given(floor_rate=floor_strategy, index_return=return_strategy)
    @settings(max_examples=200)
    def test_floor_protection(self, floor_rate: float, index_return: float) -> None:
        result = FloorPayoff(floor_rate=floor_rate).calculate(index_return)
        assert result.credited_return >= floor_rate - FLOOR_ENFORCEMENT_TOLERANCE


class TestStepRateProperties:
    """Tiered buffer properties."""

    @given(
        tier1=_rate(0.0, 0.5),
        tier2=_rate(0.0, 0.5),
        protection=_rate(0.0, 1.0),
        a=_rate(-1.0, 0.0),
        b=_rate(-1.0, 0.0),
    )
    @settings(max_examples=200)
    def test_downside_monotone_without_step_rate(
        self, tier1: float, tier2: float, protection: float, a: float, b: float
    ) -> None:
        """With no step rate deeper losses never credit more."""
        low, high = sorted((a, b))
        payoff = StepRateBufferPayoff(
            tier1_buffer=tier1, tier2_buffer=tier2, tier2_protection=protection
        )

        assert (
            payoff.calculate(low).credited_return
            <= payoff.calculate(high).credited_return + 1e-12
        )


# =============================================================================
# Cross-Variant Properties
# =============================================================================

class TestAllVariants:
    """Invariants shared by every crediting variant."""

    @given(payoff=payoff_strategy(), index_return=return_strategy)
    @settings(max_examples=300)
    def test_within_declared_bounds(self, payoff, index_return: float) -> None:
        lower, upper = payoff.credit_bounds
        credited = calculate(payoff, index_return).credited_return

        assert lower - 1e-12 <= credited <= upper + 1e-12, (
            f"{payoff!r} credited {credited} outside [{lower}, {upper}] for {index_return}"
        )

    @given(payoff=payoff_strategy(), index_return=return_strategy)
    @settings(max_examples=300)
    def test_referentially_transparent(self, payoff, index_return: float) -> None:
        assert calculate(payoff, index_return) == calculate(payoff, index_return)

    @given(payoff=payoff_strategy(), index_return=return_strategy)
    @settings(max_examples=300)
    def test_index_return_echoed(self, payoff, index_return: float) -> None:
        assert calculate(payoff, index_return).index_return == index_return

    @given(payoff=payoff_strategy(), index_return=return_strategy)
    @settings(max_examples=300)
    def test_flagged_results_sit_on_the_bound(self, payoff, index_return: float) -> None:
        """CAPPED means credited == cap; FLOORED means credited == floor."""
        result = calculate(payoff, index_return)

        if result.cap_applied:
            assert result.credited_return == payoff.cap_rate
        if result.floor_applied:
            assert result.credited_return == payoff.floor_rate
