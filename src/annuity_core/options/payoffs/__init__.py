"""
Crediting-formula payoffs for FIA and RILA products.

FIA: cap, participation, spread, trigger
RILA: buffer, floor, buffer + floor, step-rate buffer
"""

from annuity_core.options.payoffs.base import (
    CreditingMethod,
    OptionType,
    PayoffFlag,
    PayoffResult,
)
from annuity_core.options.payoffs.engine import (
    PAYOFF_VARIANTS,
    PayoffSpec,
    calculate,
    calculate_vectorized,
)
from annuity_core.options.payoffs.fia import (
    CappedCallPayoff,
    ParticipationPayoff,
    SpreadPayoff,
    TriggerPayoff,
    create_fia_payoff,
)
from annuity_core.options.payoffs.rila import (
    BufferPayoff,
    BufferWithFloorPayoff,
    FloorPayoff,
    StepRateBufferPayoff,
    compare_buffer_vs_floor,
    create_rila_payoff,
)

__all__ = [
    # Base types
    "CreditingMethod",
    "OptionType",
    "PayoffFlag",
    "PayoffResult",
    # Engine
    "PAYOFF_VARIANTS",
    "PayoffSpec",
    "calculate",
    "calculate_vectorized",
    # FIA
    "CappedCallPayoff",
    "ParticipationPayoff",
    "SpreadPayoff",
    "TriggerPayoff",
    "create_fia_payoff",
    # RILA
    "BufferPayoff",
    "FloorPayoff",
    "BufferWithFloorPayoff",
    "StepRateBufferPayoff",
    "create_rila_payoff",
    "compare_buffer_vs_floor",
]
