"""
Validation Gates - HALT/WARN/PASS framework for option quote validation.

Checks option prices against model-free no-arbitrage constraints before
they are used downstream. Every check maps an absolute deviation to a
three-level verdict:

- PASS: deviation <= pass tolerance
- WARN: pass tolerance < deviation <= halt tolerance
- HALT: deviation > halt tolerance (or deviation is NaN)

Verdicts are returned as values. Only malformed market inputs raise.

[T1] Merton, R. C. (1973). Theory of rational option pricing.
[T1] Hull, J. C. (2021). Options, Futures, and Other Derivatives, Ch. 11.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from annuity_core.config.settings import SETTINGS, ValidationConfig
from annuity_core.errors import DomainError
from annuity_core.options.payoffs.base import OptionType

logger = logging.getLogger(__name__)


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, WARN, or HALT
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    measured_value : float
        The value that was checked
    bound : float
        The bound it was compared against
    """

    status: GateStatus
    gate_name: str
    message: str
    measured_value: float
    bound: float

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[ValidationOutcome, ...]
        Results from all gates
    """

    results: tuple[ValidationOutcome, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[ValidationOutcome]:
        """Get all gates that halted."""
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[ValidationOutcome]:
        """Get all gates that warned."""
        return [r for r in self.results if r.status == GateStatus.WARN]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "measured_value": r.measured_value,
                    "bound": r.bound,
                }
                for r in self.results
            ],
        }


def _verdict(deviation: float, pass_tolerance: float, halt_tolerance: float) -> GateStatus:
    """Map an absolute deviation to a verdict. NaN deviations HALT."""
    if deviation <= pass_tolerance:
        return GateStatus.PASS
    if deviation <= halt_tolerance:
        return GateStatus.WARN
    return GateStatus.HALT


def _emit(outcome: ValidationOutcome) -> ValidationOutcome:
    """Log an outcome at a level matching its severity and return it."""
    if outcome.status == GateStatus.HALT:
        logger.error(f"HALT [{outcome.gate_name}]: {outcome.message}")
    elif outcome.status == GateStatus.WARN:
        logger.warning(f"WARN [{outcome.gate_name}]: {outcome.message}")
    else:
        logger.debug(f"PASS [{outcome.gate_name}]: {outcome.message}")
    return outcome


def _validate_market(spot: float, strike: Optional[float], time_to_expiry: float) -> None:
    if not spot > 0:
        raise DomainError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike is not None and not strike > 0:
        raise DomainError(f"CRITICAL: strike must be > 0, got {strike}")
    if not time_to_expiry >= 0:
        raise DomainError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")


def _option_bounds(
    spot: float,
    strike: Optional[float],
    rate: float,
    dividend: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> tuple[float, float]:
    """
    Model-free price bounds for a European option.

    [T1] Call: max(S·e^(-qT) - K·e^(-rT), 0) <= C <= S·e^(-qT)
    [T1] Put:  max(K·e^(-rT) - S·e^(-qT), 0) <= P <= K·e^(-rT)

    Without a strike only the bounds that do not involve K apply.
    """
    spot_leg = spot * math.exp(-dividend * time_to_expiry)
    if strike is None:
        if option_type == OptionType.CALL:
            return 0.0, spot_leg
        return 0.0, math.inf

    strike_leg = strike * math.exp(-rate * time_to_expiry)
    if option_type == OptionType.CALL:
        return max(spot_leg - strike_leg, 0.0), spot_leg
    return max(strike_leg - spot_leg, 0.0), strike_leg


def validate_no_arbitrage(
    option_price: float,
    spot: float,
    strike: Optional[float] = None,
    rate: float = 0.0,
    dividend: float = 0.0,
    time_to_expiry: float = 0.0,
    option_type: Union[OptionType, str] = OptionType.CALL,
    config: Optional[ValidationConfig] = None,
) -> ValidationOutcome:
    """
    Check an option price against model-free no-arbitrage bounds.

    [T1] An option is worth no less than its discounted forward intrinsic
    value and no more than the asset (call) or discounted strike (put).

    Parameters
    ----------
    option_price : float
        Quoted or model option price
    spot : float
        Current spot price
    strike : float, optional
        Strike price. Without it only strike-free bounds are checked.
    rate : float, default 0.0
        Risk-free rate (decimal)
    dividend : float, default 0.0
        Dividend yield (decimal)
    time_to_expiry : float, default 0.0
        Time to expiry (years)
    option_type : OptionType or str, default CALL
        Call or put (member or its value)
    config : ValidationConfig, optional
        Tolerance bands. Defaults to SETTINGS.validation.

    Returns
    -------
    ValidationOutcome
        measured_value is the price; bound is the violated bound, or the
        nearer bound when none is violated
        Non-finite prices (NaN, ±inf) always HALT

    Raises
    ------
    DomainError
        If spot or strike <= 0, or time_to_expiry < 0
    ValueError
        If option_type is not a call or put

    Examples
    --------
    >>> validate_no_arbitrage(5.0, spot=100.0, strike=100.0).status
    <GateStatus.PASS: 'pass'>
    >>> validate_no_arbitrage(150.0, spot=100.0).status
    <GateStatus.HALT: 'halt'>
    """
    config = config or SETTINGS.validation
    _validate_market(spot, strike, time_to_expiry)
    option_type = OptionType.parse(option_type)

    price = float(option_price)
    lower, upper = _option_bounds(spot, strike, rate, dividend, time_to_expiry, option_type)
    gate_name = f"no_arbitrage_{option_type.value}"

    if not math.isfinite(price):
        deviation = math.inf
        bound = lower if price < lower else upper
        detail = "is not finite"
    elif price < lower:
        deviation = lower - price
        bound = lower
        detail = f"below lower bound {lower:.6f} by {deviation:.3e}"
    elif price > upper:
        deviation = price - upper
        bound = upper
        detail = f"above upper bound {upper:.6f} by {deviation:.3e}"
    else:
        deviation = 0.0
        bound = lower if price - lower <= upper - price else upper
        detail = f"within [{lower:.6f}, {upper:.6f}]"

    status = _verdict(
        deviation, config.arbitrage_pass_tolerance, config.arbitrage_halt_tolerance
    )
    return _emit(
        ValidationOutcome(
            status=status,
            gate_name=gate_name,
            message=f"{option_type.value} price {price:.6f} {detail}",
            measured_value=price,
            bound=bound,
        )
    )


def validate_put_call_parity(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
    config: Optional[ValidationConfig] = None,
) -> ValidationOutcome:
    """
    Check put-call parity for a European call/put pair.

    [T1] C - P = S·e^(-qT) - K·e^(-rT)

    Parameters
    ----------
    call_price : float
        Call price
    put_price : float
        Put price (same strike and expiry)
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    time_to_expiry : float
        Time to expiry (years)
    config : ValidationConfig, optional
        Tolerance bands. Defaults to SETTINGS.validation.

    Returns
    -------
    ValidationOutcome
        measured_value is C - P; bound is the parity forward value

    Raises
    ------
    DomainError
        If spot or strike <= 0, or time_to_expiry < 0
    """
    config = config or SETTINGS.validation
    _validate_market(spot, strike, time_to_expiry)

    measured = float(call_price) - float(put_price)
    forward = spot * math.exp(-dividend * time_to_expiry) - strike * math.exp(
        -rate * time_to_expiry
    )
    deviation = abs(measured - forward)

    status = _verdict(deviation, config.parity_pass_tolerance, config.parity_halt_tolerance)
    return _emit(
        ValidationOutcome(
            status=status,
            gate_name="put_call_parity",
            message=(
                f"C - P = {measured:.6f} vs S·e^(-qT) - K·e^(-rT) = {forward:.6f} "
                f"(deviation {deviation:.3e})"
            ),
            measured_value=measured,
            bound=forward,
        )
    )


def validate_option_quote(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
    config: Optional[ValidationConfig] = None,
) -> ValidationReport:
    """
    Run every no-arbitrage check on a call/put quote pair.

    Checks call bounds, put bounds and put-call parity.

    Returns
    -------
    ValidationReport
        One outcome per check, worst status as overall_status
    """
    return ValidationReport(
        results=(
            validate_no_arbitrage(
                call_price, spot, strike, rate, dividend, time_to_expiry,
                OptionType.CALL, config,
            ),
            validate_no_arbitrage(
                put_price, spot, strike, rate, dividend, time_to_expiry,
                OptionType.PUT, config,
            ),
            validate_put_call_parity(
                call_price, put_price, spot, strike, rate, dividend, time_to_expiry, config,
            ),
        )
    )
