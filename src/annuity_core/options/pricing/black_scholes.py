"""
Black-Scholes option pricing with Greeks.

Implements analytical pricing for European options with a continuous
dividend yield.

Every function is a composition of numpy ufuncs, so inputs may be Python
scalars, numpy scalars of any supported precision, or numpy arrays for
batch evaluation. The only value-dependent branch is the degenerate
σ = 0 / T = 0 kink, evaluated element-wise with np.where on safely
substituted inputs so that the closed-form branch never sees 0/0.

Inputs must have a real numeric dtype (bool, int or float). Python
Decimal or Fraction values, object arrays and complex inputs are
rejected with TypeError: the normal CDF is scipy.special.ndtr, which has
no loop for them. Lists are not coerced; pass np.asarray(...) instead.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Merton, R. C. (1973). Theory of rational option pricing.
[T1] Hull, J. C. (2021). Options, Futures, and Other Derivatives (11th ed.).
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from annuity_core.config.settings import SETTINGS
from annuity_core.errors import DomainError
from annuity_core.options.payoffs.base import OptionType
from annuity_core.options.pricing.normal import norm_cdf, norm_pdf

# Python float, numpy scalar or ndarray
Numeric = Union[float, np.floating, np.ndarray]


@dataclass(frozen=True)
class BSGreeks:
    """
    Immutable Black-Scholes Greeks.

    All values are computed from one consistent parameter set.

    Attributes
    ----------
    delta : float
        Delta (dV/dS)
    gamma : float
        Gamma (d²V/dS²)
    vega : float
        Vega (dV/dσ) - per 1% vol change
    theta : float
        Theta (-dV/dT) - per year, negative for decaying time value
    rho : float
        Rho (dV/dr) - per 1% rate change
    """

    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float


def _validate_inputs(
    spot,
    strike,
    volatility,
    time_to_expiry,
) -> None:
    """Validate Black-Scholes inputs. Raises DomainError, never clamps."""
    for name, value in (
        ("spot", spot),
        ("strike", strike),
        ("volatility", volatility),
        ("time_to_expiry", time_to_expiry),
    ):
        if np.asarray(value).dtype.kind not in "biuf":
            raise TypeError(
                f"CRITICAL: {name} must be a real float, numpy scalar or array, "
                f"got {type(value).__name__}"
            )
    if np.any(np.asarray(spot) <= 0):
        raise DomainError(f"CRITICAL: spot must be > 0, got {spot}")
    if np.any(np.asarray(strike) <= 0):
        raise DomainError(f"CRITICAL: strike must be > 0, got {strike}")
    if np.any(np.asarray(volatility) < 0):
        raise DomainError(f"CRITICAL: volatility must be >= 0, got {volatility}")
    if np.any(np.asarray(time_to_expiry) < 0):
        raise DomainError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")


def _as_output(value):
    """Unwrap 0-d arrays to numpy scalars; leave batch results as arrays."""
    value = np.asarray(value)
    return value[()] if value.ndim == 0 else value


def _degenerate_mask(volatility, time_to_expiry) -> np.ndarray:
    """True where σ = 0 or T = 0 (price collapses to discounted intrinsic)."""
    return (np.asarray(volatility) == 0) | (np.asarray(time_to_expiry) == 0)


def _safe_inputs(volatility, time_to_expiry, degenerate: np.ndarray):
    """
    Substitute σ = T = 1 where degenerate.

    The closed-form branch is then finite everywhere; its degenerate
    entries are discarded by the caller's np.where.
    """
    safe_vol = np.where(degenerate, np.ones_like(volatility), volatility)
    safe_time = np.where(degenerate, np.ones_like(time_to_expiry), time_to_expiry)
    return safe_vol, safe_time


def _calculate_d1_d2(
    spot: Numeric,
    strike: Numeric,
    rate: Numeric,
    dividend: Numeric,
    volatility: Numeric,
    time_to_expiry: Numeric,
):
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r - q + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal), must be > 0
    time_to_expiry : float
        Time to expiry (years), must be > 0

    Returns
    -------
    tuple
        (d1, d2)
    """
    sqrt_t = np.sqrt(time_to_expiry)
    vol_sqrt_t = volatility * sqrt_t

    d1 = (
        np.log(spot / strike) + (rate - dividend + 0.5 * volatility**2) * time_to_expiry
    ) / vol_sqrt_t

    d2 = d1 - vol_sqrt_t

    return d1, d2


def _discounted_legs(spot, strike, rate, dividend, time_to_expiry):
    """Return (S·e^(-qT), K·e^(-rT))."""
    return spot * np.exp(-dividend * time_to_expiry), strike * np.exp(-rate * time_to_expiry)


def black_scholes_call(
    spot: Numeric,
    strike: Numeric,
    rate: Numeric,
    dividend: Numeric,
    volatility: Numeric,
    time_to_expiry: Numeric,
) -> Numeric:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)
    [T1] σ = 0 or T = 0: C = max(S*e^(-qT) - K*e^(-rT), 0)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)

    Returns
    -------
    float
        Call option price (array for array inputs)

    Raises
    ------
    DomainError
        If spot or strike <= 0, or volatility or time_to_expiry < 0

    Examples
    --------
    >>> price = black_scholes_call(100, 100, 0.05, 0.02, 0.20, 1.0)
    >>> round(float(price), 4)
    9.227
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    spot_leg, strike_leg = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    degenerate = _degenerate_mask(volatility, time_to_expiry)
    safe_vol, safe_time = _safe_inputs(volatility, time_to_expiry, degenerate)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, safe_vol, safe_time)
    call_price = spot_leg * norm_cdf(d1) - strike_leg * norm_cdf(d2)
    intrinsic = np.maximum(spot_leg - strike_leg, 0.0)

    return _as_output(np.where(degenerate, intrinsic, call_price))


def black_scholes_put(
    spot: Numeric,
    strike: Numeric,
    rate: Numeric,
    dividend: Numeric,
    volatility: Numeric,
    time_to_expiry: Numeric,
) -> Numeric:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)
    [T1] σ = 0 or T = 0: P = max(K*e^(-rT) - S*e^(-qT), 0)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)

    Returns
    -------
    float
        Put option price (array for array inputs)

    Examples
    --------
    >>> price = black_scholes_put(100, 100, 0.05, 0.02, 0.20, 1.0)
    >>> round(float(price), 4)
    6.3301
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    spot_leg, strike_leg = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    degenerate = _degenerate_mask(volatility, time_to_expiry)
    safe_vol, safe_time = _safe_inputs(volatility, time_to_expiry, degenerate)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, safe_vol, safe_time)
    put_price = strike_leg * norm_cdf(-d2) - spot_leg * norm_cdf(-d1)
    intrinsic = np.maximum(strike_leg - spot_leg, 0.0)

    return _as_output(np.where(degenerate, intrinsic, put_price))


def black_scholes_price(
    spot: Numeric,
    strike: Numeric,
    rate: Numeric,
    dividend: Numeric,
    volatility: Numeric,
    time_to_expiry: Numeric,
    option_type: Union[OptionType, str],
) -> Numeric:
    """
    Price European option using Black-Scholes.

    Parameters
    ----------
    spot, strike, rate, dividend, volatility, time_to_expiry
        Same as black_scholes_call
    option_type : OptionType or str
        Call or put (member or its value)

    Returns
    -------
    float
        Option price
    """
    if OptionType.parse(option_type) == OptionType.CALL:
        return black_scholes_call(spot, strike, rate, dividend, volatility, time_to_expiry)
    else:
        return black_scholes_put(spot, strike, rate, dividend, volatility, time_to_expiry)


def black_scholes_greeks(
    spot: Numeric,
    strike: Numeric,
    rate: Numeric,
    dividend: Numeric,
    volatility: Numeric,
    time_to_expiry: Numeric,
    option_type: Union[OptionType, str] = OptionType.CALL,
) -> BSGreeks:
    """
    Calculate Black-Scholes Greeks.

    [T1] Delta (call) = e^(-qT) * N(d1)
    [T1] Delta (put) = -e^(-qT) * N(-d1)
    [T1] Gamma = e^(-qT) * n(d1) / (S * σ * √T)
    [T1] Vega = S * e^(-qT) * n(d1) * √T
    [T1] Theta (call) = -S*e^(-qT)*n(d1)*σ/(2√T) - r*K*e^(-rT)*N(d2) + q*S*e^(-qT)*N(d1)
    [T1] Rho (call) = K * T * e^(-rT) * N(d2)

    At σ = 0 or T = 0 the Greeks are the σ → 0 limits: gamma and vega
    vanish, and delta/theta/rho are those of the discounted forward payoff
    when the option is in the money on a forward basis, zero otherwise.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)
    option_type : OptionType or str, default CALL
        Call or put (member or its value)

    Returns
    -------
    BSGreeks
        Delta, gamma, vega (per 1% vol), theta (per year), rho (per 1% rate)
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)
    option_type = OptionType.parse(option_type)

    vega_scale = SETTINGS.option.vega_scale
    rho_scale = SETTINGS.option.rho_scale

    exp_div = np.exp(-dividend * time_to_expiry)
    exp_rate = np.exp(-rate * time_to_expiry)
    spot_leg = spot * exp_div
    strike_leg = strike * exp_rate

    degenerate = _degenerate_mask(volatility, time_to_expiry)
    safe_vol, safe_time = _safe_inputs(volatility, time_to_expiry, degenerate)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, safe_vol, safe_time)
    sqrt_t = np.sqrt(safe_time)
    n_d1 = norm_pdf(d1)

    # Gamma and vega are the same for calls and puts
    gamma = exp_div * n_d1 / (spot * safe_vol * sqrt_t)
    vega = spot_leg * n_d1 * sqrt_t * vega_scale
    time_value_decay = -spot_leg * n_d1 * safe_vol / (2.0 * sqrt_t)

    if option_type == OptionType.CALL:
        N_d1 = norm_cdf(d1)
        N_d2 = norm_cdf(d2)
        delta = exp_div * N_d1
        theta = time_value_decay - rate * strike_leg * N_d2 + dividend * spot_leg * N_d1
        rho = strike_leg * safe_time * N_d2 * rho_scale

        in_the_money = spot_leg > strike_leg
        limit_delta = exp_div * in_the_money
        limit_theta = (dividend * spot_leg - rate * strike_leg) * in_the_money
        limit_rho = strike_leg * time_to_expiry * rho_scale * in_the_money
    else:
        N_neg_d1 = norm_cdf(-d1)
        N_neg_d2 = norm_cdf(-d2)
        delta = -exp_div * N_neg_d1
        theta = time_value_decay + rate * strike_leg * N_neg_d2 - dividend * spot_leg * N_neg_d1
        rho = -strike_leg * safe_time * N_neg_d2 * rho_scale

        in_the_money = strike_leg > spot_leg
        limit_delta = -exp_div * in_the_money
        limit_theta = (rate * strike_leg - dividend * spot_leg) * in_the_money
        limit_rho = -strike_leg * time_to_expiry * rho_scale * in_the_money

    return BSGreeks(
        delta=_as_output(np.where(degenerate, limit_delta, delta)),
        gamma=_as_output(np.where(degenerate, np.zeros_like(gamma), gamma)),
        vega=_as_output(np.where(degenerate, np.zeros_like(vega), vega)),
        theta=_as_output(np.where(degenerate, limit_theta, theta)),
        rho=_as_output(np.where(degenerate, limit_rho, rho)),
    )


# Short names for collaborators that treat the engine as a pricing backend
price_call = black_scholes_call
price_put = black_scholes_put
greeks = black_scholes_greeks
