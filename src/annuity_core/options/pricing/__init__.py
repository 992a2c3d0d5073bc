"""
Option pricing implementations.

Provides:
- Black-Scholes analytical pricing with Greeks (continuous dividend yield)
- Standard normal CDF/PDF used by the closed-form formulas
"""

from annuity_core.options.pricing.black_scholes import (
    BSGreeks,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
    greeks,
    price_call,
    price_put,
)
from annuity_core.options.pricing.normal import norm_cdf, norm_pdf

__all__ = [
    # Black-Scholes
    "BSGreeks",
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    "black_scholes_greeks",
    "price_call",
    "price_put",
    "greeks",
    # Normal distribution
    "norm_cdf",
    "norm_pdf",
]
