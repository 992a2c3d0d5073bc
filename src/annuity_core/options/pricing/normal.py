"""
Standard normal distribution utilities for the pricing engine.

Both functions are numpy ufunc compositions: they accept Python scalars,
numpy scalars and arrays, and preserve float32 inputs as float32.
"""

import math

import numpy as np
from scipy import special

# Plain Python float so float32 inputs are not promoted to float64
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_cdf(x):
    """
    Standard normal cumulative distribution function.

    [T1] N(x) = ½·erfc(-x/√2)

    Parameters
    ----------
    x : float or np.ndarray
        Evaluation point(s)

    Returns
    -------
    float or np.ndarray
        P(Z <= x) for Z ~ N(0, 1)

    Examples
    --------
    >>> float(norm_cdf(0.0))
    0.5
    """
    return special.ndtr(x)


def norm_pdf(x):
    """
    Standard normal probability density function.

    [T1] n(x) = exp(-x²/2) / √(2π)
    """
    return np.exp(-0.5 * x * x) * _INV_SQRT_2PI
