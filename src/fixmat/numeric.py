"""
#####################################
Element types (:mod:`fixmat.numeric`)
#####################################

.. currentmodule:: fixmat.numeric

This module provides the few facts about an element type that matrices rely on.

.. autosummary::
    :toctree: generated/

    epsilon
    one
    tostr
    zero

"""

import decimal
import fractions
import sys
from typing import Any

import mpmath
import numpy as np


def zero[T](scalar: type[T], /) -> T:
    """Return the additive identity of `scalar`."""
    return scalar(0)  # type: ignore


def one[T](scalar: type[T], /) -> T:
    """Return the multiplicative identity of `scalar`."""
    return scalar(1)  # type: ignore


def epsilon[T](scalar: type[T], /) -> T:
    """Machine epsilon of `scalar`.

    Exact types, i.e., integers and rationals, have an epsilon of zero. A type can
    provide its own value by defining a class method ``_fixmat_epsilon_``.

    Raises
    ------
    TypeError
        If the epsilon of `scalar` is unknown.

    Examples
    --------
    >>> epsilon(float)
    2.220446049250313e-16
    >>> epsilon(int)
    0
    """
    if fun := getattr(scalar, "_fixmat_epsilon_", None):
        return fun()

    if not isinstance(scalar, type):
        raise TypeError(f"{scalar!r} is not a type")

    if issubclass(scalar, np.floating):
        return scalar(np.finfo(scalar).eps)

    if issubclass(scalar, (np.integer, bool)):
        return scalar(0)

    if issubclass(scalar, mpmath.mpf):
        return scalar(mpmath.mp.eps)

    if issubclass(scalar, decimal.Decimal):
        return scalar(10) ** (1 - decimal.getcontext().prec)

    if issubclass(scalar, (int, fractions.Fraction)):
        return scalar(0)

    if issubclass(scalar, float):
        return scalar(sys.float_info.epsilon)

    raise TypeError(f"machine epsilon of {scalar.__name__} is unknown")


def tostr(value: Any, prec: int = 6) -> str:
    """Convert a matrix entry to text.

    Binary floating-point values are written in fixed-point notation with `prec`
    fractional digits. Other values use their own :func:`str`.

    Examples
    --------
    >>> tostr(1.0)
    '1.000000'
    >>> tostr(fractions.Fraction(1, 3))
    '1/3'
    """
    match value:
        case float() | np.floating():
            return format(value, f".{prec}f")

        case mpmath.mpf():
            return mpmath.nstr(value, mpmath.mp.dps)

        case _:
            return str(value)
