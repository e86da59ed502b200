"""
###############################
Context (:mod:`fixmat.context`)
###############################

.. currentmodule:: fixmat.context

This module provides the settings shared by all matrices of the active thread.

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

"""

import contextlib
import contextvars
from typing import Literal, Self


class Context:
    """Create a new context.

    Parameters
    ----------
    prec : int, default=6
        Number of fractional digits used when binary floating-point entries are
        converted to text.
    singular : Literal["EXACT", "TOLERANCE"], default="TOLERANCE"
        Test applied to pivots by :func:`fixmat.inv`. If `singular` is ``"EXACT"``, only
        a pivot that is exactly zero makes a matrix singular. If `singular` is
        ``"TOLERANCE"``, pivots whose absolute value does not exceed ``100`` times the
        machine epsilon of the element type are rejected as well.
    """

    __slots__ = ("_prec", "_singular")
    _prec: int
    _singular: Literal["EXACT", "TOLERANCE"]

    def __init__(
        self, prec: int = 6, singular: Literal["EXACT", "TOLERANCE"] = "TOLERANCE"
    ):
        if prec < 0:
            raise ValueError("prec must be non-negative")

        if singular not in ("EXACT", "TOLERANCE"):
            raise ValueError(f"unknown singular test: {singular!r}")

        self._prec = prec
        self._singular = singular

    @property
    def prec(self) -> int:
        return self._prec

    @property
    def singular(self) -> Literal["EXACT", "TOLERANCE"]:
        return self._singular

    def copy(self) -> Self:
        return self.__class__(self._prec, self._singular)

    def __str__(self):
        return f"{type(self).__name__}(prec={self._prec}, singular={self._singular!r})"

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("fixmat")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    prec: int | None = None,
    singular: Literal["EXACT", "TOLERANCE"] | None = None,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> from fixmat import Matrix
    >>> with localcontext(prec=2):
    ...     print(Matrix(1, 2, [0.5, 1.25]))
    Matrix<2,1>
    {
    0.50,1.25,
    }
    """
    if ctx is None:
        ctx = getcontext()

    if prec is None:
        prec = ctx._prec

    if singular is None:
        singular = ctx._singular

    ctx = Context(prec, singular)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
