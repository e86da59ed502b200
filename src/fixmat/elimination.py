"""Row reduction shared by :func:`fixmat.gauss`, :func:`fixmat.gauss_jordan`,
:func:`fixmat.inv` and :func:`fixmat.solve`.

Both routines work in place on two-dimensional NumPy arrays. Entries may be any
:class:`~fixmat.typing.ComparableScalar`, stored in an object array.
"""

import logging
from typing import Any, Literal

import numpy as np
import numpy.typing as npt

from fixmat.exceptions import SingularMatrixError

logger = logging.getLogger(__name__)


def reduce_rows(
    a: npt.NDArray,
    mode: Literal["echelon", "reduced"],
    *,
    strict: bool = False,
    tol: Any = None,
) -> npt.NDArray:
    """Bring `a` into row echelon form using partial pivoting.

    For each pivot column ``k``, the row whose entry in column ``k`` has the largest
    absolute value is swapped into row ``k`` and divided by its pivot. The pivot column
    is then eliminated from the rows below (``mode="echelon"``) or from every other
    row (``mode="reduced"``). Only the leading ``min(*a.shape)`` columns are used as
    pivot columns, so trailing columns of an augmented matrix are carried along.

    Parameters
    ----------
    a : ndarray
        Matrix to be reduced. It is modified in place.
    mode : Literal["echelon", "reduced"]
        Target form.
    strict : bool, default=False
        If ``True``, a singular pivot raises :class:`SingularMatrixError`. Otherwise the
        pivot is left as is: its row is not normalized, and in reduced mode its column
        is not eliminated.
    tol : optional
        A pivot is singular if its absolute value does not exceed `tol`. If `tol` is
        ``None``, only a pivot that is exactly zero is singular.

    Returns
    -------
    ndarray
        `a` itself.
    """
    n, m = a.shape

    for k in range(min(n, m)):
        if (p := int(np.argmax(abs(a[k:, k]))) + k) != k:
            a[(k, p),] = a[(p, k),]

        pivot = a[k, k]
        singular = pivot == 0 if tol is None else abs(pivot) <= tol

        if singular:
            if strict:
                logger.debug("singular pivot %s in column %d", pivot, k)
                raise SingularMatrixError("singular matrix")

            logger.debug("zero pivot in column %d, not normalised", k)

            if mode == "reduced":
                continue
        else:
            a[k, k:] /= pivot

        targets = range(k + 1, n) if mode == "echelon" else range(n)

        for i in targets:
            if i != k:
                a[i, k:] -= a[i, k] * a[k, k:]

    return a


def back_substitute(a: npt.NDArray, zero: Any, tol: Any) -> npt.NDArray:
    """Solve the augmented system `a` in row echelon form.

    `a` has shape ``(n, n + 1)``. An unknown whose pivot does not exceed `tol` in
    absolute value is set to `zero`.

    Returns
    -------
    ndarray
        Solution of shape ``(n,)``.
    """
    n = a.shape[0]
    x = np.full(n, zero, dtype=a.dtype)

    for i in reversed(range(n)):
        s = sum((a[i, j] * x[j] for j in range(i + 1, n)), zero)

        if abs(a[i, i]) > tol:
            x[i] = (a[i, n] - s) / a[i, i]
        else:
            logger.debug("pivot %s of row %d is numerically zero", a[i, i], i)
            x[i] = zero

    return x
