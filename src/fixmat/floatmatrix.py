import numpy as np

from fixmat.exceptions import DimensionError
from fixmat.matrix import Matrix, equals
from fixmat.numeric import epsilon


class FloatMatrix(Matrix[float]):
    """Double-precision matrix backed by a ``float64`` array.

    Behaves like ``Matrix(..., scalar=float)``, but entries are stored unboxed.
    """

    __slots__ = ()

    def __init__(self, rows, cols, value=None, /, *, scalar=float, **kwargs):
        if scalar is not float:
            raise TypeError(f"{type(self).__name__} only holds float entries")

        super().__init__(rows, cols, value, scalar=float, **kwargs)

    @classmethod
    def _emptyarray(cls, shape):
        return np.empty(shape, np.float64)

    def _fixmat_overload_(self, fun, *args, **kwargs):
        if fun is equals and all(isinstance(x, FloatMatrix) for x in args[:2]):
            a, b, precision, factor = args

            if a.shape != b.shape:
                raise DimensionError(f"shape mismatch {a.shape} != {b.shape}")

            if precision is None:
                precision = epsilon(float)

            return not np.any(np.abs(a._data - b._data) > precision * factor)

        return super()._fixmat_overload_(fun, *args, **kwargs)
