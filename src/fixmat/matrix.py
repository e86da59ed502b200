import itertools
import numbers
import operator
from collections.abc import Iterator, Sequence
from typing import Any, Self, overload

import numpy as np
import numpy.typing as npt

from fixmat.context import getcontext
from fixmat.elimination import back_substitute, reduce_rows
from fixmat.exceptions import (
    DimensionError,
    InvalidArgumentError,
    PreconditionError,
)
from fixmat.numeric import epsilon, one, tostr, zero
from fixmat.typing import ComparableScalar

TOLERANCE_FACTOR = 100
"""Multiple of the machine epsilon below which a pivot is treated as zero."""


class flatiter[T: ComparableScalar](Iterator[T]):
    __slots__ = ("_iter", "_matrix")
    _iter: Iterator
    _matrix: "Matrix[T]"

    def __init__(self, a: "Matrix[T]", /):
        self._iter = iter(itertools.product(*(range(n) for n in a.shape)))
        self._matrix = a

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> T:
        return self._matrix._data[next(self._iter)]


class matiter(Iterator):
    __slots__ = ("_iter", "_matrix")
    _iter: Iterator
    _matrix: "Matrix"

    def __init__(self, a: "Matrix", /):
        self._iter = iter(range(len(a)))
        self._matrix = a

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> npt.NDArray:
        return self._matrix.at(next(self._iter))


class Matrix[S: ComparableScalar]:
    """Dense matrix whose dimensions are fixed at construction.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.
    value : Matrix | Sequence | S, optional
        Initial entries. A scalar fills every entry, a flat sequence of
        ``rows * cols`` values is read in row-major order, a sequence of `rows`
        sequences of length `cols` is read row by row, and a matrix of the same
        dimensions is copied. If omitted, the matrix is filled with zeros.
    scalar : type, optional
        Element type. Entries that are not instances of `scalar` are converted by
        calling ``scalar(x)``. Defaults to the element type of `value` if it is a
        matrix, and to :class:`float` otherwise.

    Raises
    ------
    PreconditionError
        If the dimensions are negative or `value` does not have the requested
        dimensions.

    Examples
    --------
    >>> from fractions import Fraction
    >>> x = Matrix(2, 3, [[1, 2, 3], [4, 5, 6]])
    >>> x.shape
    (2, 3)
    >>> Matrix(2, 2, [1, 2, 3, 4], scalar=Fraction).at(1, 0)
    Fraction(3, 1)
    """

    __slots__ = ("_data", "_scalar")
    __array_ufunc__ = None
    _data: npt.NDArray
    _scalar: type[S]

    def __init__(
        self,
        rows: int,
        cols: int,
        value: "Matrix[S] | Sequence | npt.NDArray | S | None" = None,
        /,
        *,
        scalar: type[S] | None = None,
        **kwargs,
    ):
        if scalar is None:
            scalar = value._scalar if isinstance(value, Matrix) else float

        self._scalar = scalar  # type: ignore

        if kwargs.get("_skipcheck"):
            self._data = value  # type: ignore
            return

        rows, cols = operator.index(rows), operator.index(cols)

        if rows < 0 or cols < 0:
            raise PreconditionError(f"negative dimensions ({rows}, {cols})")

        self._data = self._emptyarray((rows, cols))

        match value:
            case None:
                self._data[...] = zero(scalar)

            case Matrix():
                if value.shape != (rows, cols):
                    raise PreconditionError(
                        f"cannot copy a {value.rows}x{value.cols} matrix into a "
                        f"{rows}x{cols} matrix"
                    )

                for key in itertools.product(range(rows), range(cols)):
                    self._data[key] = self._convert(value._data[key])

            case str() | bytes():
                raise TypeError(f"cannot build a matrix from {type(value).__name__}")

            case np.ndarray() | Sequence():
                self._load(value)

            case _:
                fill = self._convert(value)

                for key in itertools.product(range(rows), range(cols)):
                    self._data[key] = fill

    @classmethod
    def _emptyarray(cls, shape: tuple[int, int]) -> npt.NDArray:
        return np.empty(shape, np.object_)

    def _convert(self, value: Any) -> S:
        if isinstance(value, self._scalar):
            return value

        return self._scalar(value)  # type: ignore

    def _load(self, value: Sequence | npt.NDArray) -> None:
        rows, cols = self.shape
        items = list(value)

        if items and self._isrow(items[0]):
            if len(items) != rows:
                raise PreconditionError(f"expected {rows} rows, got {len(items)}")

            for i, row in enumerate(items):
                if not self._isrow(row) or len(row) != cols:
                    raise PreconditionError(f"row {i} does not have {cols} entries")

                for j in range(cols):
                    self._data[i, j] = self._convert(row[j])

            return

        if len(items) != rows * cols:
            raise PreconditionError(
                f"expected {rows * cols} entries, got {len(items)}"
            )

        for (i, j), x in zip(itertools.product(range(rows), range(cols)), items):
            self._data[i, j] = self._convert(x)

    @staticmethod
    def _isrow(value: Any) -> bool:
        return isinstance(value, (Sequence, np.ndarray)) and not isinstance(
            value, (str, bytes)
        )

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self._data.shape[1]

    @property
    def flat(self) -> flatiter[S]:
        """Iterator over the entries in row-major order."""
        return flatiter(self)

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self._data.shape[0]

    @property
    def scalar(self) -> type[S]:
        """Element type."""
        return self._scalar

    @property
    def shape(self) -> tuple[int, int]:
        """Tuple ``(rows, cols)``.

        Examples
        --------
        >>> Matrix(2, 3).shape
        (2, 3)
        """
        return self._data.shape  # type: ignore

    @property
    def size(self) -> int:
        return self._data.size

    @property
    def T(self) -> Self:
        """Shorthand for :meth:`transpose`."""
        return self.transpose()

    @classmethod
    def eye(cls, n: int, m: int | None = None, *, scalar: type[S] = float) -> Self:
        """Return a matrix with ones on the diagonal and zeros elsewhere."""
        if m is None:
            m = n

        result = cls.zeros(n, m, scalar=scalar)
        ONE = one(scalar)

        for i in range(min(n, m)):
            result._data[i, i] = ONE

        return result

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence], *, scalar: type[S] = float) -> Self:
        """Return a matrix whose dimensions are taken from a nested sequence.

        Examples
        --------
        >>> Matrix.from_rows([[1, 2, 3], [4, 5, 6]]).shape
        (2, 3)
        """
        cols = len(rows[0]) if len(rows) else 0
        return cls(len(rows), cols, rows, scalar=scalar)

    @classmethod
    def full(cls, rows: int, cols: int, value: S, *, scalar: type[S] = float) -> Self:
        """Return a new matrix of given dimensions, filled with `value`."""
        return cls(rows, cols, value, scalar=scalar)

    @classmethod
    def identity(cls, n: int, *, scalar: type[S] = float) -> Self:
        """Return the identity matrix of order `n`.

        Examples
        --------
        >>> print(Matrix.identity(2))
        Matrix<2,2>
        {
        1.000000,0.000000,
        0.000000,1.000000,
        }
        """
        return cls.eye(n, scalar=scalar)

    @classmethod
    def ones(cls, rows: int, cols: int, *, scalar: type[S] = float) -> Self:
        """Return a new matrix of given dimensions, filled with ones."""
        return cls(rows, cols, one(scalar), scalar=scalar)

    @classmethod
    def zeros(cls, rows: int, cols: int, *, scalar: type[S] = float) -> Self:
        """Return a new matrix of given dimensions, filled with zeros."""
        return cls(rows, cols, zero(scalar), scalar=scalar)

    @overload
    def at(self, row: int, /) -> npt.NDArray: ...

    @overload
    def at(self, row: int, col: int, /) -> S: ...

    def at(self, row, col=None, /):
        """Return a row, or an entry if `col` is given.

        A row is returned as a read-only view into the matrix. Entries are assigned
        with ``m[row, col] = value`` so that they are converted to the element type.

        Raises
        ------
        IndexError
            If an index is out of range. Negative indices are out of range.
        """
        row = self._checkindex(row, self.rows, "row")

        if col is None:
            view = self._data[row]
            view.flags.writeable = False
            return view

        col = self._checkindex(col, self.cols, "column")
        return self._data[row, col]

    @staticmethod
    def _checkindex(index: int, n: int, axis: str) -> int:
        index = operator.index(index)

        if not 0 <= index < n:
            raise IndexError(f"{axis} index {index} is out of range [0, {n})")

        return index

    def copy(self) -> Self:
        """Return a copy of the matrix."""
        cls, data = type(self), self._data.copy()
        return cls(*self.shape, data, scalar=self._scalar, _skipcheck=True)

    def gauss(self) -> Self:
        """Shorthand for ``gauss(self)``."""
        return gauss(self)

    def gauss_jordan(self) -> Self:
        """Shorthand for ``gauss_jordan(self)``."""
        return gauss_jordan(self)

    def identity_like(self) -> Self:
        """Return the identity matrix with the same dimensions as `self`.

        Raises
        ------
        DimensionError
            If the matrix is not square.
        """
        if self.rows != self.cols:
            raise DimensionError(
                f"identity of a non-square {self.rows}x{self.cols} matrix"
            )

        return self.identity(self.rows, scalar=self._scalar)

    def inverse(self) -> Self:
        """Shorthand for ``inv(self)``."""
        return inv(self)

    def ones_like(self) -> Self:
        """Return a matrix of ones with the same dimensions as `self`."""
        return self.ones(*self.shape, scalar=self._scalar)

    def solve(self) -> Self:
        """Shorthand for ``solve(self)``."""
        return solve(self)

    def to_string(self) -> str:
        """Return a textual dump of the matrix.

        The first line gives the number of columns and rows, followed by the entries
        enclosed in braces, one line per row, each entry followed by a comma.

        Examples
        --------
        >>> print(Matrix(2, 2, [1, 2, 3, 4]).to_string())
        Matrix<2,2>
        {
        1.000000,2.000000,
        3.000000,4.000000,
        }
        """
        prec = getcontext().prec
        return self._dump(lambda x: tostr(x, prec))

    def _dump(self, fmt) -> str:
        lines = [f"Matrix<{self.cols},{self.rows}>", "{"]

        for row in self._data:
            lines.append("".join(f"{fmt(x)}," for x in row))

        lines.append("}")
        return "\n".join(lines)

    def tolist(self) -> list[list[S]]:
        """Return the entries as a list of rows."""
        return self._data.tolist()

    def transpose(self) -> Self:
        """Return the transposed matrix.

        Examples
        --------
        >>> Matrix(2, 3, [1, 2, 3, 4, 5, 6]).transpose().shape
        (3, 2)
        """
        cls, data = type(self), self._data.T.copy()
        return cls(self.cols, self.rows, data, scalar=self._scalar, _skipcheck=True)

    def zeros_like(self) -> Self:
        """Return a matrix of zeros with the same dimensions as `self`."""
        return self.zeros(*self.shape, scalar=self._scalar)

    def _isscalar(self, value: Any) -> bool:
        return isinstance(value, (numbers.Number, self._scalar))

    def _fixmat_overload_(self, fun, *args, **kwargs):
        cls = type(self)

        if fun is gauss:
            return self.__eliminate("echelon")

        if fun is gauss_jordan:
            return self.__eliminate("reduced")

        if fun is inv:
            return self.__inv()

        if fun is solve:
            return self.__solve()

        if fun is equals:
            if not (isinstance(args[0], Matrix) and isinstance(args[1], Matrix)):
                raise TypeError

            return cls.__equals(*args)

        return NotImplemented

    def __eliminate(self, mode):
        cls, data = type(self), self._data.copy()
        reduce_rows(data, mode)
        return cls(*self.shape, data, scalar=self._scalar, _skipcheck=True)

    def __equals(self, other, precision, factor):
        if self.shape != other.shape:
            raise DimensionError(f"shape mismatch {self.shape} != {other.shape}")

        if precision is None:
            precision = epsilon(self._scalar)

        tol = precision * factor

        for x, y in zip(self.flat, other.flat):
            if abs(x - y) > tol:
                return False

        return True

    def __inv(self):
        if self.rows != self.cols:
            raise DimensionError("non-square matrix")

        cls, n = type(self), self.rows
        a = self._emptyarray((n, 2 * n))
        a[:, :n] = self._data
        a[:, n:] = self.eye(n, scalar=self._scalar)._data
        tol = None

        if getcontext().singular == "TOLERANCE":
            tol = epsilon(self._scalar) * TOLERANCE_FACTOR

        reduce_rows(a, "reduced", strict=True, tol=tol)
        return cls(n, n, a[:, n:].copy(), scalar=self._scalar, _skipcheck=True)

    def __solve(self):
        if self.cols != self.rows + 1:
            raise InvalidArgumentError(
                f"expected an augmented system with {self.rows + 1} columns, "
                f"got {self.cols}"
            )

        cls, n, data = type(self), self.rows, self._data.copy()
        reduce_rows(data, "echelon")
        tol = epsilon(self._scalar) * TOLERANCE_FACTOR
        x = back_substitute(data, zero(self._scalar), tol)
        return cls(n, 1, x.reshape(n, 1), scalar=self._scalar, _skipcheck=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented

        if other.shape != self.shape:
            return False

        return bool(np.all(other._data == self._data))

    def __len__(self) -> int:
        return len(self._data)

    @overload
    def __getitem__(self, key: int) -> npt.NDArray: ...

    @overload
    def __getitem__(self, key: tuple[int, int]) -> S: ...

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.at(*key)

        return self.at(key)

    @overload
    def __setitem__(self, key: tuple[int, int], value: S | float | int) -> None: ...

    @overload
    def __setitem__(self, key: int, value: Sequence[S | float | int]) -> None: ...

    def __setitem__(self, key, value):
        if isinstance(key, tuple):
            row, col = key
            row = self._checkindex(row, self.rows, "row")
            col = self._checkindex(col, self.cols, "column")
            self._data[row, col] = self._convert(value)
            return

        row = self._checkindex(key, self.rows, "row")

        if len(value) != self.cols:
            raise PreconditionError(f"row must have {self.cols} entries")

        for j in range(self.cols):
            self._data[row, j] = self._convert(value[j])

    def __iter__(self) -> matiter:
        return matiter(self)

    def __add__(self, rhs: Self) -> Self:
        return self.copy().__iadd__(rhs)

    def __sub__(self, rhs: Self) -> Self:
        return self.copy().__isub__(rhs)

    def __mul__(self, rhs: "Matrix | S | float | int") -> Self:
        if isinstance(rhs, Matrix):
            return self.__matmul__(rhs)

        return self.copy().__imul__(rhs)

    def __truediv__(self, rhs: S | float | int) -> Self:
        return self.copy().__itruediv__(rhs)

    def __matmul__(self, rhs: "Matrix") -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        if self.cols != rhs.rows:
            raise DimensionError(
                f"cannot multiply a {self.rows}x{self.cols} matrix by a "
                f"{rhs.rows}x{rhs.cols} matrix"
            )

        ZERO = zero(self._scalar)
        lhs, rhs_ = self._data, rhs._data
        result = self.__empty(self.rows, rhs.cols)

        for i in range(self.rows):
            for j in range(rhs.cols):
                result._data[i, j] = sum(
                    (lhs[i, k] * rhs_[k, j] for k in range(self.cols)), ZERO
                )

        return result

    def __rmul__(self, lhs: S | float | int) -> Self:
        return self.copy().__imul__(lhs)

    def __iadd__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        self.__checkshape(rhs)

        for key in itertools.product(*(range(n) for n in self.shape)):
            self._data[key] += rhs._data[key]

        return self

    def __isub__(self, rhs: Self) -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        self.__checkshape(rhs)

        for key in itertools.product(*(range(n) for n in self.shape)):
            self._data[key] -= rhs._data[key]

        return self

    def __imul__(self, rhs: S | float | int) -> Self:
        if not self._isscalar(rhs):
            return NotImplemented

        for key in itertools.product(*(range(n) for n in self.shape)):
            self._data[key] *= rhs

        return self

    def __itruediv__(self, rhs: S | float | int) -> Self:
        if not self._isscalar(rhs):
            return NotImplemented

        for key in itertools.product(*(range(n) for n in self.shape)):
            self._data[key] /= rhs

        return self

    def __neg__(self) -> Self:
        return self.copy().__imul__(-one(self._scalar))

    def __pos__(self) -> Self:
        return self.copy()

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo) -> Self:
        return self.copy()

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return self.to_string()

        return self._dump(lambda x: format(x, format_spec))

    def __repr__(self) -> str:
        cls = type(self).__name__
        name = getattr(self._scalar, "__name__", repr(self._scalar))
        return f"{cls}({self.rows}, {self.cols}, {self.tolist()!r}, scalar={name})"

    def __str__(self) -> str:
        return self.to_string()

    def __checkshape(self, other: "Matrix") -> None:
        if self.shape != other.shape:
            raise DimensionError(f"shape mismatch {self.shape} != {other.shape}")

    def __empty(self, rows: int, cols: int) -> Self:
        cls, data = type(self), self._emptyarray((rows, cols))
        return cls(rows, cols, data, scalar=self._scalar, _skipcheck=True)


def equals(a: Matrix, b: Matrix, precision: Any = None, factor: int = 1) -> bool:
    """Test whether two matrices agree entry by entry up to a tolerance.

    Parameters
    ----------
    a, b : Matrix
        Matrices of the same dimensions.
    precision : optional
        Allowed absolute difference per entry. Defaults to the machine epsilon of the
        element type of `a`.
    factor : int, default=1
        Multiplier applied to `precision`.

    Returns
    -------
    bool
        ``False`` if any pair of entries differs by more than ``precision * factor``.

    Raises
    ------
    DimensionError
        If `a` and `b` have different dimensions.

    Examples
    --------
    >>> x = Matrix(1, 2, [1.0, 2.0])
    >>> equals(x, x + Matrix(1, 2, [1e-15, 0.0]), factor=100)
    True
    >>> equals(x, x + Matrix(1, 2, [1e-3, 0.0]), factor=100)
    False
    """
    linearized = (a, b)

    if type(a) is not type(b) and issubclass(type(b), type(a)):
        linearized = (b, a)

    for x in linearized:
        if fun := getattr(type(x), "_fixmat_overload_", None):
            if (res := fun(x, equals, a, b, precision, factor)) is not NotImplemented:
                return res

    raise TypeError


def gauss[T: Matrix](a: T) -> T:
    """Return a row echelon form of `a` computed with partial pivoting.

    Every pivot is scaled to one and the entries below it are eliminated. A zero pivot
    is left in place without error, so singular matrices are reduced as far as
    possible.

    Parameters
    ----------
    a : Matrix
        Matrix to be reduced, typically an augmented system.

    Returns
    -------
    Matrix
        Matrix with the same dimensions as `a`.
    """
    if (res := a._fixmat_overload_(gauss, a)) is not NotImplemented:
        return res

    raise RuntimeError


def gauss_jordan[T: Matrix](a: T) -> T:
    """Return the reduced row echelon form of `a` computed with partial pivoting.

    Unlike :func:`gauss`, every pivot column is also eliminated from the rows above
    the pivot. A column whose pivot is zero is skipped without error.

    Examples
    --------
    >>> a = Matrix(2, 3, [[2, 4, 2], [1, 3, 2]])
    >>> print(gauss_jordan(a))
    Matrix<3,2>
    {
    1.000000,0.000000,-1.000000,
    0.000000,1.000000,1.000000,
    }
    """
    if (res := a._fixmat_overload_(gauss_jordan, a)) is not NotImplemented:
        return res

    raise RuntimeError


def identity[T](n: int, *, scalar: type[T] = float) -> Matrix[T]:  # type: ignore
    """Return the identity matrix of order `n`."""
    return Matrix.identity(n, scalar=scalar)


def inv[T: Matrix](a: T) -> T:
    """Compute the inverse of a square matrix.

    The matrix is augmented with the identity and reduced by Gauss-Jordan elimination
    with partial pivoting. Whether a pivot counts as singular is controlled by
    :attr:`fixmat.context.Context.singular`.

    Raises
    ------
    DimensionError
        If `a` is not square.
    SingularMatrixError
        If a singular pivot is encountered.
    """
    if (res := a._fixmat_overload_(inv, a)) is not NotImplemented:
        return res

    raise RuntimeError


def solve[T: Matrix](a: T) -> T:
    """Solve the linear system given by the augmented matrix ``[A | b]``.

    The system is brought into row echelon form by :func:`gauss` and solved by back
    substitution. An unknown whose pivot is not larger than ``100`` times the machine
    epsilon in absolute value is set to zero.

    Returns
    -------
    Matrix
        Column vector of the unknowns.

    Raises
    ------
    InvalidArgumentError
        If `a` does not have exactly one column more than rows.

    Examples
    --------
    >>> a = Matrix(2, 3, [[1, 1, 3], [1, -1, 1]])
    >>> solve(a).tolist()
    [[2.0], [1.0]]
    """
    if (res := a._fixmat_overload_(solve, a)) is not NotImplemented:
        return res

    raise RuntimeError


def transpose[T: Matrix](a: T) -> T:
    """Shorthand for ``a.transpose()``."""
    return a.transpose()
