"""
#############################
Typing (:mod:`fixmat.typing`)
#############################

This module provides the protocols an element type of a matrix is expected to follow.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self, SupportsAbs


class Scalar(Protocol):
    """Protocol that ensures field-like behavior.

    Objects implementing this protocol must have four arithmetic operations defined,
    and the type itself must be constructible from the integers 0 and 1.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...


class ComparableScalar(Scalar, SupportsAbs, Protocol):
    """Protocol for comparable :class:`Scalar`, like a real number.

    Partial pivoting compares absolute values, so every element type of
    :class:`fixmat.Matrix` is expected to satisfy this protocol.
    """

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __ge__(self, rhs: Self) -> bool: ...
