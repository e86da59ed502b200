"""
#####################################
Exceptions (:mod:`fixmat.exceptions`)
#####################################

.. currentmodule:: fixmat.exceptions

.. autosummary::
    :toctree: generated/

    PreconditionError
    LinAlgError
    DimensionError
    InvalidArgumentError
    SingularMatrixError

"""


class PreconditionError(ValueError):
    """Error raised when a matrix literal does not fit the requested dimensions."""


class LinAlgError(ValueError):
    """Error raised by :mod:`fixmat` linear algebra routines."""


class DimensionError(LinAlgError):
    """Error raised when the dimensions of the operands are incompatible."""


class InvalidArgumentError(LinAlgError):
    """Error raised when a matrix is not an augmented system of the expected width."""


class SingularMatrixError(LinAlgError, RuntimeError):
    """Error raised when a matrix cannot be inverted."""
