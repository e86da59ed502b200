import copy
from fractions import Fraction

import pytest

import fixmat
from fixmat import (
    DimensionError,
    Matrix,
    PreconditionError,
    equals,
    identity,
    transpose,
)

M0 = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
M0_STR = (
    "Matrix<3,3>\n"
    "{\n"
    "1.000000,2.000000,3.000000,\n"
    "4.000000,5.000000,6.000000,\n"
    "7.000000,8.000000,9.000000,\n"
    "}"
)


def test_default_constructor():
    zeros = "Matrix<3,3>\n{\n" + "0.000000,0.000000,0.000000,\n" * 3 + "}"
    ones = "Matrix<3,3>\n{\n" + "1.000000,1.000000,1.000000,\n" * 3 + "}"
    assert Matrix(3, 3).to_string() == zeros
    assert Matrix(3, 3, 1).to_string() == ones


def test_linear_constructor():
    assert Matrix(3, 3, [1, 2, 3, 4, 5, 6, 7, 8, 9]).to_string() == M0_STR
    assert str(Matrix(3, 3, range(1, 10))) == M0_STR


def test_nested_constructor():
    assert Matrix(3, 3, M0).to_string() == M0_STR
    assert Matrix(3, 1, [[1], [2], [3]]).tolist() == [[1.0], [2.0], [3.0]]
    assert Matrix.from_rows([[1, 2, 3]]).shape == (1, 3)


def test_constructor_preconditions():
    with pytest.raises(PreconditionError):
        Matrix(3, 3, [1, 2, 3])

    with pytest.raises(PreconditionError):
        Matrix(3, 3, [[1, 2, 3], [4, 5, 6]])

    with pytest.raises(PreconditionError):
        Matrix(3, 3, [[1, 2, 3], [4, 5], [7, 8, 9]])

    with pytest.raises(PreconditionError):
        Matrix(3, 3, [[1, 2, 3], [4, 5, 6, 7], [7, 8, 9]])

    with pytest.raises(PreconditionError):
        Matrix(2, 2, Matrix(3, 3))

    with pytest.raises(PreconditionError):
        Matrix(-1, 2)

    with pytest.raises(TypeError):
        Matrix(1, 3, "abc")


def test_copy_constructor():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 3, m0)
    m2 = copy.copy(m0)
    assert m1.to_string() == m0.to_string()
    assert m0 == m1 == m2

    m1[0, 0] = 10
    m2[0, 1] = 20
    assert m0 == Matrix(3, 3, M0)


def test_element_type():
    m0 = Matrix(2, 2, [1, 2, 3, 4], scalar=Fraction)
    assert m0.scalar is Fraction
    assert all(isinstance(x, Fraction) for x in m0.flat)
    assert Matrix(2, 2, m0).scalar is Fraction

    m1 = Matrix(2, 2, [1, 2, 3, 4])
    assert m1.scalar is float
    assert isinstance(m1.at(0, 1), float)


def test_at():
    m0 = Matrix(3, 3, M0)

    with pytest.raises(IndexError):
        m0.at(m0.rows + 1)

    with pytest.raises(IndexError):
        m0.at(m0.rows, m0.cols + 1)

    with pytest.raises(IndexError):
        m0.at(0, 3)

    with pytest.raises(IndexError):
        m0[-1]

    with pytest.raises(IndexError):
        m0[3, 0]

    assert m0.at(1, 2) == 6
    assert m0[2, 0] == 7
    assert list(m0.at(2)) == [7, 8, 9]


def test_setitem():
    m0 = Matrix(1, 3)
    m0[0, 0] = 1
    m0[0, 1] = 2
    m0[0, 2] = 3
    assert m0.tolist() == [[1.0, 2.0, 3.0]]
    assert all(isinstance(x, float) for x in m0.flat)
    assert m0.to_string() == "Matrix<3,1>\n{\n1.000000,2.000000,3.000000,\n}"

    m0[0] = [4, 5, 6]
    assert m0.tolist() == [[4.0, 5.0, 6.0]]

    with pytest.raises(PreconditionError):
        m0[0] = [1, 2]

    with pytest.raises(IndexError):
        m0[1, 0] = 1


def test_assignment():
    m0 = Matrix(3, 3)
    m1 = Matrix(3, 3, M0)
    m0 = m1.copy()
    assert m0 == m1
    assert m0 is not m1


def test_comparison():
    assert Matrix(3, 3, M0) == Matrix(3, 3, M0)
    assert Matrix(3, 3, M0) != Matrix(3, 3, [[9, 8, 7], [6, 5, 4], [3, 2, 1]])
    assert Matrix(1, 2) != Matrix(2, 1)
    assert Matrix(1, 1) != [[0.0]]


def test_scalar_multiplication():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 3, M0)
    m2 = Matrix(3, 3, [[2 * x for x in row] for row in M0])

    assert m1 * 2 == m2
    assert 2 * m1 == m2
    assert m0 == m1

    m3 = m1
    m1 *= 2
    assert m1 == m2
    assert m1 is m3


def test_scalar_division():
    m0 = Matrix(3, 3, [[2 * x for x in row] for row in M0])
    m1 = m0.copy()
    m2 = Matrix(3, 3, M0)

    assert m1 / 2 == m2
    assert m0 == m1

    m1 /= 2
    assert m1 == m2


def test_division_by_zero_follows_element_type():
    with pytest.raises(ZeroDivisionError):
        Matrix(1, 1, 1.0) / 0


def test_addition():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 3, M0)
    m2 = Matrix(3, 3, [[2 * x for x in row] for row in M0])

    assert m0 + m1 == m2
    assert m0 == m1

    m1 += m0
    assert m1 == m2


def test_subtraction():
    m0 = Matrix(3, 3, [[2 * x for x in row] for row in M0])
    m1 = Matrix(3, 3, M0)

    assert m0 - m1 == m1

    m0 -= m1
    assert m0 == m1
    assert -m1 == Matrix(3, 3, [[-x for x in row] for row in M0])
    assert +m1 == m1


def test_dimension_mismatch():
    with pytest.raises(DimensionError):
        Matrix(2, 3) + Matrix(3, 2)

    with pytest.raises(DimensionError):
        Matrix(2, 3) - Matrix(2, 2)

    with pytest.raises(DimensionError):
        Matrix(2, 3) @ Matrix(2, 3)

    with pytest.raises(TypeError):
        Matrix(2, 2) + 1


def test_matrix_multiplication():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 3, [[30, 36, 42], [66, 81, 96], [102, 126, 150]])
    assert m0 * m0 == m1
    assert m0 @ m0 == m1


def test_column_vector_multiplication():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 1, [[1], [2], [3]])
    m2 = Matrix(3, 1, [[14], [32], [50]])
    assert m0 * m1 == m2


def test_row_vector_multiplication():
    m0 = Matrix(1, 3)
    m0[0, 0] = 1
    m0[0, 1] = 2
    m0[0, 2] = 3
    m1 = Matrix(3, 1)
    m1[0, 0] = 1
    m1[1, 0] = 2
    m1[2, 0] = 3
    m2 = Matrix(1, 1)
    m2[0, 0] = 14

    assert m0 * m1 == m2
    assert (m1 * m0).shape == (3, 3)


def test_transpose():
    m0 = Matrix(3, 3, M0)
    m1 = Matrix(3, 3, [[9, 8, 7], [6, 5, 4], [3, 2, 1]])

    assert m0.transpose().transpose() == m0
    assert (m0 + m1).transpose() == m0.transpose() + m1.transpose()
    assert (m0 * 4.0).transpose() == m0.transpose() * 4.0

    m2 = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    assert m2.T == Matrix(3, 2, [[1, 4], [2, 5], [3, 6]])
    assert transpose(m2).shape == (3, 2)


def test_identity():
    m0 = Matrix(3, 3, [[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    m1 = Matrix(3, 3, M0)

    assert m1.identity_like() == m0
    assert Matrix.identity(3) == m0
    assert identity(3) == m0
    assert m1 * m1.identity_like() == m1
    assert m1.identity_like() * m1 == m1

    with pytest.raises(DimensionError):
        Matrix(2, 3).identity_like()


def test_factories():
    assert Matrix.zeros(2, 2) == Matrix(2, 2)
    assert Matrix.ones(2, 3) == Matrix(2, 3, 1)
    assert Matrix.full(2, 2, 7) == Matrix(2, 2, [7, 7, 7, 7])
    assert Matrix.eye(2, 3) == Matrix(2, 3, [[1, 0, 0], [0, 1, 0]])
    assert Matrix(2, 3, M0[:2]).zeros_like() == Matrix(2, 3)
    assert Matrix(2, 3).ones_like() == Matrix.ones(2, 3)


def test_iteration():
    m0 = Matrix(2, 2, [1, 2, 3, 4])
    assert list(m0.flat) == [1.0, 2.0, 3.0, 4.0]
    assert [list(row) for row in m0] == [[1.0, 2.0], [3.0, 4.0]]
    assert len(m0) == 2
    assert m0.size == 4


def test_to_string():
    assert Matrix(2, 3).to_string().splitlines()[0] == "Matrix<3,2>"
    assert Matrix(0, 0).to_string() == "Matrix<0,0>\n{\n}"

    m0 = Matrix(1, 2, [Fraction(1, 2), 3], scalar=Fraction)
    assert str(m0) == "Matrix<2,1>\n{\n1/2,3,\n}"


def test_format():
    m0 = Matrix(1, 2, [0.5, 1.5])
    assert format(m0, ".1f") == "Matrix<2,1>\n{\n0.5,1.5,\n}"
    assert format(m0) == m0.to_string()


def test_repr():
    assert repr(Matrix(1, 2, [1, 2])) == "Matrix(1, 2, [[1.0, 2.0]], scalar=float)"


def test_equals():
    m0 = Matrix(3, 1, [[1], [2], [3]])
    m1 = Matrix(3, 1, [[1], [2], [3]])
    assert equals(m0, m1)
    assert equals(m0.T, m1.T)

    m2 = Matrix(1, 1, 1.0)
    m3 = Matrix(1, 1, 1.0 + 1e-10)
    assert not equals(m2, m3)
    assert equals(m2, m3, 1e-11, 100)
    assert not equals(m2, m3, 1e-11)
    assert equals(m2, m3, 1e-9)

    with pytest.raises(DimensionError):
        equals(m0, m0.T)


def test_rows_are_read_only():
    m0 = Matrix(1, 3)

    with pytest.raises(ValueError):
        m0.at(0)[2] = 3

    with pytest.raises(ValueError):
        m0[0][1] = 2

    for row in m0:
        with pytest.raises(ValueError):
            row[0] = 1

    assert m0.to_string() == "Matrix<3,1>\n{\n0.000000,0.000000,0.000000,\n}"

    m1 = Matrix(1, 1, scalar=Fraction)
    m1[0] = [0.5]
    assert isinstance(m1.at(0, 0), Fraction)
    assert m1.at(0, 0) == Fraction(1, 2)


def test_string_entries_are_converted():
    m0 = Matrix(1, 2, ["1/2", "3"], scalar=Fraction)
    assert m0.tolist() == [[Fraction(1, 2), Fraction(3)]]

    m1 = Matrix(2, 2, [["1/2", "3"], ["4", "5/3"]], scalar=Fraction)
    assert m1.at(1, 1) == Fraction(5, 3)

    with pytest.raises(PreconditionError):
        Matrix(2, 2, [["1", "2"], "34"], scalar=Fraction)


def test_transpose_property():
    m0 = fixmat.Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    assert m0.T == m0.transpose()
    assert m0.T.shape == (3, 2)
    assert m0.T.T == m0
    assert m0.T.scalar is float
