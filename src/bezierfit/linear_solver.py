"""Solvers for the tridiagonal and cyclic tridiagonal systems of the curve fitters."""

from __future__ import annotations

import logging
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from bezierfit.consts import PIVOT_EPSILON
from bezierfit.errors import InvalidInputError, NumericalInstabilityError

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], NDArray[np.float64]]


class LinearSystemSolver:
    """Class to solve (almost) tridiagonal linear systems.

    A system of size m is given by its three diagonals a, b, c and its right side d.
    Row i reads ``a[i]*x[i-1] + b[i]*x[i] + c[i]*x[i+1] = d[i]``; the entries
    ``a[0]`` and ``c[m-1]`` lie outside the matrix and are ignored.

    None of the methods modify the given arrays.
    """

    @staticmethod
    def _as_rows(*arrays: ArrayLike) -> list[NDArray[np.float64]]:
        rows = [np.array(array, dtype=np.float64) for array in arrays]
        size = len(rows[0])
        for row in rows:
            if row.ndim != 1 or len(row) != size:
                raise InvalidInputError(f"All diagonals must be 1-dimensional of length {size}")
        if size == 0:
            raise InvalidInputError("Cannot solve an empty system")
        return rows

    @staticmethod
    def _vanishes(value: float, *terms: float) -> bool:
        """True if value is zero relative to the largest of the terms it was computed from."""
        return abs(value) <= PIVOT_EPSILON * max(abs(term) for term in terms)

    @classmethod
    def solve_tridiagonal(cls, a: ArrayLike, b: ArrayLike, c: ArrayLike, d: ArrayLike) -> NDArray[np.float64]:
        """
        Solve a tridiagonal system with the Thomas algorithm in O(m).

        Args:
            a: Sub-diagonal, a[0] is ignored
            b: Main diagonal
            c: Super-diagonal, c[m-1] is ignored
            d: Right side

        Returns:
            NDArray[np.float64] of shape (m,) containing the solution x

        Raises:
            InvalidInputError: If the arrays are empty or differ in length
            NumericalInstabilityError: If a pivot ``b[i] - cc[i-1]*a[i]`` vanishes relative to its terms
        """
        a, b, c, d = cls._as_rows(a, b, c, d)
        size = len(b)
        a[0] = 0.0
        c[size - 1] = 0.0

        cc = np.empty(size, dtype=np.float64)
        dd = np.empty(size, dtype=np.float64)

        # forward sweep
        pivot = b[0]
        if cls._vanishes(pivot, b[0]):
            raise NumericalInstabilityError(0, float(pivot))
        cc[0] = c[0] / pivot
        dd[0] = d[0] / pivot
        for i in range(1, size):
            pivot = b[i] - cc[i - 1] * a[i]
            if cls._vanishes(pivot, b[i], cc[i - 1] * a[i]):
                raise NumericalInstabilityError(i, float(pivot))
            cc[i] = c[i] / pivot
            dd[i] = (d[i] - dd[i - 1] * a[i]) / pivot

        # back substitution
        x = np.empty(size, dtype=np.float64)
        x[size - 1] = dd[size - 1]
        for i in range(size - 2, -1, -1):
            x[i] = dd[i] - cc[i] * x[i + 1]
        return x

    @classmethod
    def solve_cyclic(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        a: ArrayLike,
        b: ArrayLike,
        c: ArrayLike,
        d: ArrayLike,
        s: float,
        t: float,
    ) -> NDArray[np.float64]:
        """
        Solve an "almost" tridiagonal system with two corner entries.

        Row 0 is ``b[0]*x[0] + c[0]*x[1] + s*x[m-1] = d[0]`` and row m-1 is
        ``t*x[0] + a[m-1]*x[m-2] + b[m-1]*x[m-1] = d[m-1]``. The Sherman-Morrison-Woodbury
        formula reduces the system to two tridiagonal solves.

        Args:
            a: Sub-diagonal, a[0] is ignored
            b: Main diagonal
            c: Super-diagonal, c[m-1] is ignored
            d: Right side
            s: Coefficient of x[m-1] in row 0
            t: Coefficient of x[0] in row m-1

        Returns:
            NDArray[np.float64] of shape (m,) containing the solution x

        Raises:
            InvalidInputError: If the arrays are empty, differ in length or m < 3
            NumericalInstabilityError: If one of the tridiagonal solves fails or the
                correction denominator is (near) zero
        """
        a, b, c, d = cls._as_rows(a, b, c, d)
        size = len(b)
        if size < 3:
            raise InvalidInputError(f"A cyclic system needs at least 3 rows, got {size}")
        logger.debug("Solving cyclic system of size %d (s=%r, t=%r)", size, s, t)

        u = np.zeros(size, dtype=np.float64)
        u[0] = 1.0
        u[size - 1] = 1.0

        b[0] -= t
        b[size - 1] -= s

        td = cls.solve_tridiagonal(a, b, c, d)
        tu = cls.solve_tridiagonal(a, b, c, u)

        denominator = 1.0 + t * tu[0] + s * tu[size - 1]
        if cls._vanishes(denominator, 1.0, t * tu[0], s * tu[size - 1]):
            raise NumericalInstabilityError(size - 1, float(denominator))
        factor = (t * td[0] + s * td[size - 1]) / denominator
        return td - factor * tu
