"""
Dense 2-D matrix used as the data container between network layers.

Elements live in a flat row-major float64 array so that a column vector
``Matrix(n, 1)`` can be indexed directly as ``matrix.array[i]``.
"""

import operator

import numpy as np
from typing import Optional, Sequence, Union

from ..exceptions import ShapeError


class Matrix:
    """
    Fixed-size dense matrix of float64 values.

    The shape is set at construction and never changes. Every element
    access is bounds-checked against ``rows`` and ``cols``.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        values: Optional[Union[Sequence[float], np.ndarray]] = None,
    ):
        """
        Create a matrix.

        Args:
            rows: Number of rows (positive)
            cols: Number of columns (positive)
            values: Optional elements in row-major order; zero-filled if omitted

        Raises:
            ShapeError: If the shape is not positive or ``values`` has the wrong length
        """
        if rows < 1 or cols < 1:
            raise ShapeError(f"Matrix shape must be positive, got ({rows}, {cols})")

        self.rows = int(rows)
        self.cols = int(cols)

        if values is None:
            self.array = np.zeros(self.rows * self.cols, dtype=np.float64)
        else:
            array = np.array(values, dtype=np.float64).ravel()
            if array.size != self.rows * self.cols:
                raise ShapeError(
                    f"Expected {self.rows * self.cols} values for a "
                    f"({self.rows}, {self.cols}) matrix, got {array.size}"
                )
            self.array = array

    @classmethod
    def column(cls, values: Union[Sequence[float], np.ndarray]) -> 'Matrix':
        """Create a column vector from a sequence of values."""
        array = np.array(values, dtype=np.float64).ravel()
        return cls(array.size, 1, array)

    @classmethod
    def from_numpy(cls, array: np.ndarray) -> 'Matrix':
        """Create a matrix from a 2-D array (1-D arrays become column vectors)."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim == 1:
            return cls.column(array)
        if array.ndim != 2:
            raise ShapeError(f"Expected a 1-D or 2-D array, got {array.ndim} dimensions")
        return cls(array.shape[0], array.shape[1], array)

    @property
    def shape(self):
        return (self.rows, self.cols)

    def _index(self, row: int, col: int) -> int:
        try:
            row, col = operator.index(row), operator.index(col)
        except TypeError:
            raise ShapeError(f"Matrix indices must be integers, got ({row!r}, {col!r})") from None
        if not (0 <= row < self.rows) or not (0 <= col < self.cols):
            raise ShapeError(
                f"Index ({row}, {col}) out of bounds for a "
                f"({self.rows}, {self.cols}) matrix"
            )
        return row * self.cols + col

    def get(self, row: int, col: int) -> float:
        return float(self.array[self._index(row, col)])

    def set(self, row: int, col: int, value: float) -> None:
        self.array[self._index(row, col)] = value

    def clone(self) -> 'Matrix':
        """Deep copy (the copy is always writable)."""
        return Matrix(self.rows, self.cols, self.array.copy())

    def fill(self, value: float) -> None:
        """Overwrite every element in place."""
        self.array.fill(value)

    def to_numpy(self) -> np.ndarray:
        """2-D view of the elements (shares memory with the matrix)."""
        return self.array.reshape(self.rows, self.cols)

    def freeze(self) -> 'Matrix':
        """Make the matrix read-only in place and return it."""
        self.array.setflags(write=False)
        return self

    def __len__(self) -> int:
        return self.array.size

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.array, other.array)

    def __repr__(self) -> str:
        return f"Matrix({self.rows}, {self.cols}, {self.array.tolist()})"
