from typing import Tuple, Any
import numpy as np


class Matrix:
    """
    A 3x3 affine transformation matrix for 2D canvas coordinates.

    Composition follows the usual math convention: `(A @ B)` applied to
    a point first applies B, then A. The canvas view transform is built
    as `translation(pan) @ scale(zoom)`.
    """

    def __init__(self, data: Any = None):
        if data is None:
            self.m: np.ndarray = np.identity(3, dtype=float)
        elif isinstance(data, Matrix):
            self.m = data.m.copy()
        else:
            try:
                self.m = np.array(data, dtype=float)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Could not create Matrix from data: {e}")
            if self.m.shape != (3, 3):
                raise ValueError("Input data must be a 3x3 matrix.")

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(np.dot(self.m, other.m))

    def __eq__(self, other: Any) -> bool:
        """Compares with np.allclose, so float noise is tolerated."""
        if not isinstance(other, Matrix):
            return False
        return np.allclose(self.m, other.m)

    def __repr__(self) -> str:
        return f"Matrix({self.m.tolist()})"

    @staticmethod
    def translation(tx: float, ty: float) -> "Matrix":
        return Matrix(
            [
                [1, 0, tx],
                [0, 1, ty],
                [0, 0, 1],
            ]
        )

    @staticmethod
    def scale(sx: float, sy: float) -> "Matrix":
        return Matrix(
            [
                [sx, 0, 0],
                [0, sy, 0],
                [0, 0, 1],
            ]
        )

    def invert(self) -> "Matrix":
        """
        Raises `numpy.linalg.LinAlgError` if the matrix is singular,
        e.g. for a zero scale.
        """
        return Matrix(np.linalg.inv(self.m))

    def transform_point(
        self, point: Tuple[float, float]
    ) -> Tuple[float, float]:
        vec = np.array([point[0], point[1], 1.0])
        res = np.dot(self.m, vec)
        return float(res[0]), float(res[1])

    def for_cairo(self) -> Tuple[float, float, float, float, float, float]:
        """Returns (xx, yx, xy, yy, x0, y0) as cairo.Matrix expects."""
        m = self.m
        return (
            float(m[0, 0]),
            float(m[1, 0]),
            float(m[0, 1]),
            float(m[1, 1]),
            float(m[0, 2]),
            float(m[1, 2]),
        )
