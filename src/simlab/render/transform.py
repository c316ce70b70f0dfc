from __future__ import annotations

import math

import numpy as np


class Affine2D:
    """2D affine transform stored as a homogeneous 3x3 matrix.

    Composition follows the canvas convention: ``t.translate(...)`` returns a
    transform that applies the translation *before* ``t`` when mapping a
    point, like successive ``translate``/``scale`` calls on a drawing context.
    """

    __slots__ = ("matrix",)

    def __init__(self, matrix: np.ndarray | None = None) -> None:
        if matrix is None:
            matrix = np.identity(3, dtype=float)
        self.matrix = np.asarray(matrix, dtype=float)
        if self.matrix.shape != (3, 3):
            raise ValueError("Affine2D expects a 3x3 matrix")

    @classmethod
    def identity(cls) -> "Affine2D":
        return cls()

    @classmethod
    def from_translation(cls, tx: float, ty: float) -> "Affine2D":
        m = np.identity(3, dtype=float)
        m[0, 2] = tx
        m[1, 2] = ty
        return cls(m)

    @classmethod
    def from_scale(cls, sx: float, sy: float | None = None) -> "Affine2D":
        if sy is None:
            sy = sx
        m = np.identity(3, dtype=float)
        m[0, 0] = sx
        m[1, 1] = sy
        return cls(m)

    @classmethod
    def from_rotation(cls, angle: float) -> "Affine2D":
        c = math.cos(angle)
        s = math.sin(angle)
        m = np.identity(3, dtype=float)
        m[0, 0] = c
        m[0, 1] = -s
        m[1, 0] = s
        m[1, 1] = c
        return cls(m)

    def compose(self, other: "Affine2D") -> "Affine2D":
        """Return ``self`` applied after ``other``."""

        return Affine2D(self.matrix @ other.matrix)

    def translate(self, tx: float, ty: float) -> "Affine2D":
        return self.compose(Affine2D.from_translation(tx, ty))

    def scale(self, sx: float, sy: float | None = None) -> "Affine2D":
        return self.compose(Affine2D.from_scale(sx, sy))

    def rotate(self, angle: float) -> "Affine2D":
        return self.compose(Affine2D.from_rotation(angle))

    def inverse(self) -> "Affine2D":
        return Affine2D(np.linalg.inv(self.matrix))

    def apply(self, x: float, y: float) -> tuple[float, float]:
        m = self.matrix
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    @property
    def determinant(self) -> float:
        return float(np.linalg.det(self.matrix[:2, :2]))

    @property
    def linear_scale(self) -> float:
        """Geometric mean scale factor of the linear part."""

        return math.sqrt(abs(self.determinant))

    @property
    def flips_y(self) -> bool:
        """True when the transform mirrors shapes drawn through it."""

        return self.determinant < 0.0

    def copy(self) -> "Affine2D":
        return Affine2D(self.matrix.copy())

    def __repr__(self) -> str:
        return f"Affine2D({self.matrix.tolist()!r})"


__all__ = ["Affine2D"]
