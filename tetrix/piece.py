"""Tetromino shapes and the piece that carries one."""

from __future__ import annotations

import random
from enum import IntEnum

Coords = tuple[tuple[int, int], ...]


class TetrixShape(IntEnum):
    """The seven tetromino shapes, plus the empty shape."""

    NO_SHAPE = 0
    Z_SHAPE = 1
    S_SHAPE = 2
    LINE_SHAPE = 3
    T_SHAPE = 4
    SQUARE_SHAPE = 5
    L_SHAPE = 6
    MIRRORED_L_SHAPE = 7


_COORDS_TABLE: dict[TetrixShape, Coords] = {
    TetrixShape.NO_SHAPE: ((0, 0), (0, 0), (0, 0), (0, 0)),
    TetrixShape.Z_SHAPE: ((0, -1), (0, 0), (-1, 0), (-1, 1)),
    TetrixShape.S_SHAPE: ((0, -1), (0, 0), (1, 0), (1, 1)),
    TetrixShape.LINE_SHAPE: ((0, -1), (0, 0), (0, 1), (0, 2)),
    TetrixShape.T_SHAPE: ((-1, 0), (0, 0), (1, 0), (0, 1)),
    TetrixShape.SQUARE_SHAPE: ((0, 0), (1, 0), (0, 1), (1, 1)),
    TetrixShape.L_SHAPE: ((-1, -1), (0, -1), (0, 0), (0, 1)),
    TetrixShape.MIRRORED_L_SHAPE: ((1, -1), (0, -1), (0, 0), (0, 1)),
}


class TetrixPiece:
    """A tetromino: its shape and the offsets of its four squares."""

    __slots__ = ("shape", "coords")

    def __init__(self, shape: TetrixShape = TetrixShape.NO_SHAPE) -> None:
        self.shape = TetrixShape.NO_SHAPE
        self.coords: Coords = _COORDS_TABLE[TetrixShape.NO_SHAPE]
        self.set_shape(shape)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TetrixPiece):
            return NotImplemented
        return self.shape == other.shape and self.coords == other.coords

    def __repr__(self) -> str:
        return f"TetrixPiece({self.shape.name}, {self.coords!r})"

    def set_random_shape(self, rng: random.Random | None = None) -> None:
        """Give the piece one of the seven real shapes, chosen at random."""
        rng = rng if rng is not None else random
        self.set_shape(TetrixShape(rng.randrange(7) + 1))

    def set_shape(self, shape: TetrixShape) -> None:
        """Give the piece a shape in its starting orientation."""
        shape = TetrixShape(shape)
        self.coords = _COORDS_TABLE[shape]
        self.shape = shape

    def x(self, index: int) -> int:
        return self.coords[index][0]

    def y(self, index: int) -> int:
        return self.coords[index][1]

    def min_x(self) -> int:
        return min(x for x, _ in self.coords)

    def max_x(self) -> int:
        return max(x for x, _ in self.coords)

    def min_y(self) -> int:
        return min(y for _, y in self.coords)

    def max_y(self) -> int:
        return max(y for _, y in self.coords)

    def _with_coords(self, coords: Coords) -> TetrixPiece:
        result = TetrixPiece()
        result.shape = self.shape
        result.coords = coords
        return result

    def rotated_left(self) -> TetrixPiece:
        """Return a copy turned a quarter turn counter-clockwise."""
        if self.shape == TetrixShape.SQUARE_SHAPE:
            return self._with_coords(self.coords)
        return self._with_coords(tuple((y, -x) for x, y in self.coords))

    def rotated_right(self) -> TetrixPiece:
        """Return a copy turned a quarter turn clockwise."""
        if self.shape == TetrixShape.SQUARE_SHAPE:
            return self._with_coords(self.coords)
        return self._with_coords(tuple((-y, x) for x, y in self.coords))