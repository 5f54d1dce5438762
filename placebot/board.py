"""
Canonical board snapshot and the fixed orientation transform applied to the server matrix.

The server sends rows in its own orientation. Every coordinate the bot uses (pattern anchors,
placement requests, exported snapshots) is in the canonical frame: rotate the raw matrix 90
degrees clockwise, then mirror it horizontally. Net effect: canonical[y][x] == raw[x][y].
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

Matrix = Sequence[Sequence[int]]


def _square_size(m: Matrix) -> int:
    n = len(m)
    for row in m:
        if len(row) != n:
            raise ValueError(f"board is not square: {n} rows, a row of {len(row)}")
    return n


def rotate_clockwise(m: Matrix) -> List[List[int]]:
    n = _square_size(m)
    out = [[0] * n for _ in range(n)]
    for y in range(n):
        for x in range(n):
            out[x][n - 1 - y] = m[y][x]
    return out


def rotate_counterclockwise(m: Matrix) -> List[List[int]]:
    n = _square_size(m)
    out = [[0] * n for _ in range(n)]
    for y in range(n):
        for x in range(n):
            out[y][x] = m[x][n - 1 - y]
    return out


def mirror_horizontal(m: Matrix) -> List[List[int]]:
    n = _square_size(m)
    out = [[0] * n for _ in range(n)]
    for y in range(n):
        for x in range(n):
            out[y][n - 1 - x] = m[y][x]
    return out


def to_canonical(raw: Matrix) -> List[List[int]]:
    return mirror_horizontal(rotate_clockwise(raw))


def to_server(canonical: Matrix) -> List[List[int]]:
    """Inverse of to_canonical."""
    return rotate_counterclockwise(mirror_horizontal(canonical))


class Board:
    """Immutable N x N grid of color ids in canonical orientation, read as color_at(x, y) or rows()[y][x]."""

    __slots__ = ("_cells", "size")

    def __init__(self, cells: Matrix):
        self.size = _square_size(cells)
        self._cells: Tuple[Tuple[int, ...], ...] = tuple(tuple(int(c) for c in row) for row in cells)

    @classmethod
    def from_server(cls, raw: Matrix) -> "Board":
        return cls(to_canonical(raw))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def color_at(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.size}x{self.size} board")
        return self._cells[y][x]

    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        return self._cells

    def __repr__(self) -> str:
        return f"Board(size={self.size})"
