"""Offset/cube coordinate system for the sector hex map.

Systems are placed on an "odd-r" offset layout: every odd row is shifted
half a hex to the right. Distances are computed in cube coordinates.

Coordinate System:
    - Offset coordinates (x, y): x is the column, y is the row
    - Cube coordinates (q, r, s) with q + r + s == 0
    - Distance = max(|dq|, |dr|, |ds|)

Neighbour ordering (clockwise from East):
    0 = East
    1 = Northeast
    2 = Northwest
    3 = West
    4 = Southwest
    5 = Southeast
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class HexCoordinate:
    """Offset (odd-r) position of a system on the sector map."""

    x: int
    y: int

    @classmethod
    def from_value(cls, value) -> "HexCoordinate":
        """Accept a HexCoordinate, an ``(x, y)`` pair or a ``{"x", "y"}`` mapping."""
        if isinstance(value, HexCoordinate):
            return value
        if isinstance(value, dict):
            return cls(int(value["x"]), int(value["y"]))
        x, y = value
        return cls(int(x), int(y))


@dataclass(frozen=True)
class CubeCoordinate:
    q: int
    r: int
    s: int


# Offset deltas for even and odd rows (odd-r layout), clockwise from East
_EVEN_ROW_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),  # 0: East
    ( 0, -1),  # 1: Northeast
    (-1, -1),  # 2: Northwest
    (-1,  0),  # 3: West
    (-1, +1),  # 4: Southwest
    ( 0, +1),  # 5: Southeast
]

_ODD_ROW_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),  # 0: East
    (+1, -1),  # 1: Northeast
    ( 0, -1),  # 2: Northwest
    (-1,  0),  # 3: West
    ( 0, +1),  # 4: Southwest
    (+1, +1),  # 5: Southeast
]


def offset_to_cube(coord: HexCoordinate) -> CubeCoordinate:
    """Convert odd-r offset coordinates to cube coordinates.

    Args:
        coord: Offset coordinate of the hex

    Returns:
        Cube coordinate with ``q + r + s == 0``
    """
    q = coord.x - (coord.y - (coord.y & 1)) // 2
    r = coord.y
    return CubeCoordinate(q, r, -q - r)


def cube_distance(a: CubeCoordinate, b: CubeCoordinate) -> int:
    """Number of hex steps between two cube coordinates."""
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def hex_distance(a: HexCoordinate, b: HexCoordinate) -> int:
    """Calculate the distance between two hexes given in offset coordinates.

    Args:
        a: First hex
        b: Second hex

    Returns:
        Minimum number of adjacent-hex steps between the two positions
    """
    return cube_distance(offset_to_cube(a), offset_to_cube(b))


def offset_neighbors(coord: HexCoordinate) -> List[HexCoordinate]:
    """Return the six neighbours of a hex, clockwise from East."""
    directions = _ODD_ROW_DIRECTIONS if coord.y & 1 else _EVEN_ROW_DIRECTIONS
    return [HexCoordinate(coord.x + dx, coord.y + dy) for dx, dy in directions]


def are_adjacent(a: HexCoordinate, b: HexCoordinate) -> bool:
    return hex_distance(a, b) == 1


__all__ = [
    "CubeCoordinate",
    "HexCoordinate",
    "are_adjacent",
    "cube_distance",
    "hex_distance",
    "offset_neighbors",
    "offset_to_cube",
]
