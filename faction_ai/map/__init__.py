"""Hex map geometry for the sector."""

from .coordinates import (
    CubeCoordinate,
    HexCoordinate,
    are_adjacent,
    cube_distance,
    hex_distance,
    offset_neighbors,
    offset_to_cube,
)

__all__ = [
    "CubeCoordinate",
    "HexCoordinate",
    "are_adjacent",
    "cube_distance",
    "hex_distance",
    "offset_neighbors",
    "offset_to_cube",
]
