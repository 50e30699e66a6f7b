"""Closed surfaces."""

from torchtopo.examples.surfaces import (
    cube_surface,
    square_pillow,
    tetrahedron_surface,
)

__all__ = [
    "cube_surface",
    "square_pillow",
    "tetrahedron_surface",
]
