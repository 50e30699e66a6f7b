"""Example half-edge meshes.

Each example module exposes ``load(...) -> Mesh``.
"""

from torchtopo.examples import disks, surfaces

__all__ = [
    "disks",
    "surfaces",
]
