"""Open surfaces whose border is closed into a face loop."""

from torchtopo.examples.disks import triangle_fan

__all__ = [
    "triangle_fan",
]
