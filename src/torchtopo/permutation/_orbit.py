"""Half-edge pairing and canonical orbits (cycles of a permutation)."""

from typing import Iterable

import torch


def twin(half_edge: int | torch.Tensor) -> int | torch.Tensor:
    """Return the oppositely oriented half-edge of the same undirected edge.

    Half-edges are paired as (0, 1), (2, 3), ..., i.e. the twin flips the
    lowest bit. Works elementwise on integer tensors.

    Args:
        half_edge: Non-negative half-edge index, or an integer tensor of them.

    Returns:
        Twin index (or tensor of twin indices).

    Raises:
        ValueError: If any index is negative.
    """
    if isinstance(half_edge, torch.Tensor):
        if half_edge.numel() > 0 and bool((half_edge < 0).any()):
            raise ValueError(
                f"Half-edge indices must be non-negative, but got {half_edge.min().item()=}."
            )
        return torch.bitwise_xor(half_edge, 1)

    if half_edge < 0:
        raise ValueError(f"Half-edge indices must be non-negative, but got {half_edge=}.")
    return half_edge ^ 1


class Orbit(tuple):
    """Cycle of half-edge indices, rotated so that its minimum comes first.

    Two orbits describing the same cycle from different starting points are
    equal. Ordering and hashing are those of the underlying tuple, so orbits
    sort lexicographically by their canonical sequence.

    Example:
        >>> Orbit([2, 1, 3])
        Orbit([1, 3, 2])
        >>> Orbit([3, 2, 1]) == Orbit([2, 1, 3])
        True
        >>> Orbit([1, 2, 3]) == Orbit([1, 3, 2])
        False
    """

    __slots__ = ()

    def __new__(cls, half_edges: Iterable[int]) -> "Orbit":
        half_edges = [int(h) for h in half_edges]
        if len(half_edges) == 0:
            raise ValueError("An orbit must contain at least one half-edge.")

        ### Rotate so that the first occurrence of the minimum leads
        start = half_edges.index(min(half_edges))
        return super().__new__(cls, half_edges[start:] + half_edges[:start])

    def __repr__(self) -> str:
        return f"Orbit({list(self)})"

    def to_tensor(self, device: torch.device | str | None = None) -> torch.Tensor:
        """Canonical sequence as a 1-D int64 tensor."""
        return torch.tensor(list(self), dtype=torch.int64, device=device)
