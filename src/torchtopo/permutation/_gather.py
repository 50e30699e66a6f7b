"""Discover vertices and faces as orbits of a half-edge permutation.

Given the face-loop permutation ``next`` over half-edges 0..n-1:
- faces are the cycles of ``h -> next[h]`` (boundary half-edges in loop order)
- vertices are the cycles of ``h -> next[twin(h)]`` (outgoing half-edges in
  rotational order around the vertex)

See Keenan Crane, "Discrete Differential Geometry: An Applied Introduction",
section 2.5.
"""

import logging
from typing import Callable, Literal, Sequence

import torch

from torchtopo.errors import InvalidPermutation
from torchtopo.permutation._orbit import Orbit, twin
from torchtopo.utilities import as_int_list

logger = logging.getLogger(__name__)

OrbitMethod = Literal["visited", "trace"]


def gather_faces(
    permutation: Sequence[int] | torch.Tensor,
    method: OrbitMethod = "visited",
) -> list[Orbit]:
    """Compute one orbit per face, listing its half-edges in face-loop order.

    Args:
        permutation: The ``next`` array, length n (even), values in [0, n).
        method: ``"visited"`` marks half-edges in a single O(n) pass; ``"trace"``
            traces a full orbit from every half-edge (O(n^2)). Both return the
            same orbits.

    Returns:
        Distinct canonical orbits, sorted lexicographically.

    Raises:
        InvalidPermutation: If ``permutation`` has odd length, out-of-range
            targets, or is not a bijection.

    Example:
        >>> gather_faces([2, 7, 4, 1, 6, 3, 0, 5])
        [Orbit([0, 2, 4, 6]), Orbit([1, 7, 5, 3])]
    """
    next_half_edge = _as_permutation(permutation)
    return _gather_orbits(
        lambda h: next_half_edge[h], len(next_half_edge), method, kind="face"
    )


def gather_vertices(
    permutation: Sequence[int] | torch.Tensor,
    method: OrbitMethod = "visited",
) -> list[Orbit]:
    """Compute one orbit per vertex, listing its outgoing half-edges in rotational order.

    Args:
        permutation: The ``next`` array, length n (even), values in [0, n).
        method: Orbit discovery strategy, see ``gather_faces``.

    Returns:
        Distinct canonical orbits, sorted lexicographically.

    Raises:
        InvalidPermutation: If ``permutation`` has odd length, out-of-range
            targets, or is not a bijection.

    Example:
        >>> gather_vertices([2, 7, 4, 1, 6, 3, 0, 5])
        [Orbit([0, 7]), Orbit([1, 2]), Orbit([3, 4]), Orbit([5, 6])]
    """
    next_half_edge = _as_permutation(permutation)
    return _gather_orbits(
        lambda h: next_half_edge[twin(h)], len(next_half_edge), method, kind="vertex"
    )


def _as_permutation(permutation: Sequence[int] | torch.Tensor) -> list[int]:
    """Validate length and range of ``permutation`` and return it as a list."""
    if isinstance(permutation, torch.Tensor):
        if permutation.ndim != 1:
            raise InvalidPermutation(
                f"`permutation` must be 1-D, but got {tuple(permutation.shape)=}."
            )
        if torch.is_floating_point(permutation) or permutation.dtype == torch.bool:
            raise InvalidPermutation(
                f"`permutation` must have an int-like dtype, but got {permutation.dtype=}."
            )
        values = permutation.tolist()
    else:
        values = as_int_list(permutation, "permutation", error=InvalidPermutation)

    n = len(values)
    if n % 2 != 0:
        raise InvalidPermutation(
            f"`permutation` must have an even number of half-edges, but got {n=}."
        )

    out_of_range = [v for v in values if not 0 <= v < n]
    if out_of_range:
        raise InvalidPermutation(
            f"`permutation` targets must lie in [0, {n}), but got {out_of_range[:8]}."
        )

    return values


def _gather_orbits(
    step: Callable[[int], int],
    n: int,
    method: OrbitMethod,
    kind: str,
) -> list[Orbit]:
    if method == "visited":
        orbits = _gather_with_visited(step, n)
    elif method == "trace":
        orbits = _gather_by_tracing(step, n)
    else:
        raise ValueError(f"Invalid {method=}. Expected 'visited' or 'trace'.")

    logger.debug(f"Gathered {len(orbits)} {kind} orbits from {n} half-edges ({method=})")
    return orbits


def _gather_by_tracing(step: Callable[[int], int], n: int) -> list[Orbit]:
    """Trace the orbit of every seed and deduplicate the canonical forms."""
    orbits = set()
    for seed in range(n):
        orbit = [seed]
        current = step(seed)
        while current != seed:
            # A bijection on n elements closes every orbit within n steps
            if len(orbit) >= n:
                raise InvalidPermutation(
                    f"Orbit of half-edge {seed} does not close within {n} steps; "
                    f"`permutation` is not a bijection."
                )
            orbit.append(current)
            current = step(current)
        orbits.add(Orbit(orbit))

    return sorted(orbits)


def _gather_with_visited(step: Callable[[int], int], n: int) -> list[Orbit]:
    """Trace each orbit once, skipping seeds already claimed by an earlier orbit."""
    visited = [False] * n
    orbits = []
    for seed in range(n):
        if visited[seed]:
            continue

        visited[seed] = True
        orbit = [seed]
        current = step(seed)
        while current != seed:
            if visited[current]:
                raise InvalidPermutation(
                    f"Half-edge {current} is reached twice while tracing the orbit of "
                    f"half-edge {seed}; `permutation` is not a bijection."
                )
            visited[current] = True
            orbit.append(current)
            current = step(current)
        orbits.append(Orbit(orbit))

    return sorted(orbits)
