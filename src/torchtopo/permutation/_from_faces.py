"""Build a half-edge permutation from oriented polygon loops."""

from typing import Sequence

from torchtopo.utilities import as_int_list


def permutation_from_faces(faces: Sequence[Sequence[int]]) -> list[int]:
    """Build the face-loop permutation ``next`` from oriented vertex loops.

    Every undirected edge {a, b} with a < b receives the half-edge pair
    (2e, 2e + 1), numbered in order of first appearance: 2e runs a -> b and
    2e + 1 runs b -> a. Within each face, ``next`` maps the half-edge entering
    a vertex to the half-edge leaving it.

    Half-edges not used by any face (the border of an open surface) are chained
    into extra loops, one per boundary component, so that the result is always
    a permutation.

    Args:
        faces: Vertex loops, each consistently oriented with its neighbours.

    Returns:
        The ``next`` array over 2 * n_undirected_edges half-edges.

    Raises:
        ValueError: If a face holds a non-integer vertex, has fewer than two
            vertices or repeats a vertex consecutively, if two faces traverse
            the same half-edge (inconsistent orientation or a non-manifold
            edge), or if the border is not a disjoint union of loops.

    Example:
        >>> permutation_from_faces([[0, 1, 2]])
        [2, 4, 5, 1, 3, 0]
    """
    edge_ids: dict[tuple[int, int], int] = {}
    origins: list[int] = []
    targets: list[int] = []

    def half_edge(a: int, b: int) -> int:
        key = (min(a, b), max(a, b))
        if key not in edge_ids:
            edge_ids[key] = len(edge_ids)
            origins.extend([key[0], key[1]])
            targets.extend([key[1], key[0]])
        return 2 * edge_ids[key] + (0 if a < b else 1)

    ### Convert vertex loops to half-edge loops
    loops = []
    for face in faces:
        face = as_int_list(face, "face", error=ValueError)
        if len(face) < 2:
            raise ValueError(f"Faces must have at least two vertices, but got {face=}.")
        loop = []
        for a, b in zip(face, face[1:] + face[:1]):
            if a == b:
                raise ValueError(f"Face {face} repeats vertex {a} consecutively.")
            loop.append(half_edge(a, b))
        loops.append(loop)

    n = 2 * len(edge_ids)
    permutation = [-1] * n
    for loop in loops:
        for h, h_next in zip(loop, loop[1:] + loop[:1]):
            if permutation[h] != -1:
                raise ValueError(
                    f"Half-edge {origins[h]} -> {targets[h]} is used by two faces; "
                    f"faces must be consistently oriented."
                )
            permutation[h] = h_next

    ### Close the border into loops
    border = [h for h in range(n) if permutation[h] == -1]
    leaving: dict[int, int] = {}
    for h in border:
        if origins[h] in leaving:
            raise ValueError(
                f"Vertex {origins[h]} has more than one border half-edge leaving it."
            )
        leaving[origins[h]] = h
    for h in border:
        if targets[h] not in leaving:
            raise ValueError(f"Border half-edge {origins[h]} -> {targets[h]} is not closed.")
        permutation[h] = leaving[targets[h]]

    return permutation
