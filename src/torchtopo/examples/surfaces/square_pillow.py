"""Two square faces glued along their border.

Topology: sphere with 4 vertices, 4 undirected edges (8 half-edges), 2 faces.
"""

import torch

from torchtopo.mesh import Mesh

PERMUTATION = [2, 7, 4, 1, 6, 3, 0, 5]


def load(device: str = "cpu") -> Mesh:
    """Create the two-faced square "pillow".

    Vertices are the orbits (0, 7), (1, 2), (3, 4), (5, 6); faces are the
    loops (0, 2, 4, 6) and (1, 7, 5, 3).

    Args:
        device: Compute device ('cpu' or 'cuda')

    Returns:
        Mesh with 4 vertices, 8 half-edges and 2 faces
    """
    return Mesh.from_permutation(
        torch.tensor(PERMUTATION, dtype=torch.int64, device=device)
    )
