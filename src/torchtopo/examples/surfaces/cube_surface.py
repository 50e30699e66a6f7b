"""Cube surface made of quadrilaterals.

Topology: sphere with 8 vertices, 12 undirected edges (24 half-edges), 6 quads.
"""

from torchtopo.mesh import Mesh
from torchtopo.permutation import permutation_from_faces


def load(device: str = "cpu") -> Mesh:
    """Create a closed cube surface.

    Args:
        device: Compute device ('cpu' or 'cuda')

    Returns:
        Mesh with 8 vertices, 24 half-edges and 6 faces
    """
    # Bottom loop 0-1-2-3, top loop 4-5-6-7 (vertex 4 above vertex 0)
    faces = [
        [0, 3, 2, 1],  # bottom
        [4, 5, 6, 7],  # top
        [0, 1, 5, 4],
        [1, 2, 6, 5],
        [2, 3, 7, 6],
        [3, 0, 4, 7],
    ]

    return Mesh.from_permutation(permutation_from_faces(faces), device=device)
