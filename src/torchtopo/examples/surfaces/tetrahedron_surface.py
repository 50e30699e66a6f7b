"""Tetrahedron surface.

Topology: sphere with 4 vertices, 6 undirected edges (12 half-edges), 4 triangles.
"""

from torchtopo.mesh import Mesh
from torchtopo.permutation import permutation_from_faces


def load(device: str = "cpu") -> Mesh:
    """Create a closed tetrahedron surface.

    Args:
        device: Compute device ('cpu' or 'cuda')

    Returns:
        Mesh with 4 vertices, 12 half-edges and 4 faces
    """
    # 4 triangular faces, consistently oriented
    faces = [
        [0, 1, 2],
        [0, 3, 1],
        [0, 2, 3],
        [1, 3, 2],
    ]

    return Mesh.from_permutation(permutation_from_faces(faces), device=device)
