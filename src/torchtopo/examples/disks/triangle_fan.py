"""Triangle fan around a central vertex (an open disk).

The rim has no face of its own in the input; ``permutation_from_faces`` closes
it into one extra face orbit, so the resulting mesh is a sphere with
n_triangles + 1 faces.
"""

from torchtopo.mesh import Mesh
from torchtopo.permutation import permutation_from_faces


def load(n_triangles: int = 6, device: str = "cpu") -> Mesh:
    """Create a fan of triangles sharing vertex 0.

    Args:
        n_triangles: Number of triangles (rim vertices), at least 3
        device: Compute device ('cpu' or 'cuda')

    Returns:
        Mesh with n_triangles + 1 vertices, 4 * n_triangles half-edges and
        n_triangles + 1 faces (the last loop being the rim)
    """
    if n_triangles < 3:
        raise ValueError(f"A triangle fan needs at least 3 triangles, but got {n_triangles=}.")

    faces = [[0, i, i % n_triangles + 1] for i in range(1, n_triangles + 1)]

    return Mesh.from_permutation(permutation_from_faces(faces), device=device)
