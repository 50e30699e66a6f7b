"""Complex-ness checks for a selection of simplices."""

from typing import TYPE_CHECKING

import torch

from torchtopo.utilities import is_subset

if TYPE_CHECKING:
    from torchtopo.simplices._simplices import Simplices


def is_complex(simplices: "Simplices") -> bool:
    """Whether the selection is closed under taking faces of its faces.

    True iff every boundary edge of a selected face is selected, and every
    vertex of those boundary edges is selected.
    """
    mesh = simplices.mesh
    face_edges = mesh.face_edge.gather_connected(simplices.faces)
    if not is_subset(face_edges, simplices.edges):
        return False
    face_vertices = mesh.edge_vertex.gather_connected(face_edges)
    return is_subset(face_vertices, simplices.vertices)


def is_pure_complex(simplices: "Simplices") -> int | None:
    """Dimension of the selection if it is a pure complex, otherwise None.

    The selected edges must be exactly the boundary edges of the selected faces,
    and the selected vertices exactly the vertices of those edges. The dimension
    is then 2 if any face is selected, else 1 if any edge is, else 0.

    Example:
        >>> mesh = Mesh.from_permutation([2, 7, 4, 1, 6, 3, 0, 5])
        >>> mesh.all_simplices().is_pure_complex()
        2
        >>> mesh.simplices(vertices=[0, 1, 2, 3], faces=[0]).is_pure_complex() is None
        True
    """
    mesh = simplices.mesh
    face_edges = mesh.face_edge.gather_connected(simplices.faces)
    if not torch.equal(face_edges, simplices.edges):
        return None
    face_vertices = mesh.edge_vertex.gather_connected(face_edges)
    if not torch.equal(face_vertices, simplices.vertices):
        return None

    if len(simplices.faces) > 0:
        return 2
    if len(simplices.edges) > 0:
        return 1
    return 0
