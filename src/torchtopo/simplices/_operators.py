"""Star, closure and link of a selection of simplices.

All operators follow the discrete-differential-geometry definitions, evaluated
with the incidence matrices of the mesh:
- star climbs from vertices to edges to faces (vertex_edge, edge_face)
- closure descends from faces to edges to vertices (face_edge, edge_vertex)
"""

from typing import TYPE_CHECKING

from torchtopo.errors import UnsupportedOperation
from torchtopo.utilities import union

if TYPE_CHECKING:
    from torchtopo.simplices._simplices import Simplices


def compute_star(simplices: "Simplices") -> "Simplices":
    """Upward closure: add every edge and face containing a selected simplex.

    E' = vertex_edge[V] | E, F' = edge_face[E'] | F, V' = V.
    """
    mesh = simplices.mesh
    edges = union(mesh.vertex_edge.gather_connected(simplices.vertices), simplices.edges)
    faces = union(mesh.edge_face.gather_connected(edges), simplices.faces)
    return simplices._derive(simplices.vertices, edges, faces)


def compute_closure(simplices: "Simplices") -> "Simplices":
    """Downward closure: add every edge and vertex of a selected simplex.

    E' = face_edge[F] | E, V' = edge_vertex[E'] | V, F' = F.
    """
    mesh = simplices.mesh
    edges = union(mesh.face_edge.gather_connected(simplices.faces), simplices.edges)
    vertices = union(mesh.edge_vertex.gather_connected(edges), simplices.vertices)
    return simplices._derive(vertices, edges, simplices.faces)


def compute_link(simplices: "Simplices") -> "Simplices":
    """Link as ``star(closure(S)) - closure(star(S))``, subtracted per dimension."""
    return compute_star(compute_closure(simplices)).difference(
        compute_closure(compute_star(simplices))
    )


def compute_boundary(simplices: "Simplices") -> "Simplices":
    raise UnsupportedOperation(
        "The boundary of a selection of simplices is not defined for half-edge "
        "meshes; compose star, closure and link explicitly instead."
    )
