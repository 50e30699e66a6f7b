"""Combinatorial polygon mesh stored as vertex/edge/face incidence matrices."""

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

import torch
from tensordict import tensorclass

from torchtopo.connectivity import ConnectionMatrix, build_connection_matrix_from_pairs
from torchtopo.errors import ShapeMismatch
from torchtopo.permutation import Orbit, OrbitMethod

if TYPE_CHECKING:
    from torchtopo.simplices import Simplices

logger = logging.getLogger(__name__)


@tensorclass
class Mesh:
    """Purely combinatorial mesh: four incidence matrices over a shared edge space.

    ``vertex_edge`` and ``edge_face`` correspond to the A0 and A1 matrices of
    discrete exterior calculus; ``edge_vertex`` and ``face_edge`` are their
    transposes, computed once when the mesh is built. When the mesh comes from a
    half-edge permutation, edges are half-edges: a vertex is connected to the
    half-edges leaving it and a face to the half-edges of its boundary loop.

    Build meshes with ``Mesh.from_permutation`` or ``Mesh.from_connections``.
    """

    vertex_edge: ConnectionMatrix  # shape: (n_vertices, n_edges)
    edge_face: ConnectionMatrix  # shape: (n_edges, n_faces)
    edge_vertex: ConnectionMatrix  # transpose of vertex_edge
    face_edge: ConnectionMatrix  # transpose of edge_face

    def __post_init__(self):
        if not torch.compiler.is_compiling():
            ### Validate the shared edge space
            if self.vertex_edge.n_cols != self.edge_face.n_rows:
                raise ShapeMismatch(
                    f"`vertex_edge` and `edge_face` must share the edge index space, but got "
                    f"{self.vertex_edge.n_cols=} != {self.edge_face.n_rows=}."
                )

            ### Validate the cached transposes
            if self.edge_vertex.n_rows != self.vertex_edge.n_cols:
                raise ShapeMismatch(
                    f"`edge_vertex` must be the transpose of `vertex_edge`, but got "
                    f"{self.edge_vertex.n_rows=} != {self.vertex_edge.n_cols=}."
                )
            if self.face_edge.n_rows != self.edge_face.n_cols:
                raise ShapeMismatch(
                    f"`face_edge` must be the transpose of `edge_face`, but got "
                    f"{self.face_edge.n_rows=} != {self.edge_face.n_cols=}."
                )
            if not self.edge_vertex.equals(self.vertex_edge.transposed()):
                raise ShapeMismatch(
                    "`edge_vertex` must be the transpose of `vertex_edge`, but their "
                    "connections differ."
                )
            if not self.face_edge.equals(self.edge_face.transposed()):
                raise ShapeMismatch(
                    "`face_edge` must be the transpose of `edge_face`, but their "
                    "connections differ."
                )

    @classmethod
    def from_connections(
        cls,
        vertex_edge: ConnectionMatrix,
        edge_face: ConnectionMatrix,
    ) -> "Mesh":
        """Build a mesh from its vertex-to-edge and edge-to-face incidences.

        The transposes are computed here and cached on the mesh.

        Raises:
            ShapeMismatch: If the column bound of ``vertex_edge`` differs from the
                row count of ``edge_face``.
        """
        mesh = cls(
            vertex_edge=vertex_edge,
            edge_face=edge_face,
            edge_vertex=vertex_edge.transposed(),
            face_edge=edge_face.transposed(),
        )
        logger.debug(
            f"Built mesh with {mesh.n_vertices} vertices, {mesh.n_edges} edges, "
            f"{mesh.n_faces} faces"
        )
        return mesh

    @classmethod
    def from_permutation(
        cls,
        permutation: Sequence[int] | torch.Tensor,
        method: OrbitMethod = "visited",
        device: torch.device | str | None = None,
    ) -> "Mesh":
        """Build a mesh from the face-loop permutation of its half-edges.

        Vertices and faces are the orbits of ``h -> next[twin(h)]`` and
        ``h -> next[h]``, numbered in the sorted order of their canonical orbits.

        Args:
            permutation: The ``next`` array, length n (even), values in [0, n).
            method: Orbit discovery strategy, ``"visited"`` or ``"trace"``.
            device: Device of the incidence matrices. Defaults to the device of
                ``permutation`` when it is a tensor, otherwise CPU.

        Returns:
            Mesh whose edge index space is the n half-edges.

        Raises:
            InvalidPermutation: If ``permutation`` is not a valid even-length
                permutation.

        Example:
            >>> mesh = Mesh.from_permutation([2, 7, 4, 1, 6, 3, 0, 5])
            >>> mesh.n_vertices, mesh.n_edges, mesh.n_faces
            (4, 8, 2)
        """
        from torchtopo.permutation import gather_faces, gather_vertices

        if device is None and isinstance(permutation, torch.Tensor):
            device = permutation.device

        vertices = gather_vertices(permutation, method=method)
        faces = gather_faces(permutation, method=method)

        return cls.from_orbits(vertices, faces, n_edges=len(permutation), device=device)

    @classmethod
    def from_orbits(
        cls,
        vertices: Sequence[Orbit],
        faces: Sequence[Orbit],
        n_edges: int,
        device: torch.device | str | None = None,
    ) -> "Mesh":
        """Build a mesh from already gathered vertex and face orbits.

        Vertex i is connected to the half-edges of ``vertices[i]`` and face j to
        those of ``faces[j]``.

        Args:
            vertices: Vertex orbits, e.g. from ``gather_vertices``.
            faces: Face orbits, e.g. from ``gather_faces``.
            n_edges: Number of half-edges (length of the permutation).
            device: Device of the incidence matrices.

        Raises:
            ShapeMismatch: If the orbits do not cover the same half-edges.
            IndexOutOfRange: If a face orbit holds a half-edge >= ``n_edges``.
        """
        vertex_edge = build_connection_matrix_from_pairs(
            _orbit_pairs(vertices, device=device),
            n_rows=len(vertices),
            device=device,
        )
        edge_face = build_connection_matrix_from_pairs(
            _orbit_pairs(faces, device=device).flip(1),
            n_rows=n_edges,
            device=device,
        )

        return cls.from_connections(vertex_edge, edge_face)

    @property
    def n_vertices(self) -> int:
        return self.vertex_edge.n_rows

    @property
    def n_edges(self) -> int:
        return self.edge_face.n_rows

    @property
    def n_faces(self) -> int:
        return self.face_edge.n_rows

    def simplices(
        self,
        vertices: torch.Tensor | Iterable[int] | None = None,
        edges: torch.Tensor | Iterable[int] | None = None,
        faces: torch.Tensor | Iterable[int] | None = None,
    ) -> "Simplices":
        """Select vertices, edges and faces of this mesh.

        Each selection is sorted and deduplicated; omitted selections are empty.

        Raises:
            IndexOutOfRange: If an index does not exist in this mesh.

        Example:
            >>> mesh = Mesh.from_permutation([2, 7, 4, 1, 6, 3, 0, 5])
            >>> mesh.simplices(vertices=[2, 0, 2]).vertices.tolist()
            [0, 2]
        """
        from torchtopo.simplices import Simplices

        return Simplices.from_indices(self, vertices=vertices, edges=edges, faces=faces)

    def all_simplices(self) -> "Simplices":
        """Select every vertex, edge and face of this mesh."""
        device = self.vertex_edge.offsets.device
        return self.simplices(
            vertices=torch.arange(self.n_vertices, device=device),
            edges=torch.arange(self.n_edges, device=device),
            faces=torch.arange(self.n_faces, device=device),
        )

    def get_half_edge_endpoints(self) -> torch.Tensor:
        """Compute the (start vertex, end vertex) of every half-edge.

        Returns:
            Tensor of shape (n_edges, 2). Row h holds the vertex whose orbit
            contains half-edge h and the vertex whose orbit contains its twin.

        Example:
            >>> mesh = Mesh.from_permutation([2, 7, 4, 1, 6, 3, 0, 5])
            >>> mesh.get_half_edge_endpoints()[0].tolist()
            [0, 1]
        """
        from torchtopo.export import get_half_edge_endpoints

        return get_half_edge_endpoints(self)

    def to_dot(self) -> str:
        """Render the vertex/half-edge graph in Graphviz DOT format."""
        from torchtopo.export import to_dot

        return to_dot(self)


def _orbit_pairs(
    orbits: Sequence[Orbit], device: torch.device | str | None = None
) -> torch.Tensor:
    """(orbit index, half-edge) pairs for every member of every orbit, shape (n, 2)."""
    owners = [i for i, orbit in enumerate(orbits) for _ in orbit]
    half_edges = [h for orbit in orbits for h in orbit]
    return torch.tensor([owners, half_edges], dtype=torch.int64, device=device).T
