"""Immutable selection of vertices, edges and faces of a mesh."""

from typing import TYPE_CHECKING, Iterable

import torch

from torchtopo.utilities import (
    as_index_set,
    check_index_range,
    difference,
    is_subset,
    union,
)

if TYPE_CHECKING:
    from torchtopo.mesh import Mesh


class Simplices:
    """Sets of vertices, edges and faces selected from one mesh.

    A Simplices value references its mesh without owning it, and never modifies
    it. Every operation returns a new value; the index sets are sorted,
    deduplicated int64 tensors on the mesh's device.

    Create instances with ``Mesh.simplices`` / ``Mesh.all_simplices`` or
    ``Simplices.from_indices``.

    Example:
        >>> mesh = Mesh.from_permutation([2, 7, 4, 1, 6, 3, 0, 5])
        >>> star = mesh.simplices(vertices=[0]).star()
        >>> star.to_lists()
        ([0], [0, 7], [0, 1])
    """

    __slots__ = ("mesh", "vertices", "edges", "faces")

    mesh: "Mesh"
    vertices: torch.Tensor  # shape: (n_selected_vertices,), dtype: int64
    edges: torch.Tensor  # shape: (n_selected_edges,), dtype: int64
    faces: torch.Tensor  # shape: (n_selected_faces,), dtype: int64

    def __init__(
        self,
        mesh: "Mesh",
        vertices: torch.Tensor,
        edges: torch.Tensor,
        faces: torch.Tensor,
    ):
        """Wrap already-normalized index sets; use ``from_indices`` for raw input."""
        object.__setattr__(self, "mesh", mesh)
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "faces", faces)

    def __setattr__(self, name, value):
        raise AttributeError(f"Simplices are immutable; cannot set {name!r}.")

    @classmethod
    def from_indices(
        cls,
        mesh: "Mesh",
        vertices: torch.Tensor | Iterable[int] | None = None,
        edges: torch.Tensor | Iterable[int] | None = None,
        faces: torch.Tensor | Iterable[int] | None = None,
    ) -> "Simplices":
        """Sort, deduplicate and range-check raw index selections.

        Raises:
            IndexOutOfRange: If an index does not exist in ``mesh``.
        """
        device = mesh.vertex_edge.offsets.device
        vertices = as_index_set(vertices, device=device)
        edges = as_index_set(edges, device=device)
        faces = as_index_set(faces, device=device)

        check_index_range(vertices, mesh.n_vertices, "vertices")
        check_index_range(edges, mesh.n_edges, "edges")
        check_index_range(faces, mesh.n_faces, "faces")

        return cls(mesh, vertices, edges, faces)

    def _derive(
        self, vertices: torch.Tensor, edges: torch.Tensor, faces: torch.Tensor
    ) -> "Simplices":
        return type(self)(self.mesh, vertices, edges, faces)

    def _check_same_mesh(self, other: "Simplices") -> None:
        if not isinstance(other, Simplices):
            raise TypeError(f"Expected Simplices, but got {type(other)=}.")
        if other.mesh is not self.mesh:
            raise ValueError("Cannot combine Simplices selected from different meshes.")

    ### Simplicial-complex operators ###

    def star(self) -> "Simplices":
        """All simplices containing a selected simplex, plus the selection."""
        from torchtopo.simplices._operators import compute_star

        return compute_star(self)

    def closure(self) -> "Simplices":
        """The smallest complex containing the selection."""
        from torchtopo.simplices._operators import compute_closure

        return compute_closure(self)

    def link(self) -> "Simplices":
        """``star(closure(S)) - closure(star(S))``, per dimension."""
        from torchtopo.simplices._operators import compute_link

        return compute_link(self)

    def boundary(self) -> "Simplices":
        """Not supported.

        Raises:
            UnsupportedOperation: Always.
        """
        from torchtopo.simplices._operators import compute_boundary

        return compute_boundary(self)

    def is_complex(self) -> bool:
        """Whether the boundary edges of the selected faces, and their vertices, are selected."""
        from torchtopo.simplices._predicates import is_complex

        return is_complex(self)

    def is_pure_complex(self) -> int | None:
        """Dimension of the selection if it is a pure complex, otherwise None."""
        from torchtopo.simplices._predicates import is_pure_complex

        return is_pure_complex(self)

    def is_empty(self) -> bool:
        return len(self.vertices) == 0 and len(self.edges) == 0 and len(self.faces) == 0

    ### Set algebra ###

    def union(self, other: "Simplices") -> "Simplices":
        """Per-dimension union."""
        self._check_same_mesh(other)
        return self._derive(
            union(self.vertices, other.vertices),
            union(self.edges, other.edges),
            union(self.faces, other.faces),
        )

    def difference(self, other: "Simplices") -> "Simplices":
        """Per-dimension set difference."""
        self._check_same_mesh(other)
        return self._derive(
            difference(self.vertices, other.vertices),
            difference(self.edges, other.edges),
            difference(self.faces, other.faces),
        )

    def issubset(self, other: "Simplices") -> bool:
        """Whether every selected vertex, edge and face is also selected in ``other``."""
        self._check_same_mesh(other)
        return (
            is_subset(self.vertices, other.vertices)
            and is_subset(self.edges, other.edges)
            and is_subset(self.faces, other.faces)
        )

    def issuperset(self, other: "Simplices") -> bool:
        return other.issubset(self)

    def __or__(self, other: "Simplices") -> "Simplices":
        return self.union(other)

    def __sub__(self, other: "Simplices") -> "Simplices":
        return self.difference(other)

    def __le__(self, other: "Simplices") -> bool:
        return self.issubset(other)

    def __ge__(self, other: "Simplices") -> bool:
        return self.issuperset(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Simplices):
            return NotImplemented
        return (
            other.mesh is self.mesh
            and torch.equal(self.vertices, other.vertices)
            and torch.equal(self.edges, other.edges)
            and torch.equal(self.faces, other.faces)
        )

    __hash__ = None

    @property
    def n_simplices(self) -> int:
        """Total number of selected vertices, edges and faces."""
        return len(self.vertices) + len(self.edges) + len(self.faces)

    def to_lists(self) -> tuple[list[int], list[int], list[int]]:
        """Selected (vertices, edges, faces) as Python lists."""
        return self.vertices.tolist(), self.edges.tolist(), self.faces.tolist()

    def __repr__(self) -> str:
        vertices, edges, faces = self.to_lists()
        return f"Simplices(vertices={vertices}, edges={edges}, faces={faces})"
