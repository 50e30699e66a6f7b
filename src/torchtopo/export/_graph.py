"""Directed vertex graph of a half-edge mesh.

Every half-edge becomes a directed edge from the vertex it leaves to the vertex
its twin leaves. The result is a multigraph: each undirected mesh edge appears
once in each direction.
"""

from typing import TYPE_CHECKING

import torch

from torchtopo.permutation import twin

if TYPE_CHECKING:
    from torchtopo.mesh import Mesh


def get_half_edge_endpoints(mesh: "Mesh") -> torch.Tensor:
    """Compute the (start vertex, end vertex) of every half-edge.

    Args:
        mesh: Mesh whose edge index space consists of twin-paired half-edges.

    Returns:
        Tensor of shape (n_edges, 2), dtype int64.

    Raises:
        ValueError: If the edge count is odd, or if some half-edge does not
            belong to exactly one vertex.
    """
    n_edges = mesh.n_edges
    if n_edges % 2 != 0:
        raise ValueError(
            f"Half-edges come in twin pairs, but the mesh has {n_edges=}."
        )

    ### Each half-edge must leave exactly one vertex
    edge_vertex = mesh.edge_vertex
    vertex_counts = edge_vertex.offsets.diff()
    orphaned = torch.nonzero(vertex_counts != 1)
    if len(orphaned) > 0:
        h = orphaned[0, 0].item()
        raise ValueError(
            f"Half-edge {h} belongs to {vertex_counts[h].item()} vertices; "
            f"exactly one is required."
        )

    # With one vertex per row, indices[h] is the start vertex of half-edge h
    starts = edge_vertex.indices
    half_edges = torch.arange(n_edges, dtype=torch.int64, device=starts.device)
    ends = starts[twin(half_edges)]

    return torch.stack([starts, ends], dim=1)


def to_dot(mesh: "Mesh") -> str:
    """Render the directed vertex graph in Graphviz DOT format.

    Nodes are labelled by vertex index and edges by half-edge index.

    Example:
        >>> print(to_dot(Mesh.from_permutation([2, 3, 0, 1])))
        digraph {
            0 [ label = "0" ]
            1 [ label = "1" ]
            0 -> 1 [ label = "0" ]
            1 -> 0 [ label = "1" ]
            1 -> 0 [ label = "2" ]
            0 -> 1 [ label = "3" ]
        }
        <BLANKLINE>
    """
    endpoints = get_half_edge_endpoints(mesh).tolist()

    lines = ["digraph {"]
    for vertex in range(mesh.n_vertices):
        lines.append(f'    {vertex} [ label = "{vertex}" ]')
    for half_edge, (start, end) in enumerate(endpoints):
        lines.append(f'    {start} -> {end} [ label = "{half_edge}" ]')
    lines.append("}")

    return "\n".join(lines) + "\n"
