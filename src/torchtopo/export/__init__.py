"""Export of mesh connectivity to general graph representations."""

from torchtopo.export._graph import get_half_edge_endpoints, to_dot

__all__ = [
    "get_half_edge_endpoints",
    "to_dot",
]
