"""Sparse incidence storage for mesh connectivity.

Every incidence relation in torchtopo (vertex-to-edge, edge-to-face and their
transposes) is a ConnectionMatrix tensorclass using offset-indices encoding.
"""

from torchtopo.connectivity._connection_matrix import (
    ConnectionMatrix,
    build_connection_matrix_from_pairs,
)

__all__ = [
    "ConnectionMatrix",
    "build_connection_matrix_from_pairs",
]
