"""Simplicial-complex set algebra over a mesh.

Provides the Simplices value (selected vertices, edges and faces of a Mesh)
together with star, closure and link operators and complex predicates.
"""

from torchtopo.simplices._operators import (
    compute_boundary,
    compute_closure,
    compute_link,
    compute_star,
)
from torchtopo.simplices._predicates import is_complex, is_pure_complex
from torchtopo.simplices._simplices import Simplices

__all__ = [
    "Simplices",
    "compute_boundary",
    "compute_closure",
    "compute_link",
    "compute_star",
    "is_complex",
    "is_pure_complex",
]
