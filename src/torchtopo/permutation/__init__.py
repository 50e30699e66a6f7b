"""Half-edge permutations and their orbits.

A polygonal mesh is encoded by a single permutation ``next`` over half-edges
together with the fixed twin pairing ``twin(h) = h ^ 1``. Faces and vertices
are recovered as orbits (cycles) of derived maps.
"""

from torchtopo.permutation._from_faces import permutation_from_faces
from torchtopo.permutation._gather import OrbitMethod, gather_faces, gather_vertices
from torchtopo.permutation._orbit import Orbit, twin

__all__ = [
    "Orbit",
    "OrbitMethod",
    "gather_faces",
    "gather_vertices",
    "permutation_from_faces",
    "twin",
]
