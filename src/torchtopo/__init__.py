from torchtopo.mesh import Mesh
from torchtopo.connectivity import ConnectionMatrix
from torchtopo.simplices import Simplices
from torchtopo.permutation import (
    Orbit,
    gather_faces,
    gather_vertices,
    permutation_from_faces,
    twin,
)
from torchtopo.errors import (
    IndexOutOfRange,
    InvalidPermutation,
    ShapeMismatch,
    UnsortedInputViolation,
    UnsupportedOperation,
)
