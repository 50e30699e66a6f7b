"""Pytest configuration and shared fixtures for torchtopo tests.

This module provides common test fixtures, example meshes, and helpers for
testing across compute backends.

All functions and fixtures defined here are automatically available to all test files
without explicit imports.
"""

import pytest
import torch


### Pytest Hooks ###


def pytest_collection_modifyitems(config, items):
    """Skip tests marked with 'cuda' if CUDA is not available.

    This hook runs during test collection phase and adds skip markers to CUDA tests
    when CUDA is unavailable.
    """
    if torch.cuda.is_available():
        return  # CUDA available, run all tests

    skip_cuda = pytest.mark.skip(reason="CUDA not available")
    for item in items:
        if "cuda" in item.keywords:
            item.add_marker(skip_cuda)


### Example Permutations ###


# Two squares glued along their border: 4 vertices, 8 half-edges, 2 faces
PILLOW_PERMUTATION = [2, 7, 4, 1, 6, 3, 0, 5]

# Two half-edge pairs forming two digons: 2 vertices, 4 half-edges, 2 faces
DIGON_PERMUTATION = [2, 3, 0, 1]

EXAMPLE_MESH_NAMES = ["pillow", "digon", "tetrahedron", "cube", "fan"]


### Mesh Generators (Standalone Functions) ###


def create_example_mesh(name: str, device: str = "cpu"):
    """Create one of the example meshes by name.

    Args:
        name: One of EXAMPLE_MESH_NAMES
        device: Compute device ('cpu' or 'cuda')

    Returns:
        A Mesh instance built from a half-edge permutation
    """
    from torchtopo.examples.disks import triangle_fan
    from torchtopo.examples.surfaces import (
        cube_surface,
        square_pillow,
        tetrahedron_surface,
    )
    from torchtopo.mesh import Mesh

    if name == "pillow":
        return square_pillow.load(device=device)
    elif name == "digon":
        return Mesh.from_permutation(DIGON_PERMUTATION, device=device)
    elif name == "tetrahedron":
        return tetrahedron_surface.load(device=device)
    elif name == "cube":
        return cube_surface.load(device=device)
    elif name == "fan":
        return triangle_fan.load(n_triangles=5, device=device)
    else:
        raise ValueError(f"Unsupported {name=}")


def single_simplex_selections(mesh) -> list:
    """Every selection consisting of exactly one vertex, edge or face."""
    selections = []
    for v in range(mesh.n_vertices):
        selections.append(mesh.simplices(vertices=[v]))
    for e in range(mesh.n_edges):
        selections.append(mesh.simplices(edges=[e]))
    for f in range(mesh.n_faces):
        selections.append(mesh.simplices(faces=[f]))
    return selections


def assert_on_device(tensor: torch.Tensor, expected_device: str) -> None:
    """Assert tensor is on expected device."""
    actual_device = tensor.device.type
    assert actual_device == expected_device, (
        f"Device mismatch: tensor is on {actual_device!r}, expected {expected_device!r}"
    )


### Pytest Fixtures ###


@pytest.fixture(
    params=[
        "cpu",
        pytest.param("cuda", marks=pytest.mark.cuda),
    ]
)
def device(request):
    """Parametrize tests over all available devices (CPU, CUDA).

    CUDA tests are automatically skipped if CUDA is not available via
    the pytest_collection_modifyitems hook.
    """
    return request.param


@pytest.fixture
def pillow_mesh():
    """Two-faced square built from PILLOW_PERMUTATION."""
    return create_example_mesh("pillow")


@pytest.fixture(params=EXAMPLE_MESH_NAMES)
def example_mesh(request):
    """Parametrize over all example meshes."""
    return create_example_mesh(request.param)


@pytest.fixture
def make_example_mesh():
    """Factory fixture: ``make_example_mesh(name, device)``."""
    return create_example_mesh


@pytest.fixture
def selections_of():
    """Factory fixture returning every single-simplex selection of a mesh."""
    return single_simplex_selections
