"""
Command-line interface for torchtopo.

Builds a mesh from a half-edge permutation given as integers on the command
line, e.g. ``torchtopo dot 2 7 4 1 6 3 0 5``.
"""

import logging
from typing import List

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from torchtopo.errors import InvalidPermutation
from torchtopo.mesh import Mesh
from torchtopo.permutation import Orbit, gather_faces, gather_vertices

app = typer.Typer(
    name="torchtopo",
    help="Combinatorial topology of meshes given as half-edge permutations",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

PERMUTATION_HELP = "Next half-edge of every half-edge (an even number of integers)"

# Lets negative integers reach validation instead of being parsed as options
PERMUTATION_CONTEXT = {"ignore_unknown_options": True}


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(message)s")


def _exit_invalid(e: InvalidPermutation):
    err_console.print(f"[bold red]Invalid permutation:[/bold red] {escape(str(e))}")
    raise typer.Exit(code=1)


def _load_orbits(permutation: List[int]) -> tuple[list[Orbit], list[Orbit]]:
    try:
        return gather_vertices(permutation), gather_faces(permutation)
    except InvalidPermutation as e:
        _exit_invalid(e)


def _load_mesh(permutation: List[int]) -> Mesh:
    try:
        return Mesh.from_permutation(permutation)
    except InvalidPermutation as e:
        _exit_invalid(e)


@app.command(context_settings=PERMUTATION_CONTEXT)
def dot(
    permutation: List[int] = typer.Argument(..., help=PERMUTATION_HELP),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose logging"),
):
    """
    Print the directed vertex graph of the mesh in Graphviz DOT format.
    """
    _configure_logging(verbose)
    mesh = _load_mesh(permutation)
    typer.echo(mesh.to_dot(), nl=False)


@app.command(context_settings=PERMUTATION_CONTEXT)
def info(
    permutation: List[int] = typer.Argument(..., help=PERMUTATION_HELP),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose logging"),
):
    """
    Show element counts and the vertex and face orbits of the mesh.
    """
    _configure_logging(verbose)
    vertices, faces = _load_orbits(permutation)
    mesh = Mesh.from_orbits(vertices, faces, n_edges=len(permutation))
    logger.debug(f"Loaded mesh from {len(permutation)} half-edges")

    counts = Table(title="Mesh")
    counts.add_column("Element", style="cyan")
    counts.add_column("Count", justify="right")
    counts.add_row("Vertices", str(mesh.n_vertices))
    counts.add_row("Half-edges", str(mesh.n_edges))
    counts.add_row("Faces", str(mesh.n_faces))
    console.print(counts)

    orbits = Table(title="Orbits")
    orbits.add_column("Kind", style="cyan")
    orbits.add_column("Index", justify="right")
    orbits.add_column("Half-edges")
    for kind, gathered in (("vertex", vertices), ("face", faces)):
        for i, orbit in enumerate(gathered):
            orbits.add_row(kind, str(i), " ".join(str(h) for h in orbit))
    console.print(orbits)


def main():
    app()


if __name__ == "__main__":
    main()
