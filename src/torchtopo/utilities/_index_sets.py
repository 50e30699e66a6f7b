"""Sorted, deduplicated index sets stored as 1-D int64 tensors.

Simplex selections (vertices, edges, faces) are always kept in this canonical
form, which makes set equality a plain ``torch.equal`` and lets union and
difference be expressed with ``torch.unique`` and ``torch.isin``.
"""

import operator
from typing import Iterable

import torch

from torchtopo.errors import IndexOutOfRange


def as_index_set(
    values: torch.Tensor | Iterable[int] | None,
    device: torch.device | str | None = None,
) -> torch.Tensor:
    """Normalize ``values`` to a sorted, deduplicated 1-D int64 tensor.

    Args:
        values: Indices as a tensor, any iterable of ints, or None (empty set).
        device: Device for the result. Defaults to the device of ``values`` when
            it is a tensor, otherwise CPU.

    Returns:
        Sorted tensor of unique indices, dtype int64.

    Example:
        >>> as_index_set([3, 1, 3, 2]).tolist()
        [1, 2, 3]
    """
    if values is None:
        return torch.zeros(0, dtype=torch.int64, device=device)

    if isinstance(values, torch.Tensor):
        if torch.is_floating_point(values) or values.dtype == torch.bool:
            raise TypeError(
                f"Index sets must have an int-like dtype, but got {values.dtype=}."
            )
        tensor = values.to(dtype=torch.int64, device=device)
    else:
        tensor = torch.tensor(
            as_int_list(values, "index set"), dtype=torch.int64, device=device
        )

    if tensor.ndim != 1:
        tensor = tensor.reshape(-1)

    return torch.unique(tensor, sorted=True)


def as_int_list(
    values: Iterable,
    name: str,
    error: type[Exception] = TypeError,
) -> list[int]:
    """Convert ``values`` to a list of Python ints, rejecting anything else.

    Values must support ``__index__`` (ints, integer tensors of one element,
    ...). Floats, even whole ones, and bools are rejected rather than
    truncated.

    Args:
        values: Iterable of integer-like values.
        name: Name used in the error message.
        error: Exception class to raise.

    Raises:
        error: If any value is not an integer.

    Example:
        >>> as_int_list((3, 1), "vertices")
        [3, 1]
    """
    result = []
    for value in values:
        if isinstance(value, bool):
            raise error(f"`{name}` must contain integers, but got {value=}.")
        try:
            result.append(operator.index(value))
        except TypeError:
            raise error(
                f"`{name}` must contain integers, but got {value!r} of {type(value)=}."
            ) from None
    return result


def union(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """Sorted union of two index sets."""
    return torch.unique(torch.cat([a, b]), sorted=True)


def difference(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """Elements of ``a`` that are not in ``b``, preserving the order of ``a``."""
    return a[~torch.isin(a, b)]


def is_subset(a: torch.Tensor, b: torch.Tensor) -> bool:
    """Whether every element of ``a`` is contained in ``b``."""
    return bool(torch.isin(a, b).all())


def check_index_range(indices: torch.Tensor, upper: int, name: str) -> None:
    """Raise ``IndexOutOfRange`` unless every index lies in ``[0, upper)``."""
    if len(indices) == 0:
        return
    low = indices.min().item()
    high = indices.max().item()
    if low < 0 or high >= upper:
        raise IndexOutOfRange(
            f"{name} must lie in [0, {upper}), but got values in [{low}, {high}]."
        )
