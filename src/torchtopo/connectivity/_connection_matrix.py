"""Compressed incidence structure relating two kinds of mesh elements.

A connection matrix is a sparse boolean matrix stored in compressed-sparse-row
form without values: row ``r`` is connected to the columns
``indices[offsets[r]:offsets[r+1]]``. It is the storage used for every
vertex/edge/face incidence in torchtopo.
"""

from typing import Iterable, Iterator

import torch
from tensordict import tensorclass

from torchtopo.errors import IndexOutOfRange, UnsortedInputViolation
from torchtopo.utilities import as_index_set, as_int_list, check_index_range


@tensorclass
class ConnectionMatrix:
    """Sorted row-to-columns incidence stored with offset-indices encoding.

    Attributes:
        offsets: Indices into the indices array marking the start of each row.
            Shape (n_rows + 1,), dtype int64. Row i is connected to
            indices[offsets[i]:offsets[i+1]].
        indices: Flattened column indices of all rows, ascending within each row.
            Duplicates are kept. Shape (n_entries,), dtype int64.

    Example:
        >>> # 1 0 1 0
        >>> # 1 1 0 0
        >>> # 0 1 0 1
        >>> # 1 0 0 1
        >>> mat = ConnectionMatrix.from_pairs(
        ...     [(0, 0), (0, 2), (1, 0), (1, 1), (2, 1), (2, 3), (3, 0), (3, 3)]
        ... )
        >>> mat.offsets.tolist()
        [0, 2, 4, 6, 8]
        >>> mat.get_connected(2).tolist()
        [1, 3]
        >>> mat.connection_shape
        (4, 4)
    """

    offsets: torch.Tensor  # shape: (n_rows + 1,), dtype: int64
    indices: torch.Tensor  # shape: (n_entries,), dtype: int64

    def __post_init__(self):
        if not torch.compiler.is_compiling():
            ### Validate dtypes
            for name in ("offsets", "indices"):
                tensor = getattr(self, name)
                if torch.is_floating_point(tensor) and tensor.numel() > 0:
                    raise TypeError(
                        f"`{name}` must have an int-like dtype, but got {tensor.dtype=}."
                    )
            self.offsets = self.offsets.to(torch.int64)
            self.indices = self.indices.to(torch.int64)

            ### Validate offsets is non-empty
            # Offsets must have length (n_rows + 1), so minimum length is 1 (for n_rows=0)
            if len(self.offsets) < 1:
                raise ValueError(
                    f"Offsets array must have length >= 1 (n_rows + 1), but got {len(self.offsets)=}. "
                    f"Even for 0 rows, offsets should be [0]."
                )

            ### Validate offsets starts at 0
            if self.offsets[0].item() != 0:
                raise ValueError(
                    f"First offset must be 0, but got {self.offsets[0].item()=}."
                )

            ### Validate last offset equals length of indices
            last_offset = self.offsets[-1].item()
            indices_length = len(self.indices)
            if last_offset != indices_length:
                raise ValueError(
                    f"Last offset must equal length of indices, but got "
                    f"{last_offset=} != {indices_length=}."
                )

            ### Validate offsets are non-decreasing
            if bool((self.offsets[1:] < self.offsets[:-1]).any()):
                raise ValueError(
                    f"Offsets must be non-decreasing, but got {self.offsets.tolist()=}."
                )

            if indices_length > 0 and self.indices.min().item() < 0:
                raise ValueError(
                    f"Column indices must be non-negative, but got {self.indices.min().item()=}."
                )

            ### Validate columns ascend within each row
            # A descent between neighbouring entries is only allowed across a row break
            if indices_length > 1:
                row_ids = self._row_ids()
                descends = (self.indices[1:] < self.indices[:-1]) & (
                    row_ids[1:] == row_ids[:-1]
                )
                if bool(descends.any()):
                    bad_row = row_ids[torch.nonzero(descends)[0, 0]].item()
                    raise UnsortedInputViolation(
                        f"Columns of each row must be ascending, but row {bad_row} is "
                        f"{self.get_connected(bad_row).tolist()}."
                    )

    @classmethod
    def from_pairs(
        cls,
        pairs: torch.Tensor | Iterable[tuple[int, int]],
        n_rows: int | None = None,
        device: torch.device | str | None = None,
    ) -> "ConnectionMatrix":
        """Build a connection matrix from (row, col) pairs in any order.

        See ``build_connection_matrix_from_pairs``.
        """
        return build_connection_matrix_from_pairs(pairs, n_rows=n_rows, device=device)

    def _row_ids(self) -> torch.Tensor:
        """Row index of every stored entry, shape (n_entries,)."""
        return torch.repeat_interleave(
            torch.arange(self.n_rows, dtype=torch.int64, device=self.offsets.device),
            self.offsets.diff(),
        )

    @property
    def n_rows(self) -> int:
        """Number of rows, including rows without any connection."""
        return len(self.offsets) - 1

    @property
    def n_cols(self) -> int:
        """Column bound: the largest stored column index plus one (0 if empty)."""
        if len(self.indices) == 0:
            return 0
        return int(self.indices.max().item()) + 1

    @property
    def n_entries(self) -> int:
        """Total number of stored (row, col) connections."""
        return len(self.indices)

    @property
    def connection_shape(self) -> tuple[int, int]:
        """(n_rows, n_cols) of the incidence matrix.

        The column bound is derived from the largest stored column, not from the
        number of non-empty columns.
        """
        return (self.n_rows, self.n_cols)

    def get_connected(self, row: int) -> torch.Tensor:
        """Columns connected to ``row``, ascending.

        Raises:
            IndexOutOfRange: If ``row`` is not in [0, n_rows).
        """
        row = int(row)
        if not 0 <= row < self.n_rows:
            raise IndexOutOfRange(
                f"Row {row} is out of range for a connection matrix with {self.n_rows=}."
            )
        start = self.offsets[row].item()
        end = self.offsets[row + 1].item()
        return self.indices[start:end]

    def gather_connected(self, rows: torch.Tensor | Iterable[int]) -> torch.Tensor:
        """Sorted, deduplicated union of the columns connected to ``rows``.

        Args:
            rows: Row indices in any order; duplicates are ignored.

        Returns:
            1-D int64 tensor of unique column indices (empty for an empty ``rows``).

        Raises:
            IndexOutOfRange: If any row is not in [0, n_rows).

        Example:
            >>> mat = ConnectionMatrix.from_pairs([(0, 3), (0, 1), (1, 1), (2, 0)])
            >>> mat.gather_connected([0, 1]).tolist()
            [1, 3]
        """
        device = self.offsets.device
        rows = as_index_set(rows, device=device)
        check_index_range(rows, self.n_rows, "rows")

        ### Per-row [start, end) ranges into the indices array
        starts = self.offsets[rows]
        counts = self.offsets[rows + 1] - starts
        n_selected = int(counts.sum().item())

        ### Expand ranges into flat positions without a Python loop
        # Entry k of selected row j lives at starts[j] + k
        owner = torch.repeat_interleave(
            torch.arange(len(rows), dtype=torch.int64, device=device), counts
        )
        first_entry = torch.cumsum(counts, dim=0) - counts
        positions = starts[owner] + (
            torch.arange(n_selected, dtype=torch.int64, device=device)
            - first_entry[owner]
        )

        return torch.unique(self.indices[positions], sorted=True)

    def to_pairs(self) -> torch.Tensor:
        """All stored connections as an (n_entries, 2) tensor of (row, col), in row-major order."""
        return torch.stack([self._row_ids(), self.indices], dim=1)

    def iter_pairs(self) -> Iterator[tuple[int, int]]:
        """Lazily yield (row, col) pairs in row-major order.

        Each call returns a fresh iterator over the same pairs.
        """
        offsets = self.offsets.tolist()
        indices = self.indices.tolist()
        for row in range(len(offsets) - 1):
            for col in indices[offsets[row] : offsets[row + 1]]:
                yield row, col

    def transposed(self) -> "ConnectionMatrix":
        """Column-to-rows matrix with the same connections.

        The result has ``self.n_cols`` rows, so trailing columns without any
        connection never exist and transposing twice restores the connections.
        """
        return build_connection_matrix_from_pairs(
            self.to_pairs().flip(1),
            n_rows=self.n_cols,
            device=self.offsets.device,
        )

    def to_list(self) -> list[list[int]]:
        """Convert to a ragged list-of-lists; result[i] holds the columns of row i."""
        offsets = self.offsets.tolist()
        indices = self.indices.tolist()
        return [
            indices[offsets[row] : offsets[row + 1]] for row in range(len(offsets) - 1)
        ]

    def to_dense(self) -> torch.Tensor:
        """Boolean incidence matrix of shape ``connection_shape``."""
        dense = torch.zeros(
            self.connection_shape, dtype=torch.bool, device=self.offsets.device
        )
        dense[self._row_ids(), self.indices] = True
        return dense

    def equals(self, other: "ConnectionMatrix") -> bool:
        """Whether both matrices store exactly the same rows and columns."""
        return torch.equal(self.offsets, other.offsets) and torch.equal(
            self.indices, other.indices
        )


def build_connection_matrix_from_pairs(
    pairs: torch.Tensor | Iterable[tuple[int, int]],
    n_rows: int | None = None,
    device: torch.device | str | None = None,
) -> ConnectionMatrix:
    """Build a connection matrix from (row, col) pairs in any order.

    Pairs are sorted by (row, col); duplicate pairs are kept.

    Args:
        pairs: Tensor of shape (n_pairs, 2) or an iterable of (row, col) pairs,
            e.g. another matrix's ``iter_pairs()``.
        n_rows: Number of rows. Defaults to the largest row index plus one; pass
            a larger value to keep trailing rows without connections.
        device: Device of the result. Defaults to the device of ``pairs`` when it
            is a tensor, otherwise CPU.

    Returns:
        ConnectionMatrix holding every pair.

    Raises:
        ValueError: If pairs are not 2-wide or contain negative indices.
        IndexOutOfRange: If ``n_rows`` is too small for the largest row index.
    """
    pairs = _as_pair_tensor(pairs, device=device)
    device = pairs.device
    rows = pairs[:, 0]
    cols = pairs[:, 1]

    if len(pairs) > 0 and pairs.min().item() < 0:
        raise ValueError(
            f"Pair indices must be non-negative, but got {pairs.min().item()=}."
        )

    required_rows = int(rows.max().item()) + 1 if len(pairs) > 0 else 0
    if n_rows is None:
        n_rows = required_rows
    elif n_rows < required_rows:
        raise IndexOutOfRange(
            f"{n_rows=} is too small for pairs referencing row {required_rows - 1}."
        )

    ### Sort by (row, col) for grouping
    n_cols = int(cols.max().item()) + 1 if len(pairs) > 0 else 0
    sort_indices = torch.argsort(rows * (n_cols + 1) + cols, stable=True)
    sorted_cols = cols[sort_indices]

    ### Compute offsets for each row
    offsets = torch.zeros(n_rows + 1, dtype=torch.int64, device=device)
    row_counts = torch.bincount(rows, minlength=n_rows)
    offsets[1:] = torch.cumsum(row_counts, dim=0)

    return ConnectionMatrix(offsets=offsets, indices=sorted_cols)


def _as_pair_tensor(
    pairs: torch.Tensor | Iterable[tuple[int, int]],
    device: torch.device | str | None = None,
) -> torch.Tensor:
    """Convert pairs to an (n_pairs, 2) int64 tensor."""
    if isinstance(pairs, torch.Tensor):
        is_float = torch.is_floating_point(pairs) and pairs.numel() > 0
        if is_float or pairs.dtype == torch.bool:
            raise TypeError(
                f"`pairs` must have an int-like dtype, but got {pairs.dtype=}."
            )
        tensor = pairs.to(dtype=torch.int64, device=device)
    else:
        tensor = torch.tensor(
            [as_int_list(pair, "pairs") for pair in pairs],
            dtype=torch.int64,
            device=device,
        )

    if tensor.numel() == 0:
        return tensor.reshape(0, 2)

    if tensor.ndim != 2 or tensor.shape[1] != 2:
        raise ValueError(
            f"`pairs` must have shape (n_pairs, 2), but got {tuple(tensor.shape)=}."
        )
    return tensor
