"""Tests for the ConnectionMatrix incidence structure.

Covers construction from pairs, row lookup, batch gathering, transposition and
the validation performed on direct construction.
"""

import itertools

import pytest
import torch

from torchtopo.connectivity import ConnectionMatrix, build_connection_matrix_from_pairs
from torchtopo.errors import IndexOutOfRange, UnsortedInputViolation

# 1 0 1 0
# 1 1 0 0
# 0 1 0 1
# 1 0 0 1
SQUARE_PAIRS = [(0, 0), (0, 2), (1, 0), (1, 1), (2, 1), (2, 3), (3, 0), (3, 3)]


class TestFromPairs:
    """Test building connection matrices from (row, col) pairs."""

    def test_square(self, device):
        """Square incidence yields the expected compressed arrays."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS, device=device)

        assert mat.offsets.tolist() == [0, 2, 4, 6, 8]
        assert mat.indices.tolist() == [0, 2, 0, 1, 1, 3, 0, 3]
        assert mat.connection_shape == (4, 4)
        assert mat.get_connected(2).tolist() == [1, 3]
        assert mat.offsets.device.type == device
        assert mat.indices.device.type == device

    def test_nonsquare(self):
        """Column bound comes from the largest column, not the row count."""
        # 1 0 1 0
        # 0 1 0 1
        # 1 0 0 1
        mat = ConnectionMatrix.from_pairs(
            [(0, 0), (0, 2), (1, 1), (1, 3), (2, 0), (2, 3)]
        )

        assert mat.offsets.tolist() == [0, 2, 4, 6]
        assert mat.indices.tolist() == [0, 2, 1, 3, 0, 3]
        assert mat.connection_shape == (3, 4)

    def test_empty_row(self):
        """A row without pairs between populated rows is kept."""
        # 1 0 1 0
        # 0 0 0 0
        # 0 1 0 1
        # 1 0 0 1
        mat = ConnectionMatrix.from_pairs(
            [(0, 0), (0, 2), (2, 1), (2, 3), (3, 0), (3, 3)]
        )

        assert mat.offsets.tolist() == [0, 2, 2, 4, 6]
        assert mat.indices.tolist() == [0, 2, 1, 3, 0, 3]
        assert mat.connection_shape == (4, 4)
        assert mat.get_connected(1).tolist() == []

    def test_unsorted_pairs_are_sorted(self):
        """Pair order does not affect the result."""
        shuffled = [SQUARE_PAIRS[i] for i in [5, 0, 7, 2, 6, 1, 4, 3]]

        assert ConnectionMatrix.from_pairs(shuffled).equals(
            ConnectionMatrix.from_pairs(SQUARE_PAIRS)
        )

    def test_duplicates_are_kept(self):
        """Duplicate pairs are stored, not merged."""
        mat = ConnectionMatrix.from_pairs([(0, 1), (1, 0), (0, 1)])

        assert mat.to_list() == [[1, 1], [0]]
        assert mat.n_entries == 3

    def test_tensor_input(self, device):
        """An (n, 2) tensor is accepted and keeps its device."""
        pairs = torch.tensor(SQUARE_PAIRS, device=device)
        mat = build_connection_matrix_from_pairs(pairs)

        assert mat.offsets.device.type == device
        assert mat.equals(ConnectionMatrix.from_pairs(SQUARE_PAIRS, device=device))

    def test_empty(self):
        """No pairs gives a matrix with no rows and no columns."""
        mat = ConnectionMatrix.from_pairs([])

        assert mat.offsets.tolist() == [0]
        assert mat.indices.tolist() == []
        assert mat.connection_shape == (0, 0)

    def test_explicit_n_rows_adds_trailing_rows(self):
        """n_rows larger than needed appends empty rows."""
        mat = ConnectionMatrix.from_pairs([(0, 1)], n_rows=3)

        assert mat.offsets.tolist() == [0, 1, 1, 1]
        assert mat.connection_shape == (3, 2)

    def test_n_rows_too_small(self):
        """n_rows smaller than the largest row index is rejected."""
        with pytest.raises(IndexOutOfRange):
            ConnectionMatrix.from_pairs([(2, 0)], n_rows=2)

    def test_negative_indices_rejected(self):
        """Negative row or column indices are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            ConnectionMatrix.from_pairs([(0, -1)])

    def test_bool_pairs_rejected(self):
        """A boolean tensor is not a list of index pairs."""
        with pytest.raises(TypeError, match="int-like"):
            ConnectionMatrix.from_pairs(torch.tensor([[True, False]]))

    def test_non_integer_pairs_rejected(self):
        """Float entries are rejected rather than truncated."""
        with pytest.raises(TypeError, match="must contain integers"):
            ConnectionMatrix.from_pairs([(0, 1.5)])

    def test_wrong_pair_width_rejected(self):
        """Pairs must be two-wide."""
        with pytest.raises(ValueError, match="shape"):
            ConnectionMatrix.from_pairs(torch.tensor([[0, 1, 2]]))


class TestRowLookup:
    """Test single-row and batch lookups."""

    def test_get_connected_every_row(self):
        """Each row returns its sorted columns."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        assert [mat.get_connected(r).tolist() for r in range(4)] == [
            [0, 2],
            [0, 1],
            [1, 3],
            [0, 3],
        ]

    @pytest.mark.parametrize("row", [4, 10, -1])
    def test_get_connected_out_of_range(self, row):
        """Rows outside [0, n_rows) raise IndexOutOfRange."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        with pytest.raises(IndexOutOfRange):
            mat.get_connected(row)

    def test_gather_connected_union(self, device):
        """Gathering rows returns the sorted union of their columns."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS, device=device)
        gathered = mat.gather_connected([3, 0])

        assert gathered.tolist() == [0, 2, 3]
        assert gathered.device.type == device

    def test_gather_connected_empty(self):
        """Gathering no rows returns an empty result."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        gathered = mat.gather_connected([])
        assert gathered.tolist() == []
        assert gathered.dtype == torch.int64

    def test_gather_connected_ignores_duplicate_rows(self):
        """Repeated rows contribute once."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        assert mat.gather_connected(torch.tensor([2, 2, 2])).tolist() == [1, 3]

    def test_gather_connected_deduplicates_columns(self):
        """Duplicate stored columns appear once in the result."""
        mat = ConnectionMatrix.from_pairs([(0, 1), (0, 1), (1, 1)])

        assert mat.gather_connected([0, 1]).tolist() == [1]

    def test_gather_connected_matches_row_union(self):
        """gather_connected equals the union of get_connected over every row subset."""
        mat = ConnectionMatrix.from_pairs(
            [(0, 0), (0, 2), (2, 1), (2, 3), (3, 0), (3, 3)]
        )

        for size in range(mat.n_rows + 1):
            for rows in itertools.combinations(range(mat.n_rows), size):
                expected = sorted(
                    {c for r in rows for c in mat.get_connected(r).tolist()}
                )
                assert mat.gather_connected(list(rows)).tolist() == expected

    def test_gather_connected_out_of_range(self):
        """Any row outside the matrix raises IndexOutOfRange."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        with pytest.raises(IndexOutOfRange):
            mat.gather_connected([0, 4])


class TestPairsAndTranspose:
    """Test decompression to pairs and transposition."""

    def test_to_pairs(self):
        """to_pairs lists every entry in row-major order."""
        mat = ConnectionMatrix.from_pairs(list(reversed(SQUARE_PAIRS)))

        assert [tuple(p) for p in mat.to_pairs().tolist()] == SQUARE_PAIRS

    def test_iter_pairs_round_trip(self):
        """Rebuilding from iter_pairs gives an equal matrix."""
        # 1 0 0 0
        # 0 1 0 0
        # 0 1 0 1
        # 1 0 0 1
        mat = ConnectionMatrix.from_pairs(
            [(0, 0), (1, 1), (2, 1), (2, 3), (3, 0), (3, 3)]
        )

        assert ConnectionMatrix.from_pairs(mat.iter_pairs()).equals(mat)
        assert ConnectionMatrix.from_pairs(mat.to_pairs()).equals(mat)

    def test_iter_pairs_restartable(self):
        """Each call to iter_pairs starts over."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        first = list(mat.iter_pairs())
        second = list(mat.iter_pairs())
        assert first == second == SQUARE_PAIRS

    def test_iter_pairs_skips_empty_rows(self):
        """Rows without columns produce no pairs."""
        mat = ConnectionMatrix.from_pairs([(0, 2), (3, 1)])

        assert list(mat.iter_pairs()) == [(0, 2), (3, 1)]

    def test_transposed(self, device):
        """Transposition swaps rows and columns."""
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS, device=device)
        transposed = mat.transposed()

        assert transposed.offsets.tolist() == [0, 3, 5, 6, 8]
        assert transposed.indices.tolist() == [0, 1, 3, 1, 2, 0, 2, 3]
        assert transposed.offsets.device.type == device
        assert torch.equal(transposed.to_dense(), mat.to_dense().T)

    def test_transposed_keeps_empty_columns_as_rows(self):
        """Columns below the column bound without entries become empty rows."""
        mat = ConnectionMatrix.from_pairs([(0, 0), (1, 2)])
        transposed = mat.transposed()

        assert transposed.to_list() == [[0], [], [1]]
        assert transposed.connection_shape == (3, 2)

    def test_transposed_twice(self):
        """Transposing twice restores the matrix."""
        mat = ConnectionMatrix.from_pairs(
            [(0, 0), (0, 2), (1, 1), (1, 3), (2, 0), (2, 3)]
        )

        assert mat.transposed().transposed().equals(mat)

    def test_transposed_twice_drops_trailing_empty_rows(self):
        """Trailing empty rows are not part of the column bound of the transpose."""
        mat = ConnectionMatrix.from_pairs([(0, 1)], n_rows=3)
        restored = mat.transposed().transposed()

        assert list(restored.iter_pairs()) == list(mat.iter_pairs())
        assert restored.n_rows == 1


class TestConversions:
    """Test list and dense conversions."""

    def test_to_list(self):
        mat = ConnectionMatrix.from_pairs([(0, 0), (0, 2), (2, 1)])

        assert mat.to_list() == [[0, 2], [], [1]]

    def test_to_dense(self):
        mat = ConnectionMatrix.from_pairs(SQUARE_PAIRS)

        expected = torch.tensor(
            [
                [1, 0, 1, 0],
                [1, 1, 0, 0],
                [0, 1, 0, 1],
                [1, 0, 0, 1],
            ],
            dtype=torch.bool,
        )
        assert torch.equal(mat.to_dense(), expected)

    def test_equals(self):
        a = ConnectionMatrix.from_pairs(SQUARE_PAIRS)
        b = ConnectionMatrix.from_pairs(SQUARE_PAIRS[:-1])

        assert a.equals(a.transposed().transposed())
        assert not a.equals(b)


class TestConnectionMatrixValidation:
    """Test validation of directly constructed matrices."""

    def test_valid_matrix(self, device):
        """Valid arrays pass validation, including a descent across a row break."""
        mat = ConnectionMatrix(
            offsets=torch.tensor([0, 2, 3], device=device),
            indices=torch.tensor([1, 3, 0], device=device),
        )
        assert mat.n_rows == 2
        assert mat.connection_shape == (2, 4)

        empty = ConnectionMatrix(
            offsets=torch.tensor([0], device=device),
            indices=torch.tensor([], dtype=torch.int64, device=device),
        )
        assert empty.n_rows == 0

    def test_invalid_empty_offsets(self):
        with pytest.raises(ValueError, match="Offsets array must have length >= 1"):
            ConnectionMatrix(
                offsets=torch.tensor([], dtype=torch.int64),
                indices=torch.tensor([], dtype=torch.int64),
            )

    def test_invalid_first_offset(self):
        with pytest.raises(ValueError, match="First offset must be 0"):
            ConnectionMatrix(
                offsets=torch.tensor([1, 2]),
                indices=torch.tensor([0, 1]),
            )

    def test_invalid_last_offset(self):
        with pytest.raises(ValueError, match="Last offset must equal length of indices"):
            ConnectionMatrix(
                offsets=torch.tensor([0, 2, 5]),
                indices=torch.tensor([0, 1, 2]),
            )

    def test_decreasing_offsets(self):
        with pytest.raises(ValueError, match="non-decreasing"):
            ConnectionMatrix(
                offsets=torch.tensor([0, 2, 1, 3]),
                indices=torch.tensor([0, 1, 2]),
            )

    def test_unsorted_row(self):
        """Columns out of order within one row raise UnsortedInputViolation."""
        with pytest.raises(UnsortedInputViolation, match="row 1"):
            ConnectionMatrix(
                offsets=torch.tensor([0, 1, 3]),
                indices=torch.tensor([0, 3, 2]),
            )

    def test_float_indices_rejected(self):
        with pytest.raises(TypeError):
            ConnectionMatrix(
                offsets=torch.tensor([0, 1]),
                indices=torch.tensor([0.5]),
            )
