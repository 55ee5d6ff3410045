"""Tests for the tiling partitioner."""

import pytest
from blockfit.engine import SHAPES, Cell, ShapeCatalog, apply_transform, is_connected, partition_region, piece_sizes
from blockfit.engine.partitioner import FREE_FORM
from blockfit.errors import PartitionFailure


def rectangle(cols, rows):
    return {Cell(x, y) for y in range(rows) for x in range(cols)}


def try_partition(region, piece_count, seed, **kwargs):
    try:
        return partition_region(region, piece_count, seed=seed, **kwargs)
    except PartitionFailure:
        return None


class TestPieceSizes:
    """Test cases for size planning."""

    def test_even_split(self):
        assert piece_sizes(12, 3) == [4, 4, 4]

    def test_remainder_spread(self):
        """Extra cells go to the first pieces, one each."""
        assert piece_sizes(14, 3) == [5, 5, 4]
        assert sum(piece_sizes(23, 5)) == 23


class TestPartitionRegion:
    """Test cases for partitioning a region."""

    def test_partition_covers_region_exactly(self):
        """Slots are disjoint, connected and cover the region."""
        region = rectangle(4, 4)
        results = [try_partition(region, 4, seed) for seed in range(30)]
        successes = [r for r in results if r is not None]
        assert successes

        for slots in successes:
            assert len(slots) == 4
            covered = set()
            for slot in slots:
                assert not covered & slot.cells
                covered |= slot.cells
                assert is_connected(slot.cells)
            assert covered == region

    def test_slots_match_catalog(self):
        """Each slot names its catalog shape and a solution that recreates it."""
        region = rectangle(5, 4)
        found = 0
        for seed in range(30):
            slots = try_partition(region, 5, seed)
            if slots is None:
                continue
            found += 1
            for slot in slots:
                assert slot.shape_name in SHAPES
                assert tuple(slot.shape) == SHAPES[slot.shape_name]
                s = slot.solution
                placed = {
                    Cell(s.x + c.x, s.y + c.y)
                    for c in apply_transform(slot.shape, s.rotation, s.flipped)
                }
                assert placed == slot.cells
        assert found > 0

    def test_deterministic_for_seed(self):
        """The search is a pure function of region, count and seed."""
        region = rectangle(5, 5)
        for seed in range(5):
            assert try_partition(region, 5, seed) == try_partition(region, 5, seed)

    def test_single_piece(self):
        """One piece is the whole region when it is a catalog shape."""
        slots = partition_region([(0, 0), (1, 0), (0, 1), (1, 1)], 1, seed=1)
        assert len(slots) == 1
        assert slots[0].shape_name == "Square"

    def test_disconnected_region_fails(self):
        """Disconnected regions cannot be partitioned."""
        with pytest.raises(PartitionFailure):
            partition_region([(0, 0), (2, 0)], 2, seed=1)

    @pytest.mark.parametrize("piece_count", [0, 5])
    def test_invalid_piece_count_fails(self, piece_count):
        """Piece counts outside 1..len(region) fail."""
        with pytest.raises(PartitionFailure):
            partition_region(rectangle(2, 2), piece_count, seed=1)

    def test_missing_catalog_size_fails(self):
        """Planned sizes with no catalog shape fail up front."""
        catalog = ShapeCatalog({"Square": SHAPES["Square"]})
        with pytest.raises(PartitionFailure):
            partition_region(rectangle(3, 2), 2, seed=1, catalog=catalog)

    def test_step_budget_exhausted(self):
        """The search gives up once its step budget is spent."""
        with pytest.raises(PartitionFailure):
            partition_region(rectangle(4, 2), 2, seed=1, max_steps=1)

    def test_free_form_pieces(self):
        """With free-form allowed, pieces outside the catalog are accepted."""
        catalog = ShapeCatalog({"Square": SHAPES["Square"]})
        slots = partition_region(rectangle(6, 1), 2, seed=1, catalog=catalog, allow_free_form=True)
        assert [slot.shape_name for slot in slots] == [FREE_FORM, FREE_FORM]
        assert set().union(*(slot.cells for slot in slots)) == rectangle(6, 1)
