import pytest

from heapsim.model import Heap, process_ids

SPEC_BLOCKS = [450, 150, 70, 50, 300, 200]


@pytest.fixture
def heap():
    return Heap(SPEC_BLOCKS)


@pytest.fixture
def ids():
    return process_ids()


def _check_invariants(heap, configured_capacity):
    blocks = list(heap)
    assert sum(b.size for b in blocks) + heap.split_overhead * heap.splits == configured_capacity

    seen = set()
    for b in blocks:
        if b.is_free():
            assert b.occupant is None
        else:
            assert b.occupant is not None
            assert b.occupant.allocated_block is b
            assert b.occupant.id not in seen
            seen.add(b.occupant.id)

    # links agree in both directions
    prev = None
    for b in blocks:
        assert b.prev is prev
        prev = b

    assert 0 <= heap.get_external_fragmentation() <= heap.total_capacity


@pytest.fixture
def check_invariants():
    return _check_invariants
