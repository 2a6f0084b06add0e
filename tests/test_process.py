from heapsim.model import MemoryBlock, BlockState, Process, process_ids


def test_ids_are_monotonic(ids):
    procs = [Process.create(10, 3, ids) for _ in range(4)]
    assert [p.id for p in procs] == [1, 2, 3, 4]


def test_id_sources_are_independent():
    a = process_ids()
    b = process_ids()
    assert Process.create(10, 1, a).id == 1
    assert Process.create(10, 1, a).id == 2
    assert Process.create(10, 1, b).id == 1


def test_tick_has_no_lower_bound(ids):
    p = Process.create(10, 1, ids)
    assert not p.is_expired()
    p.tick()
    assert p.remaining_lifetime == 0
    assert p.is_expired()
    p.tick()
    assert p.remaining_lifetime == -1


def test_is_allocated_follows_block(ids):
    p = Process.create(10, 1, ids)
    assert not p.is_allocated()
    p.allocated_block = MemoryBlock(10)
    assert p.is_allocated()
    assert p.to_row() == {'id': 1, 'size': 10, 'remaining_lifetime': 1, 'allocated': True}


def test_block_assign_changes_state(ids):
    block = MemoryBlock(40)
    assert block.state is BlockState.FREE
    assert not block.from_split

    p = Process.create(30, 2, ids)
    block.assign(p)
    assert block.state is BlockState.OCCUPIED
    assert block.occupant is p
    assert not block.is_free()

    block.assign(None)
    assert block.is_free()
    assert block.occupant is None
