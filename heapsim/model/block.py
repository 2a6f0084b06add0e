# block.py
# MemoryBlock: one contiguous region of the heap, linked to its neighbours.

from enum import Enum


class BlockState(Enum):
    FREE = 'FREE'
    OCCUPIED = 'USED'


class MemoryBlock:
    __slots__ = ('size', 'occupant', 'state', 'prev', 'next', 'from_split', 'charged')

    def __init__(self, size, from_split=False):
        self.size = size
        self.occupant = None
        self.state = BlockState.FREE
        # position in the heap sequence
        self.prev = None
        self.next = None
        # carved out of a larger block; only affects display overhead
        self.from_split = from_split
        # internal fragmentation charged when granted whole
        self.charged = 0

    def assign(self, process):
        """Bind `process` here, or free the block when `process` is None."""
        if process is None:
            self.occupant = None
            self.state = BlockState.FREE
        else:
            self.occupant = process
            self.state = BlockState.OCCUPIED

    def is_free(self):
        return self.state is BlockState.FREE

    def __repr__(self):
        pid = self.occupant.id if self.occupant is not None else None
        return f"MemoryBlock(size={self.size}, state={self.state.value}, pid={pid})"
