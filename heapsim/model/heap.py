# heap.py
# Allocator engine: ordered doubly-linked sequence of memory blocks with
# first fit / best fit placement, splitting, release and compaction.

from collections import namedtuple
from enum import Enum

from heapsim.model.block import MemoryBlock, BlockState


class Strategy(Enum):
    FIRST_FIT = 'first'
    BEST_FIT = 'best'


BlockSnapshot = namedtuple('BlockSnapshot', ['size', 'state', 'process_id', 'from_split'])


# ----------------------
# Heap
# ----------------------
class Heap:
    """
    Owns the block sequence (head -> tail). It is the only place where the
    block topology changes; processes and blocks only hold references.

    Adjacent free blocks are left apart after a release. Only compact()
    merges free space.
    """

    def __init__(self, block_sizes=None, split_overhead=0):
        """
        block_sizes: initial configured sizes (added by head-prepend)
        split_overhead: fixed bookkeeping cost charged once per split
        """
        assert split_overhead >= 0
        self.split_overhead = split_overhead
        self.head = None
        self.total_capacity = 0
        self.splits = 0
        # unused space charged by whole-block grants still held
        self.internal_fragmentation = 0
        if block_sizes is not None:
            self.initialize(block_sizes)

    # ---------- construction ----------
    def initialize(self, block_sizes):
        """Rebuild the sequence from configured sizes. The resulting order is reversed."""
        self.head = None
        self.total_capacity = 0
        self.splits = 0
        self.internal_fragmentation = 0
        for size in block_sizes:
            assert size > 0, f"block size must be positive, got {size}"
            self.add(MemoryBlock(size))

    def add(self, block):
        """Prepend a block to the head of the sequence."""
        if self.head is not None:
            block.next = self.head
            self.head.prev = block
        self.head = block
        self.total_capacity += block.size

    # ---------- traversal ----------
    def __iter__(self):
        block = self.head
        while block is not None:
            yield block
            block = block.next

    def __len__(self):
        return sum(1 for _ in self)

    # ---------- placement ----------
    def _first_fit(self, process):
        for block in self:
            if block.is_free() and block.size >= process.size:
                return block
        return None

    def _best_fit(self, candidate, process):
        """Scan after `candidate` for a strictly smaller fitting free block."""
        block = candidate.next
        while block is not None:
            if block.is_free() and block.size >= process.size and block.size < candidate.size:
                candidate = block
            block = block.next
        return candidate

    def request_allocation(self, process, strategy, fragmentation_mode):
        """
        Place `process` in a free block. Returns False when nothing fits;
        that is a normal outcome and nothing is retried here.

        With fragmentation_mode off, the chosen block is split so that the
        process gets exactly its size. With it on, the whole block is granted
        and the unused part is charged to internal fragmentation.
        """
        assert process.size > 0
        assert not process.is_allocated(), f"P-ID {process.id} is already allocated"

        candidate = self._first_fit(process)
        if candidate is None:
            return False
        if strategy is Strategy.BEST_FIT:
            candidate = self._best_fit(candidate, process)

        leftover = candidate.size - (process.size + self.split_overhead)
        if not fragmentation_mode and leftover > 0:
            self._split(candidate, process.size, leftover)
        elif leftover > 0:
            candidate.charged = leftover
            self.internal_fragmentation += leftover

        candidate.assign(process)
        process.allocated_block = candidate
        return True

    def _split(self, block, size, leftover):
        """Shrink `block` to `size` and insert the free remainder right after it."""
        remainder = MemoryBlock(leftover, from_split=True)
        remainder.prev = block
        remainder.next = block.next
        if block.next is not None:
            block.next.prev = remainder
        block.next = remainder
        block.size = size
        self.splits += 1

    # ---------- release ----------
    def deallocate_process(self, process):
        """Free the block held by `process`. Returns the internal fragmentation released."""
        block = process.allocated_block
        assert block is not None, f"P-ID {process.id} is not allocated"
        assert block.occupant is process

        delta = block.size - process.size
        block.assign(None)
        process.allocated_block = None
        # only what the grant charged; delta also counts the unused overhead
        self.internal_fragmentation -= block.charged
        block.charged = 0
        return delta

    # ---------- fragmentation ----------
    def get_external_fragmentation(self):
        """Total size of free blocks, contiguous or not."""
        return sum(block.size for block in self if block.is_free())

    def stats(self):
        """Calculates current memory usage and fragmentation stats."""
        used = 0
        free = 0
        largest_free = 0
        num_free_blocks = 0
        num_blocks = 0
        for block in self:
            num_blocks += 1
            if block.is_free():
                free += block.size
                largest_free = max(largest_free, block.size)
                num_free_blocks += 1
            else:
                used += block.size
        return {
            'used': used,
            'free': free,
            'largest_free': largest_free,
            'num_free_blocks': num_free_blocks,
            'num_blocks': num_blocks,
            'internal_fragmentation': self.internal_fragmentation,
            'total_capacity': self.total_capacity,
        }

    # ---------- compaction ----------
    def compact(self):
        """
        Unlink every free block, keeping occupied blocks in their order, then
        put one free block holding all the reclaimed space at the head.
        Occupied blocks are not relocated.
        """
        reclaimed = 0
        block = self.head
        while block is not None:
            following = block.next
            if block.is_free():
                reclaimed += block.size
                self.total_capacity -= block.size
                if block.prev is None:
                    self.head = following
                else:
                    block.prev.next = following
                if following is not None:
                    following.prev = block.prev
                block.prev = None
                block.next = None
            block = following

        self.add(MemoryBlock(reclaimed))
        return reclaimed

    # ---------- read-only views ----------
    def snapshot(self):
        """Ordered (size, state, process_id, from_split) records, head to tail."""
        return [
            BlockSnapshot(
                block.size,
                block.state,
                block.occupant.id if block.occupant is not None else None,
                block.from_split,
            )
            for block in self
        ]

    def display_share(self, block):
        """Fraction of the heap a block takes when drawn; split blocks also show their overhead."""
        if self.total_capacity <= 0:
            return 0.0
        size = block.size
        if block.from_split:
            size += self.split_overhead
        return size / self.total_capacity

    def __str__(self):
        parts = []
        for block in self:
            mark = '' if block.state is BlockState.FREE else '*'
            parts.append(f" {block.size}{mark} |")
        return "[|" + "".join(parts) + "]"
