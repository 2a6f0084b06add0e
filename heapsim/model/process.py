# process.py
# Process: a unit of memory demand with a size and a finite lifetime.

import itertools


def process_ids(start=1):
    """Return a fresh id source. Each simulation owns its own."""
    return itertools.count(start)


# ----------------------
# Process object
# ----------------------
class Process:
    __slots__ = ('id', 'size', 'remaining_lifetime', 'allocated_block')

    def __init__(self, pid, size, lifetime):
        self.id = pid
        self.size = size
        self.remaining_lifetime = lifetime
        # non-owning; the heap owns the block
        self.allocated_block = None

    @classmethod
    def create(cls, size, lifetime, ids):
        """Build a process taking the next id from `ids`."""
        return cls(next(ids), size, lifetime)

    def is_allocated(self):
        return self.allocated_block is not None

    def tick(self):
        """One simulation step of lifetime. No lower bound."""
        self.remaining_lifetime -= 1

    def is_expired(self):
        return self.remaining_lifetime < 1

    def to_row(self):
        return {
            'id': self.id,
            'size': self.size,
            'remaining_lifetime': self.remaining_lifetime,
            'allocated': self.is_allocated(),
        }

    def __repr__(self):
        return f"Process(id={self.id}, size={self.size}, remaining_lifetime={self.remaining_lifetime})"
