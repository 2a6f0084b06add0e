from heapsim.model import (
    BlockSnapshot,
    BlockState,
    Heap,
    MemoryBlock,
    Process,
    Strategy,
    process_ids,
)
from heapsim.simulation import MemorySimulator

__version__ = '0.1.0'

__all__ = [
    'BlockSnapshot', 'BlockState', 'Heap', 'MemoryBlock', 'Process',
    'Strategy', 'process_ids', 'MemorySimulator',
]
