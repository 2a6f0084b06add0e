from heapsim.model.process import Process, process_ids
from heapsim.model.block import MemoryBlock, BlockState
from heapsim.model.heap import Heap, Strategy, BlockSnapshot

__all__ = [
    'Process', 'process_ids',
    'MemoryBlock', 'BlockState',
    'Heap', 'Strategy', 'BlockSnapshot',
]
