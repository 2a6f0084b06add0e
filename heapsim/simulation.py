# simulation.py
# Step driver for the heap: owns the processes, the id source and the mode
# flags, and advances everything one discrete step at a time. A simpy
# clock calls step() at a fixed interval; tests can call step() directly.

import logging
import random

import numpy as np
import simpy

from heapsim import config
from heapsim.model import Heap, Process, Strategy, process_ids

logger = logging.getLogger(__name__)


class MemorySimulator:
    def __init__(self,
                 block_sizes=None,              # initial block sizes, declaration order
                 split_overhead=config.SPLIT_OVERHEAD,
                 strategy=Strategy.BEST_FIT,    # Strategy or 'first' / 'best'
                 fragmentation_mode=False,      # grant whole blocks instead of splitting
                 compaction=False,              # compact after a failed allocation
                 step_interval=config.STEP_INTERVAL,
                 workload=None,                 # dict for the random arrival generator
                 env=None,                      # injectable simpy.Environment
                 seed=None):
        if block_sizes is None:
            block_sizes = config.BLOCK_SIZES
        self.heap = Heap(block_sizes, split_overhead)
        self.strategy = config.resolve_strategy(strategy)
        self.fragmentation_mode = fragmentation_mode
        self.compaction = compaction
        self.step_interval = step_interval
        self.workload = workload
        self.env = env
        self.seed = seed
        self.started = False

        self.ids = process_ids()
        # active processes in creation order; this order is the fairness order
        self.processes = []
        self.observers = []

        # stats
        self.steps = 0
        self.generated = 0
        self.failed_allocations = 0
        self.compactions = 0
        self.completed = []
        self.wait_steps = {}        # active pid -> steps spent waiting for a block
        self.completed_waits = []   # wait steps of completed processes, in completion order

    @classmethod
    def from_scenario(cls, scenario, env=None, seed=None):
        config.validate_scenario(scenario)
        return cls(block_sizes=scenario.get('block_sizes', config.BLOCK_SIZES),
                   split_overhead=scenario.get('split_overhead', config.SPLIT_OVERHEAD),
                   strategy=scenario.get('strategy', 'best'),
                   fragmentation_mode=scenario.get('fragmentation_mode', False),
                   compaction=scenario.get('compaction', False),
                   step_interval=scenario.get('step_interval', config.STEP_INTERVAL),
                   workload=scenario.get('workload'),
                   env=env,
                   seed=seed if seed is not None else scenario.get('seed'))

    @property
    def now(self):
        return self.env.now if self.env is not None else float(self.steps)

    # ---------- driver controls ----------
    def set_modes(self, strategy=None, fragmentation_mode=None, compaction=None):
        """Toggle the mode flags; takes effect from the next step."""
        if strategy is not None:
            self.strategy = config.resolve_strategy(strategy)
        if fragmentation_mode is not None:
            self.fragmentation_mode = fragmentation_mode
        if compaction is not None:
            self.compaction = compaction

    def add_observer(self, observer):
        """observer(simulator) is called after every step."""
        self.observers.append(observer)

    def submit(self, size, lifetime):
        """Create a process with the next id and queue it for allocation."""
        if size <= 0 or lifetime <= 0:
            raise ValueError(f"size and lifetime must be positive, got size={size}, lifetime={lifetime}")
        process = Process.create(size, lifetime, self.ids)
        self.processes.append(process)
        self.generated += 1
        self.wait_steps[process.id] = 0
        logger.info(f"[{self.now:5.1f}] P-ID {process.id} arrives, requesting {size}K for {lifetime} steps.")
        logger.debug("[%5.1f] Requesting: %d %s", self.now, size, self.heap)
        return process

    # ---------- one discrete step ----------
    def step(self):
        """
        Visit active processes in creation order. Waiting ones get one
        allocation attempt (and optionally trigger compaction on failure,
        without retrying in this step). Allocated ones age and are released
        when their lifetime runs out.
        """
        for process in list(self.processes):
            if not process.is_allocated():
                self._try_allocate(process)
            else:
                process.tick()
                if process.is_expired():
                    self._release(process)
        self.steps += 1
        for observer in self.observers:
            observer(self)

    def _try_allocate(self, process):
        if self.heap.request_allocation(process, self.strategy, self.fragmentation_mode):
            logger.info(f"[{self.now:5.1f}] P-ID {process.id} allocated {process.allocated_block.size}K "
                        f"({self.strategy.value} fit). Holding for {process.remaining_lifetime} steps.")
            return True

        self.failed_allocations += 1
        self.wait_steps[process.id] += 1
        logger.debug(f"[{self.now:5.1f}] P-ID {process.id}: Allocation FAILED for {process.size}K "
                     f"(Total Free {self.heap.get_external_fragmentation()}K). Waiting...")
        if self.compaction:
            reclaimed = self.heap.compact()
            self.compactions += 1
            logger.info(f"[{self.now:5.1f}] Compacted heap, {reclaimed}K free in one block.")
        return False

    def _release(self, process):
        size = process.allocated_block.size
        self.heap.deallocate_process(process)
        self.processes.remove(process)
        self.completed.append(process)
        self.completed_waits.append(self.wait_steps.pop(process.id))
        logger.info(f"[{self.now:5.1f}] P-ID {process.id} released {size}K.")

    # ---------- simpy processes ----------
    def init(self):
        """Create the environment if needed and register the clock and arrivals."""
        if self.started:
            return
        if self.seed is not None:
            random.seed(self.seed)
            np.random.seed(self.seed)
        if self.env is None:
            self.env = simpy.Environment()
        self.started = True
        self.env.process(self._clock())
        if self.workload is not None:
            self.env.process(self._arrival_generator())

    def _clock(self):
        while True:
            yield self.env.timeout(self.step_interval)
            self.step()

    def _arrival_generator(self):
        """Generates new process arrivals."""
        sizes = self.workload.get('process_sizes', config.PROCESS_SIZES)
        avg_arrival = self.workload.get('avg_arrival_time', config.AVG_ARRIVAL_TIME)
        avg_lifetime = self.workload.get('avg_lifetime', config.AVG_LIFETIME)
        max_processes = self.workload.get('max_processes', config.MAX_PROCESSES)
        i = 0
        while i < max_processes:
            i += 1
            # Exponential distribution for inter-arrival time
            inter = np.random.exponential(avg_arrival)
            yield self.env.timeout(inter)
            size = random.choice(sizes)
            lifetime = max(1, int(round(np.random.exponential(avg_lifetime))))
            self.submit(size, lifetime)

    def run(self, until=config.SIM_TIME):
        if not self.started:
            self.init()
        self.env.run(until=until)

    # ---------- results ----------
    def waiting(self):
        return [p for p in self.processes if not p.is_allocated()]

    def results(self):
        stats = self.heap.stats()
        waits = self.completed_waits
        return {
            'generated': self.generated,
            'completed': len(self.completed),
            'active': len(self.processes),
            'waiting': len(self.waiting()),
            'steps': self.steps,
            'failed_allocations': self.failed_allocations,
            'compactions': self.compactions,
            'avg_wait_steps': (sum(waits) / len(waits)) if waits else 0.0,
            'internal_fragmentation': self.heap.internal_fragmentation,
            'external_fragmentation': stats['free'],
            'largest_free': stats['largest_free'],
            'num_free_blocks': stats['num_free_blocks'],
            'utilization': (stats['used'] / stats['total_capacity']) if stats['total_capacity'] > 0 else 0.0,
        }
