# config.py
# Configuration parameters and scenario helpers for the heap simulation.

from heapsim.model.heap import Strategy

# --- 1. CONFIGURATION PARAMETERS ---
BLOCK_SIZES = [450, 150, 70, 50, 300, 200]  # initial blocks, declaration order (K)
SPLIT_OVERHEAD = 0          # bookkeeping cost charged once per split (K)
STEP_INTERVAL = 1.0         # time units between two simulation steps
MONITOR_INTERVAL = 5.0      # time units between two stats rows
SIM_TIME = 150.0            # simulation run time

# Workload generation
PROCESS_SIZES = [20, 60, 90, 120, 180, 250]  # requested sizes (K)
AVG_ARRIVAL_TIME = 2.0      # mean inter-arrival time (time units)
AVG_LIFETIME = 8.0          # mean lifetime (steps)
MAX_PROCESSES = 40          # limit on generated processes

STRATEGIES = {
    'first': Strategy.FIRST_FIT,
    'best': Strategy.BEST_FIT,
}

DEFAULT_SCENARIO = {
    'sim_time': SIM_TIME,
    'seed': 42,
    'block_sizes': BLOCK_SIZES,
    'split_overhead': SPLIT_OVERHEAD,
    'step_interval': STEP_INTERVAL,
    'strategy': 'best',
    'fragmentation_mode': False,
    'compaction': False,
    'workload': {
        'process_sizes': PROCESS_SIZES,
        'avg_arrival_time': AVG_ARRIVAL_TIME,
        'avg_lifetime': AVG_LIFETIME,
        'max_processes': MAX_PROCESSES,
    },
}


def resolve_strategy(value):
    """Accept a Strategy or its short name ('first' / 'best')."""
    if isinstance(value, Strategy):
        return value
    try:
        return STRATEGIES[value]
    except KeyError:
        raise ValueError(f"unknown strategy {value!r}, expected one of {sorted(STRATEGIES)}")


def validate_scenario(scenario):
    """Raise ValueError if the scenario cannot be simulated."""
    block_sizes = scenario.get('block_sizes', BLOCK_SIZES)
    if not block_sizes:
        raise ValueError("block_sizes must not be empty")
    for size in block_sizes:
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"block sizes must be positive integers, got {size!r}")
    if scenario.get('split_overhead', SPLIT_OVERHEAD) < 0:
        raise ValueError("split_overhead must be non-negative")
    if scenario.get('step_interval', STEP_INTERVAL) <= 0:
        raise ValueError("step_interval must be positive")
    if scenario.get('sim_time', SIM_TIME) <= 0:
        raise ValueError("sim_time must be positive")
    resolve_strategy(scenario.get('strategy', 'best'))

    workload = scenario.get('workload')
    if workload is not None:
        sizes = workload.get('process_sizes', PROCESS_SIZES)
        if not sizes or any(size <= 0 for size in sizes):
            raise ValueError("process_sizes must be non-empty and positive")
        if workload.get('avg_arrival_time', AVG_ARRIVAL_TIME) <= 0:
            raise ValueError("avg_arrival_time must be positive")
        if workload.get('avg_lifetime', AVG_LIFETIME) <= 0:
            raise ValueError("avg_lifetime must be positive")
    return scenario
