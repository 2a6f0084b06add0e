# experiments.py
# Replicated runs of a scenario and first fit vs best fit comparison.

import copy
import math
import statistics

from heapsim import config
from heapsim.simulation import MemorySimulator

METRICS = [
    'generated',
    'completed',
    'failed_allocations',
    'compactions',
    'avg_wait_steps',
    'internal_fragmentation',
    'external_fragmentation',
    'largest_free',
    'num_free_blocks',
    'utilization',
]


Z_95 = 1.96    # normal approximation of the 95% quantile


def half_width_95(samples):
    """Half width of the 95% interval around the sample mean; 0 below two samples."""
    if len(samples) < 2:
        return 0.0
    return Z_95 * statistics.stdev(samples) / math.sqrt(len(samples))


def mean_ci_95(samples):
    """(mean, low, high) of the replications, or Nones when there are none."""
    if not samples:
        return (None, None, None)
    centre = statistics.mean(samples)
    spread = half_width_95(samples)
    return (centre, centre - spread, centre + spread)


def statistics_95(samples):
    mean, lo, hi = mean_ci_95(samples)
    return {'mean': mean, '95ci': (lo, hi)}


# ----------------------
# Runner to perform replications
# ----------------------
def run_scenario(scenario, reps=10):
    """
    scenario is a dict as in heapsim.config.DEFAULT_SCENARIO. Replication r
    uses seed `scenario['seed'] + r` when a seed is given.
    Returns {'agg': metric -> {'mean', '95ci'}, 'summaries': [results, ...]}
    """
    summaries = []
    base_seed = scenario.get('seed', None)
    for r in range(reps):
        seed = (base_seed + r) if base_seed is not None else None
        sim = MemorySimulator.from_scenario(scenario, seed=seed)
        sim.run(until=scenario.get('sim_time', config.SIM_TIME))
        summaries.append(sim.results())

    agg = {}
    for metric in METRICS:
        agg[metric] = statistics_95([s[metric] for s in summaries])
    return {'agg': agg, 'summaries': summaries}


def compare_strategies(scenario, reps=10):
    """Run the same scenario (same seeds) with first fit and with best fit."""
    out = {}
    for name in ('first', 'best'):
        variant = copy.deepcopy(scenario)
        variant['strategy'] = name
        out[name] = run_scenario(variant, reps=reps)
    return out


def fmt(stat, fmt_mean="{:.2f}", fmt_ci="({:.2f}, {:.2f})"):
    if stat is None or stat.get('mean') is None:
        return "N/A"
    mean_s = fmt_mean.format(stat['mean'])
    lo, hi = stat.get('95ci', (None, None))
    if lo is None or hi is None:
        return mean_s
    return f"{mean_s} ± {fmt_ci.format(lo, hi)}"


def format_summary(agg):
    lines = []
    for metric in METRICS:
        lines.append(f"{metric:<24}: {fmt(agg.get(metric))}")
    return "\n".join(lines)
