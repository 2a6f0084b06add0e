# __main__.py
# Command line entry point: python -m heapsim

import argparse
import copy
import logging

from heapsim import config
from heapsim.experiments import compare_strategies, format_summary
from heapsim.monitor import BOLD, ConsoleMonitor, colorize, stats_monitor
from heapsim.simulation import MemorySimulator


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='heapsim',
                                     description='Dynamic memory allocation simulator (first fit / best fit).')
    parser.add_argument('--strategy', choices=sorted(config.STRATEGIES), default='best')
    parser.add_argument('--fragmentation', action='store_true',
                        help='grant whole blocks instead of splitting (internal fragmentation)')
    parser.add_argument('--compaction', action='store_true',
                        help='compact free blocks after a failed allocation')
    parser.add_argument('--blocks', type=int, nargs='+', default=config.BLOCK_SIZES,
                        help='initial block sizes in declaration order')
    parser.add_argument('--overhead', type=int, default=config.SPLIT_OVERHEAD,
                        help='bookkeeping cost charged per split')
    parser.add_argument('--until', type=float, default=config.SIM_TIME)
    parser.add_argument('--seed', type=int, default=42)
    parser.add_argument('--max-processes', type=int, default=config.MAX_PROCESSES)
    parser.add_argument('--reps', type=int, default=1,
                        help='replications; more than one compares first fit and best fit')
    parser.add_argument('--visual', action='store_true', help='draw the heap after every step')
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser.parse_args(argv)


def build_scenario(args):
    scenario = copy.deepcopy(config.DEFAULT_SCENARIO)
    scenario.update({
        'sim_time': args.until,
        'seed': args.seed,
        'block_sizes': args.blocks,
        'split_overhead': args.overhead,
        'strategy': args.strategy,
        'fragmentation_mode': args.fragmentation,
        'compaction': args.compaction,
    })
    scenario['workload']['max_processes'] = args.max_processes
    return config.validate_scenario(scenario)


def run_single(scenario, visual=False):
    sim = MemorySimulator.from_scenario(scenario)
    if visual:
        sim.add_observer(ConsoleMonitor())
    sim.init()
    sim.env.process(stats_monitor(sim, config.MONITOR_INTERVAL))

    print(f"\n--- Starting Dynamic Memory Allocation Simulation ---")
    print(f"Blocks: {scenario['block_sizes']}K | Strategy: {sim.strategy.value} fit | "
          f"Fragmentation mode: {sim.fragmentation_mode} | Compaction: {sim.compaction}")
    sim.run(until=scenario['sim_time'])

    print("=" * 100)
    print("SIMULATION FINISHED.")
    res = sim.results()
    print(f"Final Free Memory: {res['external_fragmentation']}K | Final Holes: {res['num_free_blocks']} | "
          f"Internal Fragmentation: {res['internal_fragmentation']}K | "
          f"Total Failed Requests: {res['failed_allocations']}")
    return res


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        scenario = build_scenario(args)
    except ValueError as e:
        raise SystemExit(f"heapsim: {e}")

    if args.reps <= 1:
        run_single(scenario, visual=args.visual)
        return 0

    print(f"Running {args.reps} reps for first fit and best fit...")
    out = compare_strategies(scenario, reps=args.reps)
    for name, res in out.items():
        print(colorize(f"\n=== {name} fit (mean ± 95%CI) ===", BOLD))
        print(format_summary(res['agg']))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
