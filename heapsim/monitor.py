# monitor.py
# Console presentation of the heap. Reads snapshots and stats only; the
# allocator never calls into this module.

import sys

from heapsim.model import BlockState

# --- ANSI Color Codes for Visual Console Output ---
RED = '\033[91m'
GREEN = '\033[92m'
CYAN = '\033[96m'
BOLD = '\033[1m'
RESET = '\033[0m'

BAR_WIDTH = 80


def colorize(text, color):
    """Applies ANSI color codes to the text."""
    return f"{color}{text}{RESET}"


def render_heap(heap, width=BAR_WIDTH, color=True):
    """
    Draw the heap as one horizontal bar, head on the left. Each block gets a
    share of `width` proportional to its size (see Heap.display_share) and is
    labelled with its size and, when occupied, the process id.
    """
    cells = []
    for block in heap.snapshot():
        cols = max(1, int(round(heap.display_share(block) * width)))
        label = f"{block.size}K"
        if block.process_id is not None:
            label += f" P{block.process_id}"
        if len(label) > cols:
            label = label[:cols]
        text = label.center(cols)
        if color:
            text = colorize(text, GREEN if block.state is BlockState.FREE else RED)
        cells.append(text)
    return "|" + "|".join(cells) + "|"


def render_process_table(processes):
    rows = ["  PID |  Size | Time left | Allocated", "-" * 40]
    for process in processes:
        row = process.to_row()
        rows.append(f"{row['id']:5d} | {row['size']:5d} | {row['remaining_lifetime']:9d} | "
                    f"{'yes' if row['allocated'] else 'no'}")
    return "\n".join(rows)


def stats_header():
    return ("TIME | Used (K) | Free (K) | Largest Free (K) | # Holes | Internal Frag (K) | Failed Requests")


def format_stats_row(now, stats, failed_allocations):
    return (f"{now:4.1f} | {stats['used']:8d} | {stats['free']:8d} | {stats['largest_free']:16d} | "
            f"{stats['num_free_blocks']:7d} | {stats['internal_fragmentation']:17d} | {failed_allocations:15d}")


def stats_monitor(simulator, interval, out=None):
    """SimPy process: prints a stats row every `interval` time units."""
    out = out if out is not None else sys.stdout
    print("\n" + "=" * 100, file=out)
    print(stats_header(), file=out)
    print("=" * 100, file=out)
    while True:
        yield simulator.env.timeout(interval)
        print(format_stats_row(simulator.now, simulator.heap.stats(), simulator.failed_allocations), file=out)


class ConsoleMonitor:
    """Step observer that repaints the heap bar and the process table."""

    def __init__(self, out=None, color=True, width=BAR_WIDTH):
        self.out = out if out is not None else sys.stdout
        self.color = color
        self.width = width

    def __call__(self, simulator):
        heading = f"[{simulator.now:5.1f}] step {simulator.steps}"
        if self.color:
            heading = colorize(heading, BOLD + CYAN)
        print(heading, file=self.out)
        print(render_heap(simulator.heap, self.width, self.color), file=self.out)
        print(f"External fragmentation: {simulator.heap.get_external_fragmentation()}K | "
              f"Internal fragmentation: {simulator.heap.internal_fragmentation}K", file=self.out)
        if simulator.processes:
            print(render_process_table(simulator.processes), file=self.out)
        self.out.flush()
