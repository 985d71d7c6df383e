import os
import sys
import time
from collections import OrderedDict, defaultdict
from contextlib import contextmanager


class Timer:
    """Accumulates elapsed time for named operations of the u16view tools.

    Operations may nest. Per-file operations are named "<prefix>_<basename>"
    so that the report can fold them into one line per prefix.
    """

    def __init__(self, enabled=False):
        self.enabled = enabled
        self.timings = OrderedDict()  # Operation name -> elapsed time
        self.children = defaultdict(list)  # Parent -> nested operation names
        self.start_times = {}
        self.operation_stack = []
        self.file_prefixes = {}  # Operation name -> prefix for per-file operations

    def start(self, operation_name):
        if not self.enabled:
            return
        self.start_times[operation_name] = time.perf_counter()
        if self.operation_stack:
            self.children[self.operation_stack[-1]].append(operation_name)
        self.operation_stack.append(operation_name)

    def stop(self, operation_name):
        """Stop timing an operation and return its elapsed time."""
        if not self.enabled or operation_name not in self.start_times:
            return 0.0
        elapsed = time.perf_counter() - self.start_times.pop(operation_name)
        self.timings[operation_name] = self.timings.get(operation_name, 0.0) + elapsed
        if self.operation_stack and self.operation_stack[-1] == operation_name:
            self.operation_stack.pop()
        return elapsed

    @contextmanager
    def time_operation(self, operation_name):
        self.start(operation_name)
        try:
            yield
        finally:
            self.stop(operation_name)

    @contextmanager
    def time_file_operation(self, operation_prefix, filename):
        operation_name = f"{operation_prefix}_{os.path.basename(filename)}"
        if self.enabled:
            self.file_prefixes[operation_name] = operation_prefix
        with self.time_operation(operation_name):
            yield

    def get_elapsed(self, operation_name):
        return self.timings.get(operation_name, 0.0)

    def format_time(self, seconds):
        """Format time in microseconds for precision."""
        microseconds = seconds * 1_000_000
        if microseconds < 1000:
            return f"{microseconds:.0f}µs"
        elif microseconds < 1_000_000:
            return f"{microseconds / 1000:.1f}ms"
        elif seconds < 60.0:
            return f"{seconds:.1f}s"
        else:
            minutes = int(seconds // 60)
            secs = seconds % 60
            return f"{minutes}m{secs:.1f}s"

    def _top_level(self):
        nested = {child for kids in self.children.values() for child in kids}
        return [op for op in self.timings if op not in nested]

    def _grouped(self, operations):
        """Fold per-file operations into (name, total time, file count) rows."""
        groups = OrderedDict()
        for op in operations:
            key = self.file_prefixes.get(op, op)
            elapsed, count = groups.get(key, (0.0, 0))
            groups[key] = (elapsed + self.timings[op], count + 1)
        return [(name, elapsed, count) for name, (elapsed, count) in groups.items()]

    def _report_tree(self, operations, file, indent):
        for op in sorted(operations, key=lambda op: self.timings[op], reverse=True):
            print(f"{'  ' * indent}{op}: {self.format_time(self.timings[op])}", file=file)
            self._report_tree([c for c in self.children.get(op, []) if c in self.timings], file, indent + 1)

    def report(self, verbose_level, file=None):
        """Print the total, then a per-category (verbose 1) or full (verbose 2+) breakdown."""
        if not self.enabled or not self.timings:
            return
        if file is None:
            file = sys.stderr

        top_level = self._top_level()
        total = sum(self.timings[op] for op in top_level)
        print(f"Total scan time: {self.format_time(total)}", file=file)

        if verbose_level == 1:
            print("\nOperations by category:", file=file)
            for name, elapsed, count in self._grouped(top_level):
                suffix = f" ({count} files)" if count > 1 else ""
                print(f"{name}: {self.format_time(elapsed)}{suffix}", file=file)
        elif verbose_level >= 2:
            print("\nDetailed timing breakdown:", file=file)
            self._report_tree(top_level, file, 0)


_global_timer = Timer()


def get_timer():
    return _global_timer


def initialize_timer(enabled=False):
    """Replace the global timer, discarding anything it recorded."""
    global _global_timer
    _global_timer = Timer(enabled)


def time_operation(operation_name):
    return _global_timer.time_operation(operation_name)


def time_file_operation(operation_prefix, filename):
    return _global_timer.time_file_operation(operation_prefix, filename)


def report_timing(verbose_level, file=None):
    _global_timer.report(verbose_level, file)
