# cli.py: command-line front end for the XRoar trace profiler
# Reads an instruction trace (file or stdin) and writes the per-address JSON profile (file or stdout).

import argparse
import sys
from typing import Optional, List, TextIO

# Local module imports
from xrt_profile.core.layout import TICKS_PER_CYCLE, WARMUP_THRESHOLD, WARMUP_TICKS
from xrt_profile.core.profile import ProfileConfig, build_profile
from xrt_profile.core.report import write_report
from xrt_profile.core.observe import TraceSink, write_metrics


# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------

def _positive_int(text: str) -> int:
    try:
        val = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if val < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1 (got {val})")
    return val


def _open_input(path: Optional[str]) -> TextIO:
    # latin-1 keeps character columns equal to byte columns of the trace
    if path is None:
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(encoding="latin-1")
        return sys.stdin
    return open(path, "r", encoding="latin-1")


def _close_input(infile: TextIO):
    if infile is not sys.stdin:
        infile.close()


def _open_output(path: Optional[str]) -> TextIO:
    if path is None:
        return sys.stdout
    return open(path, "w", encoding="utf-8")


def _log(msg: str):
    print(msg, file=sys.stderr)


# -----------------------------------------------------------------------------
# Command handler
# -----------------------------------------------------------------------------

def cmd_profile(args: argparse.Namespace) -> int:
    config = ProfileConfig(
        ticks_per_cycle=args.ticks_per_cycle,
        warmup_threshold=args.warmup_threshold,
        warmup_ticks=args.warmup_ticks,
    )

    try:
        infile = _open_input(args.infile)
    except OSError as e:
        _log(f"Error: cannot open input '{args.infile}': {e.strerror or e}")
        return 1

    sink = None
    if args.trace_events:
        sink = TraceSink(path=args.trace_events)
        try:
            sink.open()
        except OSError as e:
            _close_input(infile)
            _log(f"Error: cannot open trace events '{args.trace_events}': {e.strerror or e}")
            return 1

    try:
        outfile = _open_output(args.outfile)
    except OSError as e:
        _close_input(infile)
        if sink:
            sink.close()
        _log(f"Error: cannot open output '{args.outfile}': {e.strerror or e}")
        return 1

    try:
        profile = build_profile(infile, config, sink)
        write_report(profile, outfile)
    finally:
        if sink:
            sink.close()
        _close_input(infile)
        if outfile is not sys.stdout:
            outfile.close()
        else:
            outfile.flush()

    m = profile.metrics
    if args.metrics:
        try:
            write_metrics(args.metrics, m)
        except OSError as e:
            _log(f"Error: cannot write metrics '{args.metrics}': {e.strerror or e}")
            return 1
    if args.verbose:
        _log(f"Read {m['lines']} lines: {m['records']} records, {m['resets']} resets, {m['skipped']} skipped")
        _log(f"Profiled {m['instruction_starts']} instructions, {m['total_cycles']} cycles, "
             f"{m['addresses']} addresses reported")
        if m["warmup_clamped"]:
            _log(f"First record clamped to {config.warmup_ticks} ticks (warm-up)")
        if args.metrics:
            _log(f"Metrics saved to '{args.metrics}'")
        if args.trace_events:
            _log(f"Record events written to '{args.trace_events}'")
    return 0


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="xrt-profile",
        description="Convert an XRoar instruction trace into a per-address JSON cycle profile",
    )
    p.add_argument("infile", nargs="?", help="Trace file (default: stdin)")
    p.add_argument("outfile", nargs="?", help="Profile JSON output (default: stdout)")
    p.add_argument("--ticks-per-cycle", type=_positive_int, default=TICKS_PER_CYCLE,
                   help=f"Trace timing ticks per CPU cycle (default {TICKS_PER_CYCLE})")
    p.add_argument("--warmup-threshold", type=int, default=WARMUP_THRESHOLD,
                   help=f"Clamp the first record when its dt exceeds this (default {WARMUP_THRESHOLD})")
    p.add_argument("--warmup-ticks", type=int, default=WARMUP_TICKS,
                   help=f"Ticks used for a clamped first record (default {WARMUP_TICKS})")
    p.add_argument("--metrics", help="Write run metrics JSON to file")
    p.add_argument("--trace-events", help="Write one JSON line per accepted trace record to file")
    p.add_argument("-v", "--verbose", action="store_true", help="Print a run summary to stderr")
    return p


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return cmd_profile(args)


if __name__ == "__main__":
    sys.exit(main())
