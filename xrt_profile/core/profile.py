# profile.py: per-address execution profile over the 16-bit address space
from typing import Iterable, Iterator, List, Optional, Tuple

from .layout import (
    ADDR_SPACE,
    TICKS_PER_CYCLE,
    WARMUP_THRESHOLD,
    WARMUP_TICKS,
    TICKS_TAG,
    ticks_to_cycles,
)
from .observe import TraceSink
from .parser import TraceRecord, parse_address, is_reset, parse_line, format_listing


class ProfileConfig:
    """Timing constants for one trace source."""

    def __init__(
        self,
        ticks_per_cycle: int = TICKS_PER_CYCLE,
        warmup_threshold: int = WARMUP_THRESHOLD,
        warmup_ticks: int = WARMUP_TICKS,
    ):
        if ticks_per_cycle < 1:
            raise ValueError(f"ticks_per_cycle must be >= 1 (got {ticks_per_cycle})")
        self.ticks_per_cycle = ticks_per_cycle
        self.warmup_threshold = warmup_threshold
        self.warmup_ticks = warmup_ticks


class ProfileEntry:
    __slots__ = ("seeded", "disassembly", "byte_span", "base_cycle_cost", "total_cycles", "coverage_weight")

    def __init__(self):
        self.seeded = False
        self.disassembly = ""
        self.byte_span = 0
        self.base_cycle_cost = 0
        self.total_cycles = 0
        self.coverage_weight = 0.0

    def reported(self) -> bool:
        return self.total_cycles > 0 or self.coverage_weight > 0

    def __repr__(self):
        return (f"ProfileEntry(span={self.byte_span}, ic={self.total_cycles}, "
                f"ac={self.coverage_weight:.2f}, ins={self.disassembly!r})")


class AddressProfile:
    """
    Fixed table of 65536 entries, one per address.
    Lines are folded in with feed()/feed_lines(); normalise() spreads each
    start address's cycles over the bytes of its instruction.
    """

    def __init__(self, config: Optional[ProfileConfig] = None, trace_sink=None):
        self.config = config or ProfileConfig()
        self.entries: List[ProfileEntry] = [ProfileEntry() for _ in range(ADDR_SPACE)]
        self.trace_sink = trace_sink    # type: Optional[TraceSink]
        self._first_record = True
        self._normalised = False
        self.metrics = {
            "lines": 0,
            "records": 0,
            "resets": 0,
            "skipped": 0,
            "unannotated": 0,
            "warmup_clamped": False,
            "addresses": 0,
            "instruction_starts": 0,
            "total_cycles": 0,
        }

    def __getitem__(self, addr: int) -> ProfileEntry:
        return self.entries[addr]

    # -----------------------------------------------------------------------
    # Parse pass
    # -----------------------------------------------------------------------
    def cycles_for(self, record: TraceRecord) -> Tuple[int, bool]:
        """Normalized cycles for a record, applying the one-off warm-up clamp to the first record of the run."""
        ticks = record.ticks
        clamped = False
        if self._first_record:
            self._first_record = False
            if ticks > self.config.warmup_threshold:
                ticks = self.config.warmup_ticks
                clamped = True
        return ticks_to_cycles(ticks, self.config.ticks_per_cycle), clamped

    def add(self, record: TraceRecord) -> int:
        cycles, clamped = self.cycles_for(record)
        entry = self.entries[record.addr]
        entry.total_cycles += cycles
        first_seen = not entry.seeded
        if first_seen:
            entry.seeded = True
            entry.byte_span = record.byte_span
            entry.base_cycle_cost = cycles
            entry.disassembly = format_listing(record.disassembly, cycles)

        self.metrics["records"] += 1
        self.metrics["total_cycles"] += cycles
        if TICKS_TAG not in record.line:
            self.metrics["unannotated"] += 1
        if first_seen:
            self.metrics["instruction_starts"] += 1
        if clamped:
            self.metrics["warmup_clamped"] = True

        if self.trace_sink:
            self.trace_sink.emit({
                "addr": record.addr,
                "ticks": record.ticks,
                "cycles": cycles,
                "first_seen": first_seen,
                "warmup_clamped": clamped,
            })
        return cycles

    def feed(self, line: str) -> Optional[TraceRecord]:
        self.metrics["lines"] += 1
        record = parse_line(line)
        if record is None:
            if line and parse_address(line) is not None and is_reset(line):
                self.metrics["resets"] += 1
            else:
                self.metrics["skipped"] += 1
            return None
        self.add(record)
        return record

    def feed_lines(self, lines: Iterable[str]):
        for line in lines:
            self.feed(line)

    # -----------------------------------------------------------------------
    # Normalise pass
    # -----------------------------------------------------------------------
    def normalise(self):
        """Spread total_cycles of every start address evenly over its byte span, dropping bytes past 0xFFFF."""
        if self._normalised:
            return
        self._normalised = True
        for addr, entry in enumerate(self.entries):
            if entry.total_cycles <= 0:
                continue
            span = max(entry.byte_span, 1)
            spread = entry.total_cycles / span
            for k in range(span):
                if addr + k < ADDR_SPACE:
                    self.entries[addr + k].coverage_weight += spread
        self.metrics["addresses"] = sum(1 for e in self.entries if e.reported())

    def reported(self) -> Iterator[Tuple[int, ProfileEntry]]:
        """(address, entry) pairs that belong in the report, ascending by address."""
        for addr, entry in enumerate(self.entries):
            if entry.reported():
                yield addr, entry


def build_profile(lines: Iterable[str], config: Optional[ProfileConfig] = None, trace_sink=None) -> AddressProfile:
    profile = AddressProfile(config, trace_sink)
    profile.feed_lines(lines)
    profile.normalise()
    return profile
