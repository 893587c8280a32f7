# parser.py: classify XRoar trace lines and extract address, tick delta and disassembly
import re
from typing import Optional

from .layout import (
    ADDR_DIGITS,
    SEPARATOR_COL,
    SEPARATOR,
    HEX_COL,
    DISASM_COL,
    DISASM_MAX_RAW,
    DISASM_PAD_WIDTH,
    LINE_STORE_LIMIT,
    RESET_MARKER,
    TICKS_TAG,
    STOP_TAGS,
    TAG_GAP,
    NO_TICKS,
    HEX_DIGITS,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LINE_END = "\r\n"


class TraceRecord:
    """One accepted trace line: start address, raw tick delta and the line it came from."""

    def __init__(self, addr: int, ticks: int, line: str):
        self.addr = addr
        self.ticks = ticks
        self.line = line

    @property
    def disassembly(self) -> str:
        return extract_disassembly(self.line)

    @property
    def byte_span(self) -> int:
        return infer_byte_span(self.line)

    def __repr__(self):
        return f"TraceRecord(addr=0x{self.addr:04X}, ticks={self.ticks})"


def parse_address(line: str) -> Optional[int]:
    """Address of a trace-shaped line ("aaaa|..."), or None."""
    if len(line) <= SEPARATOR_COL or line[SEPARATOR_COL] != SEPARATOR:
        return None
    digits = line[:ADDR_DIGITS]
    if any(c not in HEX_DIGITS for c in digits):
        return None
    return int(digits, 16)


def is_reset(line: str) -> bool:
    return RESET_MARKER in line


def extract_ticks(line: str) -> int:
    """Integer following "dt=", 0 if nothing numeric follows, NO_TICKS if the tag is absent."""
    pos = line.find(TICKS_TAG)
    if pos == -1:
        return NO_TICKS
    m = _LEADING_INT.match(line, pos + len(TICKS_TAG))
    return int(m.group(1)) if m else 0


def _stops_at(src: str, i: int) -> bool:
    return i >= 2 and src[i - 2:i] == TAG_GAP and src[i:i + 3] in STOP_TAGS


def extract_disassembly(line: str) -> str:
    """Disassembly text from column 18 up to the register/timing annotations, trailing spaces trimmed."""
    src = line[DISASM_COL:]
    i = 0
    while i < len(src) and src[i] not in _LINE_END and i < DISASM_MAX_RAW:
        if _stops_at(src, i):
            i -= len(TAG_GAP)
            break
        i += 1
    return src[:i].rstrip(" ")


def infer_byte_span(line: str) -> int:
    """Opcode byte count: hex pairs between column 6 and the next space."""
    end = line.find(" ", HEX_COL)
    if end == -1:
        return 1
    return (end - HEX_COL) // 2


def format_listing(disassembly: str, cycles: int) -> str:
    text = f"{disassembly:<{DISASM_PAD_WIDTH}} ; ({cycles} cycles)"
    return text[:LINE_STORE_LIMIT - 1]


def parse_line(line: str) -> Optional[TraceRecord]:
    """TraceRecord for a valid trace line; None for anything else (including resets)."""
    if not line:
        return None
    addr = parse_address(line)
    if addr is None or is_reset(line):
        return None
    return TraceRecord(addr, extract_ticks(line), line)
