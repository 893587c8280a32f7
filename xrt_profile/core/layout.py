# layout.py: fixed-column XRoar trace layout, address space and tick/cycle helpers

ADDR_BITS = 16
ADDR_SPACE = 1 << ADDR_BITS

# Columns of a trace line: "aaaa| hhhhhhhhhhhh<disassembly>  cc=...  dt=..."
ADDR_DIGITS = 4
SEPARATOR_COL = 4
SEPARATOR = "|"
HEX_COL = 6
DISASM_COL = 18

DISASM_MAX_RAW = 64
DISASM_PAD_WIDTH = 24
LINE_STORE_LIMIT = 128

RESET_MARKER = "[RESET]"
TICKS_TAG = "dt="
STOP_TAGS = ("cc=", "dt=")
TAG_GAP = "  "

# Timing: XRoar subdivides one CPU cycle into 16 ticks
TICKS_PER_CYCLE = 16
NO_TICKS = -1

# First-record warm-up correction
WARMUP_THRESHOLD = 512
WARMUP_TICKS = 16

HEX_DIGITS = "0123456789abcdefABCDEF"


def ticks_to_cycles(ticks: int, ticks_per_cycle: int = TICKS_PER_CYCLE) -> int:
    """Whole cycles for a tick delta; any positive delta costs at least one cycle."""
    if ticks <= 0:
        return 0
    cycles = ticks // ticks_per_cycle
    return cycles if cycles > 0 else 1
