# tests/helpers_imports.py
"""Exposes the project modules as attributes of `mod`: layout, parser, profile, report, observe, analyse, cli."""
import importlib

class _Mod:
    pass

mod = _Mod()

mod.layout = importlib.import_module('xrt_profile.core.layout')
mod.parser = importlib.import_module('xrt_profile.core.parser')
mod.profile = importlib.import_module('xrt_profile.core.profile')
mod.report = importlib.import_module('xrt_profile.core.report')
mod.observe = importlib.import_module('xrt_profile.core.observe')
mod.analyse = importlib.import_module('xrt_profile.tools.profile_analyse')
mod.cli = importlib.import_module('cli')


def trace_line(addr: int, hexbytes: str, disasm: str, dt=None, regs: str = "cc=.... a=00 b=00") -> str:
    """Build an XRoar-style line: address, "| ", hex bytes padded to column 18, disassembly, annotations."""
    line = f"{addr:04x}| {hexbytes:<12}{disasm:<16}  {regs}"
    if dt is not None:
        line += f"  dt={dt}"
    return line + "\n"
