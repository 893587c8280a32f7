# report.py: serialize an AddressProfile to the JSON array consumed by hot-spot viewers
import json
from typing import Iterator, TextIO

from .profile import AddressProfile, ProfileEntry


def format_entry(addr: int, entry: ProfileEntry) -> str:
    # "ac" always carries two decimals
    return '{"a":%d,"ic":%d,"ac":%.2f,"ins":%s}' % (
        addr, entry.total_cycles, entry.coverage_weight, json.dumps(entry.disassembly)
    )


def iter_report(profile: AddressProfile) -> Iterator[str]:
    """Report text in chunks: "[", one indented object per populated address, "]"."""
    yield "[\n"
    first = True
    for addr, entry in profile.reported():
        if not first:
            yield ",\n"
        yield "  " + format_entry(addr, entry)
        first = False
    if not first:
        yield "\n"
    yield "]\n"


def render_report(profile: AddressProfile) -> str:
    return "".join(iter_report(profile))


def write_report(profile: AddressProfile, out: TextIO):
    for chunk in iter_report(profile):
        out.write(chunk)
