# xrt_profile/tools/profile_analyse.py
import json
import sys
from typing import List, Dict, Any, Optional


def load_profile(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a JSON array of profile entries")
    return rows


def hot_ranges(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Merge consecutive covered addresses into ranges, most expensive first."""
    ranges = []
    cur = None
    for row in sorted(rows, key=lambda r: r["a"]):
        addr = row["a"]
        ac = float(row.get("ac", 0.0))
        if ac <= 0:
            continue
        if cur is not None and addr == cur["end"] + 1:
            cur["end"] = addr
            cur["ac"] += ac
            cur["ic"] += row.get("ic", 0)
        else:
            cur = {"start": addr, "end": addr, "ac": ac, "ic": row.get("ic", 0)}
            ranges.append(cur)
    ranges.sort(key=lambda r: (-r["ac"], r["start"]))
    return ranges


def analyze(path: str, top: int = 10) -> Dict[str, Any]:
    rows = load_profile(path)
    by_ic = sorted((r for r in rows if r.get("ic", 0) > 0), key=lambda r: (-r["ic"], r["a"]))
    return {
        "entries": len(rows),
        "total_ic": sum(r.get("ic", 0) for r in rows),
        "total_ac": round(sum(float(r.get("ac", 0.0)) for r in rows), 2),
        "top_instructions": by_ic[:top],
        "hot_ranges": hot_ranges(rows)[:top],
    }


def print_summary(summary: Dict[str, Any]):
    print(f"Entries: {summary['entries']}  total ic={summary['total_ic']}  total ac={summary['total_ac']:.2f}")
    print("Top instructions:")
    for r in summary["top_instructions"]:
        print(f"  {r['a']:04X}  ic={r['ic']:>8d}  {r.get('ins', '').rstrip()}")
    print("Hot ranges:")
    print("        ac  from .. to")
    for r in summary["hot_ranges"]:
        print(f"  {r['ac']:8.2f}  {r['start']:04X} .. {r['end']:04X}")


USAGE = "Usage: python -m xrt_profile.tools.profile_analyse <profile.json> [top]"


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or len(argv) > 2:
        print(USAGE)
        return 2
    try:
        top = int(argv[1]) if len(argv) > 1 else 10
    except ValueError:
        print(USAGE)
        return 2
    print_summary(analyze(argv[0], top))
    return 0


if __name__ == "__main__":
    sys.exit(main())
