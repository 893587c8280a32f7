# tests/test_profile_analyse.py
import json
import os
import subprocess
import sys
import pytest
from tests.helpers_imports import mod, trace_line

A = mod.analyse


def make_profile(tmp_path):
    trace = tmp_path / "trace.txt"
    trace.write_text("".join([
        trace_line(0x100, "a905", "LDA #$05", dt=32),
        trace_line(0x102, "b7ff20", "STA $FF20", dt=80),
        trace_line(0x102, "b7ff20", "STA $FF20", dt=80),
        trace_line(0x200, "39", "RTS", dt=80),
    ]), encoding="latin-1")
    out = tmp_path / "profile.json"
    assert mod.cli.main([str(trace), str(out)]) == 0
    return out


def test_analyze_summary(tmp_path):
    summary = A.analyze(str(make_profile(tmp_path)), top=2)
    assert summary["entries"] == 6
    assert summary["total_ic"] == 2 + 10 + 5
    assert summary["total_ac"] == pytest.approx(17.0, abs=0.02)
    assert [r["a"] for r in summary["top_instructions"]] == [0x102, 0x200]


def test_hot_ranges_merge_consecutive_addresses(tmp_path):
    summary = A.analyze(str(make_profile(tmp_path)))
    ranges = summary["hot_ranges"]
    assert ranges[0]["start"] == 0x100 and ranges[0]["end"] == 0x104
    assert ranges[0]["ac"] == pytest.approx(12.0, abs=0.02)
    assert ranges[0]["ic"] == 12
    assert ranges[1]["start"] == ranges[1]["end"] == 0x200


def test_print_summary(tmp_path, capsys):
    A.print_summary(A.analyze(str(make_profile(tmp_path))))
    out = capsys.readouterr().out
    assert "Top instructions:" in out
    assert "0102  ic=      10  STA $FF20" in out
    assert "0100 .. 0104" in out


def test_rejects_non_array(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"a": 1}), encoding="utf-8")
    with pytest.raises(ValueError):
        A.load_profile(str(p))


def test_main_prints_summary(tmp_path, capsys):
    assert A.main([str(make_profile(tmp_path)), "3"]) == 0
    assert "Hot ranges:" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [[], ["profile.json", "ten"], ["a", "b", "c"]])
def test_main_usage_errors(argv, capsys):
    assert A.main(argv) == 2
    assert capsys.readouterr().out.startswith("Usage:")


def test_module_without_arguments_exits_2():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    proc = subprocess.run(
        [sys.executable, "-m", "xrt_profile.tools.profile_analyse"],
        cwd=root, capture_output=True, text=True,
    )
    assert proc.returncode == 2
    assert proc.stdout.startswith("Usage: python -m xrt_profile.tools.profile_analyse")
