"""Golden-test runner for calculator sessions.

Each golden YAML record feeds `in_stdin` to the calculator and compares the
produced stdout, the final run state and (optionally) slot contents against
the expectations in the record.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import pytest

import calculator
from calculator import run_text

_WS_RE = re.compile(r"[ \t]+")


def normalize(text: str) -> str:
    """Collapse runs of spaces/tabs and strip line ends.

    Column padding of printed matrices is covered by unit tests, golden
    files only pin down the content.
    """
    lines = [_WS_RE.sub(" ", line).rstrip() for line in text.strip("\n").split("\n")]
    return "\n".join(lines)


@pytest.mark.golden_test("golden/*.yaml")
def test_calculator_session(golden: Any, tmp_path: Path) -> None:
    """Run one golden record and compare stdout, state and slots."""
    calculator.init_logging(logfile=str(tmp_path / "calculator.log"), debug=True, console=False)

    cfg = dict(golden.get("config") or {})
    cfg.setdefault("banner", False)

    out, state, slots = run_text(golden.get("in_stdin", ""), cfg)

    root = logging.getLogger()
    for h in list(root.handlers):
        h.close()
        root.removeHandler(h)

    expect = golden.get("out") or {}

    def _mismatch(msg_title: str, got_text: str, expected_text: str) -> str:
        return f"{msg_title}\n--- got ---\n{got_text}\n--- expected ---\n{expected_text}"

    if "out_stdout" in expect:
        got = normalize(out)
        exp = normalize(expect["out_stdout"])
        if got != exp:
            raise AssertionError(_mismatch("stdout mismatch", got, exp))

    if "state" in expect:
        assert state == expect["state"], f"state mismatch: got {state} expected {expect['state']}"

    for name, rows in (expect.get("slots") or {}).items():
        actual = [v for row in slots.by_name(name) for v in row]
        expected = [float(v) for row in rows for v in row]
        assert actual == pytest.approx(expected), f"{name} mismatch: got {actual} expected {expected}"

    assert (tmp_path / "calculator.log").exists()
