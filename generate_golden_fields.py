#!/usr/bin/env python3
"""
Generate out_stdout, state and slots for a golden YAML session file.
Usage: python generate_golden_fields.py path/to/golden.yaml [--slots MAT_A,MAT_C]
"""

import argparse
import os
import sys

import yaml

from calculator import run_text


def main(path, slot_names):
    if not os.path.exists(path):
        print("File not found:", path)
        return 2

    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}

    if "in_stdin" not in doc:
        print("No 'in_stdin' found in YAML, nothing to run")
        return 2

    cfg = dict(doc.get("config") or {})
    cfg.setdefault("banner", False)
    out, state, slots = run_text(doc["in_stdin"], cfg)

    target = doc.setdefault("out", {})
    target["out_stdout"] = out
    target["state"] = state
    if slot_names:
        snap = slots.snapshot()
        target["slots"] = {name: snap[name] for name in slot_names}

    # write back YAML (use block style where possible)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(doc, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    print(f"Updated {path} with out_stdout and state ({state}).")
    return 0


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Fill expected output of a golden session file")
    ap.add_argument("path", help="golden YAML file")
    ap.add_argument("--slots", default="", help="comma separated slot names to record, e.g. MAT_A,MAT_C")
    args = ap.parse_args()
    names = [n.strip() for n in args.slots.split(",") if n.strip()]
    sys.exit(main(args.path, names))
