#!/usr/bin/env python3
"""
Validate an exported results JSONL file with the same checks as `ptex qc`.

Usage:
  python scripts/validate_jsonl.py --jsonl outputs/proceedings_results.jsonl \
                                   --schema schema/paper-result.json
Exit code 0 on success; non-zero if any line fails.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from src.texcore.io import read_jsonl
from src.texcore.qc import DEFAULT_SCHEMA_PATH, validate_result


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--jsonl", type=Path, required=True)
    ap.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA_PATH)
    args = ap.parse_args(argv)

    total = 0
    failures = 0
    for i, obj in enumerate(read_jsonl(args.jsonl), start=1):
        total += 1
        errors = validate_result(obj, args.schema)
        if errors:
            failures += 1
            print(f"❌ line {i}:")
            for e in errors:
                print(f"  - {e}")

    if failures:
        print(f"\n{failures}/{total} lines failed.")
        return 1
    print(f"✅ All {total} lines passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
