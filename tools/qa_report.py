#!/usr/bin/env python3
import glob
import os
import re
import sys
from collections import Counter, defaultdict

import orjson

from gearscan.config import DATA_DIR
from gearscan.validate import record_errors

value_re = re.compile(r"^\d+(?:\.\d+)?%?$")
SHOWN_SUBSTATS = 4


def _key(stat):
    return (str(stat.get("name", "")).lower(), str(stat.get("value", "")))


def soft_checks(obj):
    issues = []
    main = obj.get("main_stat")
    subs = obj.get("substats") or []

    if main is None:
        issues.append("main_stat missing")
    elif not value_re.match(str(main.get("value", ""))):
        issues.append(f"main_stat value not numeric: {main.get('value')}")

    # main stat bleeding into the substat list
    if main is not None and any(_key(s) == _key(main) for s in subs):
        issues.append(f"main stat repeated in substats: {main.get('name')} {main.get('value')}")

    for idx, s in enumerate(subs):
        if not value_re.match(str(s.get("value", ""))):
            issues.append(f"substats[{idx}] value not numeric: {s.get('value')}")

    seen = Counter(_key(s) for s in subs)
    dups = [f"{n} {v}" for (n, v), count in seen.items() if count > 1]
    if dups:
        issues.append(f"duplicate substats: {dups}")

    if len(subs) > SHOWN_SUBSTATS:
        issues.append(f"{len(subs)} substats read (a piece rolls at most {SHOWN_SUBSTATS})")
    if not subs:
        issues.append("no substats read")

    if not obj.get("set_name"):
        issues.append("set_name unresolved")

    return issues


def main(items_dir=DATA_DIR):
    files = sorted(glob.glob(os.path.join(items_dir, "*.json")))
    id_counter = Counter()
    slot_counter = Counter()
    hard_errs = 0

    per_file = defaultdict(list)

    for fp in files:
        with open(fp, "rb") as handle:
            data = orjson.loads(handle.read())
        id_counter[data.get("id", "")] += 1
        slot_counter[(data.get("game"), data.get("slot"))] += 1

        errs = record_errors(data)
        if errs:
            hard_errs += 1
            for e in errs:
                per_file[fp].append(f"SCHEMA: {e}")

        for m in soft_checks(data):
            per_file[fp].append(f"CHECK: {m}")

    dups = [item_id for item_id, count in id_counter.items() if count > 1]
    if dups:
        print("ERROR duplicate IDs:", dups)
    crowded = [f"{game}/{slot} x{count}" for (game, slot), count in slot_counter.items() if count > 1]
    if crowded:
        print("WARN several records share a slot:", crowded[:10], "(+ more)" if len(crowded) > 10 else "")

    for fp, msgs in per_file.items():
        if msgs:
            print(f"\n{fp}")
            for m in msgs:
                print("  -", m)

    soft_files = sum(1 for messages in per_file.values() if messages)
    print(f"\nFiles: {len(files)} | schema-bad: {hard_errs} | files-with-issues: {soft_files}")
    return hard_errs


if __name__ == "__main__":
    if main(sys.argv[1] if len(sys.argv) > 1 else DATA_DIR):
        raise SystemExit(1)
