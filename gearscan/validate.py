import glob
import os
from typing import Dict, List

import orjson
from jsonschema import Draft202012Validator

from gearscan.config import DATA_DIR, SCHEMA_PATH

with open(SCHEMA_PATH, "rb") as schema_file:
    SCHEMA = orjson.loads(schema_file.read())
validator = Draft202012Validator(SCHEMA)


def record_errors(data: Dict) -> List[str]:
    issues = sorted(validator.iter_errors(data), key=lambda err: list(err.path))
    out = []
    for err in issues:
        location = " -> ".join([str(part) for part in err.path]) or "(root)"
        out.append(f"{location}: {err.message}")
    return out


def validate_dir(path: str) -> int:
    errors = 0
    for fp in sorted(glob.glob(os.path.join(path, "*.json"))):
        with open(fp, "rb") as handle:
            data = orjson.loads(handle.read())
        issues = record_errors(data)
        if issues:
            print(f"[FAIL] {fp}")
            for issue in issues:
                print(f"  - {issue}")
            errors += 1
        else:
            print(f"[OK] {fp}")
    return errors


if __name__ == "__main__":
    total = validate_dir(DATA_DIR)
    if total:
        raise SystemExit(1)
    print("[OK] All records validate.")
