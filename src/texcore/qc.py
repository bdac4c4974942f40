from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from .latex import parse_paperentry

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schema" / "paper-result.json"


def _load_schema(schema_path: Path) -> Dict[str, Any]:
    with schema_path.open(encoding="utf-8") as f:
        return json.load(f)


def extra_checks(obj: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if obj.get("status") == "success" and isinstance(obj.get("content"), str):
        try:
            parse_paperentry(obj["content"])
        except ValueError as e:
            errors.append(f"content is not a valid paperentry block: {e}")
    if obj.get("status") in ("pending", "processing"):
        errors.append(f"result left unfinished (status={obj['status']})")
    return errors


def validate_result(obj: Dict[str, Any], schema_path: Path | None = None) -> List[str]:
    """Return a list of error messages; empty list means valid."""
    schema = _load_schema(schema_path or DEFAULT_SCHEMA_PATH)
    validator = Draft202012Validator(schema)

    errors: List[str] = [e.message for e in validator.iter_errors(obj)]
    errors.extend(extra_checks(obj))
    return errors
