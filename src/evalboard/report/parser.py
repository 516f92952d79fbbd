from __future__ import annotations

import json
from typing import Any

from evalboard.errors import ParseError
from evalboard.report.schema import REQUIRED_KEYS, ReportDocument

NOT_JSON_MESSAGE = "not valid JSON or JSON-Lines"
MISSING_FIELDS_MESSAGE = "missing required fields"


def validate_report(obj: Any) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise ParseError("report must be a JSON object")

    missing = [k for k in REQUIRED_KEYS if obj.get(k) in (None, "")]
    if missing:
        raise ParseError(f"{MISSING_FIELDS_MESSAGE}: {', '.join(missing)}")
    return obj


def parse_report_text(text: str) -> dict[str, Any]:
    """
    Parse raw file text into a validated report object.

    Whole-text JSON is tried first. Otherwise each non-blank line (trailing
    comma stripped) is tried as JSON and the first line that validates wins.
    Only that one line is used: a file holds one report, even in JSON-Lines.
    """
    text = text.lstrip("\ufeff").strip()
    parsed_any = False
    last_error: ParseError | None = None

    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        pass
    else:
        parsed_any = True
        try:
            return validate_report(obj)
        except ParseError as e:
            last_error = e

    for line in text.split("\n"):
        line = line.strip()
        if line.endswith(","):
            line = line[:-1]
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        parsed_any = True
        try:
            return validate_report(obj)
        except ParseError as e:
            last_error = e

    if parsed_any and last_error is not None:
        raise last_error
    raise ParseError(NOT_JSON_MESSAGE)


def parse_report(text: str) -> ReportDocument:
    return ReportDocument.from_json_dict(parse_report_text(text))
