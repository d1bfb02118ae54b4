"""JSON detection and formatting for edited request bodies."""

import json
from dataclasses import dataclass

from tuiman.utils.errors import InvalidJSONBodyError


@dataclass(frozen=True)
class BodyEdit:
    body: str
    formatted: bool = False


def looks_like_json(text: str) -> bool:
    """True when the first non-whitespace character opens an object or array."""
    stripped = text.lstrip()
    return stripped[:1] in ("{", "[")


def pretty_json(text: str) -> str:
    """Validate and pretty-print JSON with two-space indentation.

    Raises:
        InvalidJSONBodyError: With the parser's message and position.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJSONBodyError(
            f"{e.msg} (line {e.lineno}, column {e.colno})",
            details={"line": e.lineno, "column": e.colno},
        ) from e
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def apply_body_edit(edited: str) -> BodyEdit:
    """Turn editor output into the new body.

    JSON-looking text is reformatted or rejected; anything else is kept as is.
    """
    if looks_like_json(edited):
        return BodyEdit(body=pretty_json(edited), formatted=True)
    return BodyEdit(body=edited)
