"""Run (history entry) domain model"""

from dataclasses import dataclass
from typing import Dict, Optional

SNAPSHOT_UNAVAILABLE = "(request snapshot unavailable for this run)"

# Snapshot fields shown in run details, in display order
_DETAIL_FIELDS = (
    "auth",
    "secret_ref",
    "auth_key_name",
    "auth_location",
    "auth_username",
    "header",
)


@dataclass(frozen=True)
class Run:
    """Immutable record of one send."""

    request_id: str
    request_name: str
    method: str
    url: str
    status_code: int = 0
    duration_ms: int = 0
    error: str = ""
    request_snapshot: str = ""
    response_body: str = ""
    created_at: str = ""
    id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return not self.error


def parse_snapshot(snapshot: str) -> tuple[Dict[str, str], str]:
    """Split a request snapshot into its ``key: value`` fields and body."""
    values: Dict[str, str] = {}
    head, _, body = snapshot.partition("\nbody:\n")

    for line in head.splitlines():
        key, colon, value = line.partition(": ")
        if colon:
            values[key] = value
    return values, body


def _meaningful(value: str) -> bool:
    return value not in ("", "none", "(none)")


def history_detail_text(run: Run) -> str:
    """Request + response text shown in the history detail pane."""
    if not run.request_snapshot:
        request_part = SNAPSHOT_UNAVAILABLE
    else:
        values, body = parse_snapshot(run.request_snapshot)
        lines = [
            "Request",
            f"method: {values.get('method') or run.method}",
            f"url: {values.get('url') or run.url}",
        ]
        for key in _DETAIL_FIELDS:
            value = values.get(key, "")
            if _meaningful(value):
                lines.append(f"{key}: {value}")
        lines.append("body:")
        request_part = "\n".join(lines) + "\n" + body

    return (
        f"{request_part}\n\n"
        "Response\n"
        f"error: {run.error or 'none'}\n"
        "body:\n"
        f"{run.response_body or '(empty)'}"
    )
