"""File-backed request storage: one JSON document per request."""

import json
import re
from dataclasses import replace
from pathlib import Path
from typing import List

from tuiman.core.models.request import Request, utc_timestamp
from tuiman.utils.errors import (
    InvalidRequestIdError,
    RequestNotFoundError,
    StorageError,
)
from tuiman.utils.logging import get_logger, log_call

logger = get_logger(__name__)

SAFE_ID = re.compile(r"^[A-Za-z0-9._-]+$")


def is_safe_id(request_id: str) -> bool:
    """Whether an id can be used directly as a file name."""
    return bool(request_id) and bool(SAFE_ID.match(request_id)) and request_id not in (".", "..")


def read_request_file(path: Path) -> Request:
    """Parse one request document.

    Raises:
        StorageError: If the file cannot be read or is not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageError(f"Failed to read {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise StorageError(f"Failed to read {path.name}: not a JSON object")
    return Request.from_dict(data)


def write_request_file(path: Path, request: Request) -> None:
    """Write a request document atomically."""
    temp_path = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(
            json.dumps(request.to_dict(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise StorageError(f"Failed to write {path.name}: {e}") from e


class RequestStore:
    """CRUD over ``<requests_dir>/<id>.json``."""

    def __init__(self, requests_dir: Path):
        self.requests_dir = requests_dir

    def _path_for(self, request_id: str) -> Path:
        if not is_safe_id(request_id):
            raise InvalidRequestIdError(
                f"Invalid request id: {request_id!r}", details={"id": request_id}
            )
        return self.requests_dir / f"{request_id}.json"

    @log_call
    def list(self) -> List[Request]:
        """All readable requests, sorted by name case-insensitively.

        Unreadable files are skipped.
        """
        if not self.requests_dir.exists():
            return []

        requests = []
        for path in sorted(self.requests_dir.glob("*.json")):
            try:
                requests.append(read_request_file(path))
            except StorageError as e:
                logger.warning(f"Skipping unreadable request file: {e}")

        requests.sort(key=lambda r: r.name.lower())
        return requests

    def load(self, request_id: str) -> Request:
        path = self._path_for(request_id)
        if not path.exists():
            raise RequestNotFoundError(
                f"Request not found: {request_id}", details={"id": request_id}
            )
        return read_request_file(path)

    @log_call
    def save(self, request: Request) -> Request:
        """Insert or overwrite by id, stamping ``updated_at``.

        Returns:
            Request: The stored copy.
        """
        stored = replace(request, updated_at=utc_timestamp())
        write_request_file(self._path_for(stored.id), stored)
        logger.info(f"Saved request {stored.id} ({stored.method} {stored.name})")
        return stored

    @log_call
    def delete(self, request_id: str) -> None:
        """Delete by id. A missing file counts as deleted."""
        path = self._path_for(request_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete request {request_id}: {e}") from e
        logger.info(f"Deleted request {request_id}")
