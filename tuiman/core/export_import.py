"""Export and import of the request collection.

An export directory holds ``requests/<id>.json`` (same layout as the live
store) plus ``manifest.json``. Secret references are cleared on the way out.
"""

import json
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Iterable

from tuiman.core.models.request import Request, utc_timestamp
from tuiman.core.request_store import (
    RequestStore,
    is_safe_id,
    read_request_file,
    write_request_file,
)
from tuiman.utils.errors import (
    ExportImportError,
    InvalidRequestIdError,
    StorageError,
    TuimanError,
)
from tuiman.utils.logging import get_logger, log_call

logger = get_logger(__name__)

EXPORT_FORMAT = 1
MANIFEST_NAME = "manifest.json"
REQUESTS_SUBDIR = "requests"


@dataclass(frozen=True)
class ExportReport:
    destination: Path
    exported: int
    scrubbed_secret_refs: int


@dataclass(frozen=True)
class ImportReport:
    source: Path
    imported: int
    skipped: int


def default_export_dir(now: datetime | None = None) -> Path:
    """``./tuiman-export-YYYYmmdd-HHMMSS`` in local time."""
    now = now or datetime.now()
    return Path(f"./tuiman-export-{now.strftime('%Y%m%d-%H%M%S')}")


@log_call
def export_requests(requests: Iterable[Request], destination: Path) -> ExportReport:
    """Write every request plus a manifest under ``destination``.

    Raises:
        ExportImportError: If any file cannot be written.
    """
    target = destination / REQUESTS_SUBDIR
    exported = 0
    scrubbed = 0

    try:
        target.mkdir(parents=True, exist_ok=True)
        for request in requests:
            if not is_safe_id(request.id):
                logger.warning(f"Not exporting request with unusable id: {request.id!r}")
                continue
            if request.auth_secret_ref:
                scrubbed += 1
                request = replace(request, auth_secret_ref="")
            write_request_file(target / f"{request.id}.json", request)
            exported += 1

        manifest = {
            "format": EXPORT_FORMAT,
            "exported_at": utc_timestamp(),
            "request_count": exported,
            "secrets_included": False,
            "scrubbed_secret_refs": scrubbed,
        }
        (destination / MANIFEST_NAME).write_text(
            json.dumps(manifest, indent=2) + "\n", encoding="utf-8"
        )
    except (OSError, StorageError) as e:
        raise ExportImportError(f"Export to {destination} failed: {e}") from e

    logger.info(
        f"Exported {exported} requests to {destination} (scrubbed {scrubbed} secret refs)"
    )
    return ExportReport(destination, exported, scrubbed)


@log_call
def import_requests(store: RequestStore, source: Path) -> ImportReport:
    """Upsert every readable request file found in ``source/requests``.

    Raises:
        ExportImportError: If the directory is missing or a save fails.
    """
    folder = source / REQUESTS_SUBDIR
    if not folder.is_dir():
        raise ExportImportError(f"No requests folder in {source}")

    imported = 0
    skipped = 0
    for path in sorted(folder.glob("*.json")):
        try:
            request = read_request_file(path)
        except StorageError as e:
            logger.warning(f"Skipping unreadable import file: {e}")
            skipped += 1
            continue

        try:
            store.save(request)
        except InvalidRequestIdError as e:
            logger.warning(f"Skipping import file with unusable id: {path.name}: {e.message}")
            skipped += 1
            continue
        except TuimanError as e:
            raise ExportImportError(f"Import of {path.name} failed: {e.message}") from e
        imported += 1

    logger.info(f"Imported {imported} requests from {source} ({skipped} skipped)")
    return ImportReport(source, imported, skipped)
