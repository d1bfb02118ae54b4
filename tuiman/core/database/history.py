"""Append-only run history."""

from pathlib import Path
from typing import List

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError

from tuiman.core.database.base import create_engine, metadata
from tuiman.core.database.models import runs_table
from tuiman.core.models.request import utc_timestamp
from tuiman.core.models.run import Run
from tuiman.utils.errors import (
    DatabaseConnectionError,
    DatabaseError,
    HistoryWriteError,
)
from tuiman.utils.logging import get_logger, log_call

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 500


class HistoryLog:
    """Run history backed by the ``runs`` table.

    Runs are only ever appended; listing returns newest first.
    """

    def __init__(self, db_path: Path, echo: bool = False):
        self.db_path = db_path
        try:
            self.engine = create_engine(db_path, echo=echo)
            metadata.create_all(self.engine)
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseConnectionError(
                f"Failed to open history database {db_path}: {e}",
                details={"path": str(db_path)},
            ) from e

    @log_call
    def append(self, run: Run) -> Run:
        """Persist a run and return it with its assigned id."""
        values = self._run_to_row(run)
        values["created_at"] = run.created_at or utc_timestamp()

        try:
            with self.engine.begin() as conn:
                result = conn.execute(insert(runs_table).values(**values))
                run_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            raise HistoryWriteError(f"Failed to record run: {e}") from e

        logger.debug(f"Recorded run {run_id} for request {run.request_id}")
        return Run(**{**values, "id": run_id})

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Run]:
        """Most recent runs first."""
        query = select(runs_table).order_by(runs_table.c.id.desc()).limit(limit)

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).mappings().all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load history: {e}") from e

        return [self._row_to_run(row) for row in rows]

    def close(self) -> None:
        self.engine.dispose()

    @staticmethod
    def _run_to_row(run: Run) -> dict:
        return {
            "request_id": run.request_id,
            "request_name": run.request_name,
            "method": run.method,
            "url": run.url,
            "status_code": run.status_code,
            "duration_ms": max(0, run.duration_ms),
            "error": run.error,
            "request_snapshot": run.request_snapshot,
            "response_body": run.response_body,
        }

    @staticmethod
    def _row_to_run(row) -> Run:
        return Run(
            id=row["id"],
            request_id=row["request_id"],
            request_name=row["request_name"] or "",
            method=row["method"],
            url=row["url"] or "",
            status_code=row["status_code"] or 0,
            duration_ms=row["duration_ms"] or 0,
            error=row["error"] or "",
            request_snapshot=row["request_snapshot"] or "",
            response_body=row["response_body"] or "",
            created_at=row["created_at"],
        )
