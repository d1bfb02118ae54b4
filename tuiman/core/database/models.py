"""SQLAlchemy table definitions."""

from sqlalchemy import CheckConstraint, Column, Index, Integer, String, Table, Text

from tuiman.core.database.base import metadata

runs_table = Table(
    "runs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("request_id", String(64), nullable=False),
    Column("request_name", Text, nullable=False, default="", server_default=""),
    Column("method", String(16), nullable=False),
    Column("url", Text, nullable=False, default="", server_default=""),
    Column("status_code", Integer, nullable=False, default=0, server_default="0"),
    Column("duration_ms", Integer, nullable=False, default=0, server_default="0"),
    Column("error", Text, nullable=False, default="", server_default=""),
    Column("request_snapshot", Text, nullable=False, default="", server_default=""),
    Column("response_body", Text, nullable=False, default="", server_default=""),
    Column("created_at", String(20), nullable=False),  # YYYY-mm-ddTHH:MM:SSZ
    CheckConstraint("duration_ms >= 0", name="duration_non_negative"),
    Index("ix_runs_request_id", "request_id"),
    Index("ix_runs_created_at", "created_at"),
)
