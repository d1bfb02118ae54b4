"""Request domain model"""

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class AuthType(Enum):
    """Supported authentication schemes."""

    NONE = "none"
    BEARER = "bearer"
    JWT = "jwt"
    API_KEY = "api_key"
    BASIC = "basic"

    @classmethod
    def from_string(cls, value: str) -> "AuthType":
        """Parse a user-typed auth type; anything unknown means no auth."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NONE


class AuthLocation(Enum):
    """Where an api_key credential is attached."""

    HEADER = "header"
    QUERY = "query"

    @classmethod
    def from_string(cls, value: str) -> "AuthLocation":
        if value.strip().lower() == cls.QUERY.value:
            return cls.QUERY
        return cls.HEADER


def generate_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format a moment (default now) as ``YYYY-mm-ddTHH:MM:SSZ``."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def guess_name(method: str, url: str) -> str:
    """Derive a display name from method and url."""
    method = method or "GET"
    if url:
        return f"{method} {url}"
    return f"{method} request"


@dataclass(frozen=True)
class AuthDescriptor:
    """Resolved view of a request's auth settings. Holds no secret values."""

    type: AuthType = AuthType.NONE
    secret_ref: str = ""
    key_name: str = ""
    location: AuthLocation = AuthLocation.HEADER
    username: str = ""


@dataclass
class Request:
    """A named HTTP call template.

    Fields are plain strings so the editor can hold partially typed values;
    ``auth`` gives the parsed view used when sending.
    """

    id: str = field(default_factory=generate_id)
    name: str = "New Request"
    method: str = "GET"
    url: str = ""
    header_key: str = ""
    header_value: str = ""
    body: str = ""
    auth_type: str = AuthType.NONE.value
    auth_secret_ref: str = ""
    auth_key_name: str = ""
    auth_location: str = ""
    auth_username: str = ""
    updated_at: str = ""

    @property
    def auth(self) -> AuthDescriptor:
        return AuthDescriptor(
            type=AuthType.from_string(self.auth_type),
            secret_ref=self.auth_secret_ref.strip(),
            key_name=self.auth_key_name.strip(),
            location=AuthLocation.from_string(self.auth_location),
            username=self.auth_username,
        )

    @property
    def has_header(self) -> bool:
        return bool(self.header_key)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Request":
        """Build a request from stored JSON, tolerating missing or null keys.

        A missing id gets a fresh one.
        """
        known = {f.name for f in fields(cls)}
        values = {
            key: str(value)
            for key, value in data.items()
            if key in known and value is not None
        }
        if not values.get("id"):
            values["id"] = generate_id()
        return cls(**values)

    def snapshot_text(self) -> str:
        """Point-in-time text rendering stored alongside each run."""
        header = (
            f"{self.header_key}: {self.header_value}" if self.header_key else "none"
        )
        lines = [
            f"name: {self.name or '(unnamed)'}",
            f"method: {self.method or 'GET'}",
            f"url: {self.url or '(empty)'}",
            f"auth: {self.auth_type or 'none'}",
            f"secret_ref: {self.auth_secret_ref or '(none)'}",
            f"auth_key_name: {self.auth_key_name or '(none)'}",
            f"auth_location: {self.auth_location or '(none)'}",
            f"auth_username: {self.auth_username or '(none)'}",
            f"header: {header}",
            "body:",
        ]
        return "\n".join(lines) + "\n" + self.body
