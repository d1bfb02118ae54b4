"""Centralized path definitions for the tuiman application.

This module provides a single source of truth for all application paths.
XDG base directory variables are honoured when set.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


# Base application directories
CONFIG_DIR = _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / "tuiman"
STATE_DIR = _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / "tuiman"
CACHE_DIR = _xdg_dir("XDG_CACHE_HOME", Path.home() / ".cache") / "tuiman"


@dataclass(frozen=True)
class AppPaths:
    """Resolved set of directories and files used by one process."""

    config_dir: Path = CONFIG_DIR
    state_dir: Path = STATE_DIR
    cache_dir: Path = CACHE_DIR

    @classmethod
    def under(cls, root: Path) -> "AppPaths":
        """Lay every directory out below a single root (used by tests and portable installs)."""
        return cls(
            config_dir=root / "config",
            state_dir=root / "state",
            cache_dir=root / "cache",
        )

    @property
    def requests_dir(self) -> Path:
        return self.config_dir / "requests"

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.json"

    @property
    def history_db_path(self) -> Path:
        return self.state_dir / "history.db"

    @property
    def logs_dir(self) -> Path:
        return self.state_dir / "logs"

    @property
    def secrets_dir(self) -> Path:
        return self.state_dir / "secrets"

    @property
    def master_key_path(self) -> Path:
        return self.secrets_dir / ".master.key"

    @property
    def credentials_path(self) -> Path:
        return self.secrets_dir / "credentials.enc"

    def ensure(self) -> "AppPaths":
        """Create every directory the application writes to.

        Raises:
            PathInitError: If a directory cannot be created.
        """
        from .errors import PathInitError

        for directory in (
            self.config_dir,
            self.requests_dir,
            self.state_dir,
            self.logs_dir,
            self.cache_dir,
        ):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PathInitError(
                    f"Failed to create directory {directory}: {e}",
                    details={"path": str(directory)},
                ) from e
        return self
