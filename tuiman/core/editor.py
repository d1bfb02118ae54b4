"""External text editor integration."""

import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from tuiman.utils.errors import EditorError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_EDITOR = "vi"


class ExternalEditor:
    """Round-trips text through the user's editor via a temp file."""

    def __init__(self, command: Optional[str] = None, temp_dir: Optional[Path] = None):
        self.command = command or ""
        self.temp_dir = temp_dir

    def resolve_command(self) -> List[str]:
        """Configured command, else $VISUAL, else $EDITOR, else vi."""
        for candidate in (
            self.command,
            os.environ.get("VISUAL", ""),
            os.environ.get("EDITOR", ""),
        ):
            if candidate and candidate.strip():
                return shlex.split(candidate)
        return [FALLBACK_EDITOR]

    def edit(self, initial_text: str, suffix: str = ".txt") -> str:
        """Open ``initial_text`` in the editor and return the saved result.

        Raises:
            EditorError: If the editor cannot start, exits non-zero, or the
                file cannot be read back.
        """
        try:
            fd, name = tempfile.mkstemp(
                prefix="tuiman-edit-", suffix=suffix, dir=self.temp_dir
            )
        except OSError as e:
            raise EditorError(f"Could not create temp file: {e}") from e

        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(initial_text)

            command = [*self.resolve_command(), str(path)]
            logger.debug(f"Launching editor: {command[0]}")
            try:
                result = subprocess.run(command, check=False)
            except OSError as e:
                raise EditorError(f"Could not launch editor {command[0]}: {e}") from e

            if result.returncode != 0:
                raise EditorError(f"Editor exited with status {result.returncode}")

            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise EditorError(f"Could not read edited file: {e}") from e
        finally:
            path.unlink(missing_ok=True)
