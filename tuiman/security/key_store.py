"""Secret store with pluggable backends.

Requests only carry an opaque secret reference; the value behind it lives
in whichever backend the KeyStore selected and is resolved at send time.
"""

from typing import Optional, Sequence

from tuiman.utils.errors import KeyStoreError, TuimanError
from tuiman.utils.logging import get_logger

from .backends.base import CredentialBackend

logger = get_logger(__name__)


class KeyStore:
    """
    Simplified key store with pluggable backends.

    Selects the first available backend in priority order unless a
    specific one is requested.
    """

    def __init__(
        self,
        backends: Sequence[CredentialBackend],
        service_name: str = "tuiman",
        preferred: str = "auto",
    ):
        self.service_name = service_name
        self._backends = sorted(backends, key=lambda b: b.priority)
        self._preferred = preferred
        self.backend: Optional[CredentialBackend] = None

    def initialise(self) -> None:
        """Initialise key store with best available backend."""
        if self.backend is not None:
            return

        self.backend = self._select_backend()
        logger.info(f"KeyStore initialised with backend: {self.backend.name}")

    def _select_backend(self) -> CredentialBackend:
        candidates = self._backends
        if self._preferred != "auto":
            candidates = [b for b in self._backends if b.backend_id == self._preferred]
            if not candidates:
                raise KeyStoreError(f"Unknown secret backend: {self._preferred}")

        for backend in candidates:
            if backend.is_available():
                logger.debug(f"Selected backend: {backend.name}")
                return backend
            logger.debug(f"Backend {backend.name} not available")

        raise KeyStoreError("No credential backend available")

    def _ensure_backend(self) -> CredentialBackend:
        if self.backend is None:
            self.initialise()
        if self.backend is None:
            raise KeyStoreError("Secret store has no backend")
        return self.backend

    def store(self, key: str, value: str) -> None:
        """Store a secret under the given reference."""
        backend = self._ensure_backend()

        try:
            backend.store(self.service_name, key, value)
        except TuimanError:
            raise
        except Exception as e:
            raise KeyStoreError(
                f"Failed to store secret: {str(e)}",
                details={"key": key, "backend": backend.name},
            ) from e

        logger.info(f"Stored secret for reference: {key}")

    def retrieve(self, key: str) -> Optional[str]:
        """Retrieve the secret behind a reference, or None if it was never stored."""
        backend = self._ensure_backend()

        try:
            value = backend.retrieve(self.service_name, key)
        except TuimanError:
            raise
        except Exception as e:
            raise KeyStoreError(
                f"Failed to retrieve secret: {str(e)}",
                details={"key": key, "backend": backend.name},
            ) from e

        if value is None:
            logger.debug(f"Secret not found for reference: {key}")
        return value

    def delete(self, key: str) -> None:
        """Delete a secret. Missing references are ignored."""
        backend = self._ensure_backend()

        if not backend.get_capabilities().supports_delete:
            raise KeyStoreError(f"Backend {backend.name} does not support delete")

        try:
            backend.delete(self.service_name, key)
        except TuimanError:
            raise
        except Exception as e:
            raise KeyStoreError(
                f"Failed to delete secret: {str(e)}",
                details={"key": key, "backend": backend.name},
            ) from e

        logger.info(f"Deleted secret for reference: {key}")

    @property
    def backend_name(self) -> str:
        return self.backend.name if self.backend else "not initialised"
