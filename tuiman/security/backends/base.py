"""Base classes for secret store backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class BackendCapabilities:
    """Capabilities supported by backend."""

    supports_delete: bool = True
    supports_list: bool = False


class CredentialBackend(ABC):
    """Abstract base for credential storage backends."""

    # Identifier used by the `secrets.backend` config option
    backend_id: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name for display."""

    @property
    @abstractmethod
    def priority(self) -> int:
        """Priority for auto-selection (lower = higher priority)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if backend is usable on this system."""

    @abstractmethod
    def store(self, service: str, key: str, value: str) -> None:
        """Store credential.

        Args:
            service (str): The service name.
            key (str): The secret reference.
            value (str): The secret value.
        """

    @abstractmethod
    def retrieve(self, service: str, key: str) -> Optional[str]:
        """Retrieve credential.

        Args:
            service (str): The service name.
            key (str): The secret reference.

        Returns:
            Optional[str]: The secret value, or None if not found.
        """

    @abstractmethod
    def delete(self, service: str, key: str) -> None:
        """Delete credential. Deleting a missing reference is not an error."""

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities()
