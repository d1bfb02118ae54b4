"""System keyring backend"""

from typing import Optional

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from tuiman.utils.logging import get_logger

from .base import CredentialBackend

logger = get_logger(__name__)


class KeyringBackend(CredentialBackend):
    """System keyring backend (macOS Keychain, Secret Service, Windows Credential Manager)."""

    backend_id = "keyring"

    @property
    def name(self) -> str:
        return "System Keyring"

    @property
    def priority(self) -> int:
        return 1

    def is_available(self) -> bool:
        try:
            active = keyring.get_keyring()
        except KeyringError as e:
            logger.debug(f"Keyring availability check failed: {e}")
            return False

        if isinstance(active, fail.Keyring):
            logger.debug("Keyring has no usable backend")
            return False
        return True

    def store(self, service: str, key: str, value: str) -> None:
        keyring.set_password(service, key, value)

    def retrieve(self, service: str, key: str) -> Optional[str]:
        return keyring.get_password(service, key)

    def delete(self, service: str, key: str) -> None:
        try:
            keyring.delete_password(service, key)
        except PasswordDeleteError:
            logger.debug(f"Keyring had no entry to delete for key: {key}")
