"""Encrypted file backend"""

import json
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from tuiman.utils.errors import (
    CorruptedSecretsError,
    EncryptionError,
    KeyStoreError,
    error_context,
)

from .base import BackendCapabilities, CredentialBackend


class EncryptedFileBackend(CredentialBackend):
    """Encrypted file backend (fallback).

    Secrets live in one Fernet-encrypted JSON document keyed by
    ``service:key``; the master key sits next to it with mode 600.
    """

    backend_id = "encrypted_file"

    def __init__(self, secrets_dir: Path):
        self._secrets_path = secrets_dir / "credentials.enc"
        self._master_key_path = secrets_dir / ".master.key"
        self._master_key: Optional[bytes] = None

    @property
    def name(self) -> str:
        return "Encrypted File"

    @property
    def priority(self) -> int:
        return 99  # Lowest priority (fallback)

    def is_available(self) -> bool:
        """Always available as fallback."""
        return True

    def store(self, service: str, key: str, value: str) -> None:
        credentials = self._load_credentials()
        credentials[f"{service}:{key}"] = value
        self._save_credentials(credentials)

    def retrieve(self, service: str, key: str) -> Optional[str]:
        return self._load_credentials().get(f"{service}:{key}")

    def delete(self, service: str, key: str) -> None:
        credentials = self._load_credentials()
        if credentials.pop(f"{service}:{key}", None) is not None:
            self._save_credentials(credentials)

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(supports_delete=True, supports_list=True)

    def _get_master_key(self) -> bytes:
        """Get or create master encryption key."""
        if self._master_key:
            return self._master_key

        with error_context("Loading master key", EncryptionError, catch=(OSError,)):
            self._master_key_path.parent.mkdir(parents=True, exist_ok=True)

            if self._master_key_path.exists():
                self._master_key = self._master_key_path.read_bytes()
            else:
                key = Fernet.generate_key()
                self._master_key_path.write_bytes(key)
                self._master_key_path.chmod(0o600)
                self._master_key = key

        return self._master_key

    def _load_credentials(self) -> dict:
        """Load and decrypt credentials."""
        if not self._secrets_path.exists():
            return {}

        with error_context("Reading secrets file", KeyStoreError, catch=(OSError,)):
            encrypted_data = self._secrets_path.read_bytes()
        if not encrypted_data:
            return {}

        try:
            decrypted = Fernet(self._get_master_key()).decrypt(encrypted_data)
        except (InvalidToken, ValueError) as e:
            raise EncryptionError("Failed to decrypt secrets file") from e

        try:
            credentials = json.loads(decrypted)
        except json.JSONDecodeError as e:
            raise CorruptedSecretsError("Secrets file does not contain valid JSON") from e

        if not isinstance(credentials, dict):
            raise CorruptedSecretsError("Secrets file has an unexpected layout")
        return credentials

    def _save_credentials(self, credentials: dict) -> None:
        """Encrypt and save credentials."""
        encrypted = Fernet(self._get_master_key()).encrypt(json.dumps(credentials).encode())

        # Atomic write
        temp_path = self._secrets_path.with_suffix(".tmp")
        with error_context("Writing secrets file", KeyStoreError, catch=(OSError,)):
            self._secrets_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(encrypted)
            temp_path.chmod(0o600)
            temp_path.replace(self._secrets_path)
