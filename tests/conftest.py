"""
Shared test fixtures and configuration for pytest
"""
from typing import Optional

import pytest

from tuiman.core.database.history import HistoryLog
from tuiman.core.http_client import HttpResponse
from tuiman.core.models.request import Request
from tuiman.core.request_store import RequestStore
from tuiman.security.backends.base import CredentialBackend
from tuiman.security.key_store import KeyStore
from tuiman.tui.controllers import Services
from tuiman.tui.shell import AppShell
from tuiman.utils.paths import AppPaths


class InMemoryBackend(CredentialBackend):
    """Credential backend keeping secrets in a dict"""

    backend_id = "memory"

    def __init__(self):
        self.secrets = {}

    @property
    def name(self) -> str:
        return "In Memory"

    @property
    def priority(self) -> int:
        return 0

    def is_available(self) -> bool:
        return True

    def store(self, service: str, key: str, value: str) -> None:
        self.secrets[(service, key)] = value

    def retrieve(self, service: str, key: str) -> Optional[str]:
        return self.secrets.get((service, key))

    def delete(self, service: str, key: str) -> None:
        self.secrets.pop((service, key), None)


class FakeTransport:
    """Records sent requests and answers with a canned response"""

    def __init__(self, response: Optional[HttpResponse] = None):
        self.response = response or HttpResponse(
            status_code=200, duration_ms=12, body='{"ok": true}'
        )
        self.sent = []

    def send(self, request: Request) -> HttpResponse:
        self.sent.append(request)
        return self.response

    def close(self) -> None:
        pass


class FakeEditor:
    """Stands in for the external editor"""

    def __init__(self, result: str = "", error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls = []

    def edit(self, initial_text: str, suffix: str = ".txt") -> str:
        self.calls.append((initial_text, suffix))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def app_paths(tmp_path):
    """Application directories laid out under a temp root"""
    return AppPaths.under(tmp_path).ensure()


@pytest.fixture
def store(app_paths):
    return RequestStore(app_paths.requests_dir)


@pytest.fixture
def sample_requests(store):
    """Three stored requests; list order is Alpha, beta, Gamma"""
    requests = [
        Request(
            id="req-gamma",
            name="Gamma delete",
            method="DELETE",
            url="https://other.example.org/items/1",
        ),
        Request(
            id="req-alpha",
            name="Alpha users",
            method="GET",
            url="https://api.example.com/users",
        ),
        Request(
            id="req-beta",
            name="beta create",
            method="POST",
            url="https://api.example.com/items",
            body='{\n  "name": "widget"\n}',
            auth_type="bearer",
            auth_secret_ref="api-token",
        ),
    ]
    return [store.save(request) for request in requests]


@pytest.fixture
def history(app_paths):
    log = HistoryLog(app_paths.history_db_path)
    yield log
    log.close()


@pytest.fixture
def memory_backend():
    return InMemoryBackend()


@pytest.fixture
def secrets(memory_backend):
    keystore = KeyStore([memory_backend])
    keystore.initialise()
    return keystore


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def services(store, history, transport, secrets, editor):
    return Services(
        store=store,
        history=history,
        transport=transport,
        secrets=secrets,
        editor=editor,
    )


@pytest.fixture
def shell(services, sample_requests):
    """Shell started on a 120x40 terminal with the sample collection loaded"""
    app_shell = AppShell(services)
    app_shell.resize(120, 40)
    app_shell.startup()
    return app_shell


@pytest.fixture
def state(shell):
    return shell.state


@pytest.fixture
def press(shell):
    """Feed keys to the shell one at a time"""

    def _press(*keys):
        for key in keys:
            shell.handle_key(key)

    return _press
