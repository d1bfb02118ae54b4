"""Collaborators and behaviour shared by the screen controllers."""

from dataclasses import dataclass, replace
from typing import Optional, Protocol

from tuiman.core.database.history import DEFAULT_LIST_LIMIT, HistoryLog
from tuiman.core.http_client import HttpTransport
from tuiman.core.models.request import Request, utc_timestamp
from tuiman.core.models.run import Run
from tuiman.core.request_store import RequestStore
from tuiman.security.key_store import KeyStore
from tuiman.tui.state import (
    AppState,
    Draft,
    DraftField,
    DRAFT_FIELDS,
    EditorNormal,
    LastResponse,
    MainNormal,
    ScreenName,
)
from tuiman.utils.errors import TuimanError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)


class TextEditor(Protocol):
    def edit(self, initial_text: str, suffix: str = ".txt") -> str: ...


@dataclass
class Services:
    """External collaborators the screens call into."""

    store: RequestStore
    history: HistoryLog
    transport: HttpTransport
    secrets: KeyStore
    editor: TextEditor
    history_limit: int = DEFAULT_LIST_LIMIT


class ScreenController:
    """Mode-based key handler for one screen."""

    def __init__(self, state: AppState, services: Services):
        self.state = state
        self.services = services

    def handle_key(self, key: str) -> None:
        raise NotImplementedError

    ## Shared operations

    def reload_requests(self, select_id: Optional[str] = None) -> bool:
        """Reload the collection and re-apply the current filter.

        The previous collection is kept when the store cannot be read.
        """
        try:
            requests = self.services.store.list()
        except TuimanError as e:
            logger.error(f"Failed to load requests: {e.message}")
            self.state.set_error(f"Failed to load requests: {e.message}")
            return False

        self.state.requests = requests
        self.state.index.apply(requests, preferred_select_id=select_id)
        self.state.scroll.request_body = 0
        return True

    def open_editor(self, request: Request, existing: bool, focus: DraftField) -> None:
        """Enter the editor screen on a copy of ``request``."""
        self.state.draft = Draft(
            request=replace(request),
            existing=existing,
            field_index=DRAFT_FIELDS.index(focus),
            mode=EditorNormal(),
        )
        self.state.screen = ScreenName.EDITOR
        self.state.clear_status()

    def return_to_main(self) -> None:
        self.state.screen = ScreenName.MAIN
        self.state.main_mode = MainNormal()
        self.state.chords.reset()

    def send_and_record(self, request: Request) -> None:
        """Send synchronously, remember the response and append a run."""
        response = self.services.transport.send(request)

        self.state.last_response = LastResponse(
            request_id=request.id,
            request_name=request.name,
            method=request.method,
            url=request.url,
            at=utc_timestamp(),
            status_code=response.status_code,
            duration_ms=response.duration_ms,
            error=response.error,
            body=response.body,
        )
        self.state.scroll.response_body = 0

        run = Run(
            request_id=request.id,
            request_name=request.name,
            method=request.method,
            url=request.url,
            status_code=response.status_code,
            duration_ms=response.duration_ms,
            error=response.error,
            request_snapshot=request.snapshot_text(),
            response_body=response.body,
            created_at=self.state.last_response.at,
        )
        try:
            self.services.history.append(run)
        except TuimanError as e:
            logger.error(f"Failed to record run for {request.id}: {e.message}")
            self.state.set_error(f"Failed to record run: {e.message}")
            return

        if response.ok:
            self.state.set_status("Request sent")
        else:
            self.state.set_error(f"Request failed: {response.error or 'unknown error'}")

    def edit_text(self, text: str, suffix: str) -> Optional[str]:
        """Run the external editor; None when it failed or was aborted."""
        try:
            return self.services.editor.edit(text, suffix)
        except TuimanError as e:
            logger.warning(f"External editor failed: {e.message}")
            return None
