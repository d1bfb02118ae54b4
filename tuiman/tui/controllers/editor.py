"""Editor screen: field-by-field editing of a draft request."""

from typing import assert_never

from tuiman.core.json_body import apply_body_edit
from tuiman.core.models.request import METHODS, guess_name
from tuiman.tui import keys
from tuiman.tui.controllers.base import ScreenController
from tuiman.tui.state import (
    DRAFT_FIELDS,
    Draft,
    DraftField,
    EditorCommand,
    EditorInsert,
    EditorNormal,
)
from tuiman.utils.errors import TuimanError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

URL_REQUIRED = "URL cannot be empty"


def cycle_method(current: str, step: int) -> str:
    """Next/previous entry of METHODS, wrapping; unknown methods restart at GET."""
    try:
        position = METHODS.index(current.upper())
    except ValueError:
        return METHODS[0]
    return METHODS[(position + step) % len(METHODS)]


class EditorController(ScreenController):
    """Modes: Normal (field navigation), Insert, Command."""

    def handle_key(self, key: str) -> None:
        draft = self.state.draft
        if draft is None:
            self.return_to_main()
            return

        mode = draft.mode
        match mode:
            case EditorNormal():
                self._handle_normal(key, draft)
            case EditorInsert():
                self._handle_insert(key, draft, mode)
            case EditorCommand():
                self._handle_command(key, draft, mode)
            case _:
                assert_never(mode)

    ## Normal mode

    def _handle_normal(self, key: str, draft: Draft) -> None:
        match key:
            case "j":
                draft.field_index = min(draft.field_index + 1, len(DRAFT_FIELDS) - 1)
            case "k":
                draft.field_index = max(draft.field_index - 1, 0)
            case "h" | "l":
                if draft.current_field is DraftField.METHOD:
                    step = -1 if key == "h" else 1
                    draft.request.method = cycle_method(draft.request.method, step)
            case "i" | keys.ENTER:
                if draft.current_field is DraftField.METHOD:
                    self.state.set_status("Method uses h/l cycle")
                else:
                    value = draft.get_value(draft.current_field)
                    draft.mode = EditorInsert(keys.LineBuffer(value))
            case "{":
                draft.body_scroll = max(0, draft.body_scroll - 1)
            case "}":
                draft.body_scroll += 1
            case "e":
                self._edit_body(draft)
            case ":":
                draft.mode = EditorCommand()
            case keys.CTRL_S:
                self.save_draft()
            case keys.ESCAPE:
                self._leave("Draft cancelled")

    ## Insert mode

    def _handle_insert(self, key: str, draft: Draft, mode: EditorInsert) -> None:
        if key == keys.ESCAPE:
            # the echoed value stays in the draft
            draft.mode = EditorNormal()
            return
        if key == keys.ENTER:
            draft.set_value(draft.current_field, mode.buffer.text)
            draft.mode = EditorNormal()
            return

        if mode.buffer.handle(key):
            draft.set_value(draft.current_field, mode.buffer.text)
            if (
                draft.current_field is DraftField.URL
                and self.state.status.is_error
                and self.state.status.text == URL_REQUIRED
            ):
                self.state.clear_status()

    ## Command mode

    def _handle_command(self, key: str, draft: Draft, mode: EditorCommand) -> None:
        if key == keys.ESCAPE:
            draft.mode = EditorNormal()
        elif key == keys.ENTER:
            draft.mode = EditorNormal()
            self._run_command(mode.buffer.text, draft)
        else:
            mode.buffer.handle(key)

    def _run_command(self, line: str, draft: Draft) -> None:
        verb, _, rest = line.strip().partition(" ")

        match verb:
            case "":
                return
            case "w" | "wq":
                self.save_draft()
            case "q":
                self._leave("Draft discarded")
            case "secret":
                self._store_secret(draft, rest.strip())
            case _:
                self.state.set_error(f"Unknown editor command: {verb}")

    def _store_secret(self, draft: Draft, value: str) -> None:
        reference = draft.request.auth_secret_ref.strip()
        if not reference:
            self.state.set_error("Set Secret Ref first")
            return
        if not value:
            self.state.set_error("Usage: :secret VALUE")
            return
        try:
            self.services.secrets.store(reference, value)
        except TuimanError as e:
            self.state.set_error(f"Failed to store secret: {e.message}")
            return
        self.state.set_status(f"Secret stored for {reference}")

    ## Body

    def _edit_body(self, draft: Draft) -> None:
        edited = self.edit_text(draft.request.body, ".json")
        if edited is None:
            self.state.set_error("Body edit cancelled or failed")
            return
        try:
            result = apply_body_edit(edited)
        except TuimanError as e:
            self.state.set_error(f"Invalid JSON: {e.message}")
            return

        draft.request.body = result.body
        draft.body_scroll = 0
        self.state.set_status(
            "Draft body updated (JSON formatted)" if result.formatted else "Draft body updated"
        )

    ## Save and leave

    def save_draft(self) -> bool:
        """Validate and persist the draft, then return to the main screen."""
        draft = self.state.draft
        if draft is None:
            return False

        request = draft.request
        if not request.url.strip():
            self.state.set_error(URL_REQUIRED)
            return False

        request.method = request.method.strip().upper() or "GET"
        if not request.name.strip():
            request.name = guess_name(request.method, request.url)

        try:
            stored = self.services.store.save(request)
        except TuimanError as e:
            logger.error(f"Failed to save request {request.id}: {e.message}")
            self.state.set_error(f"Failed to save request: {e.message}")
            return False

        self.state.draft = None
        self.return_to_main()
        if self.reload_requests(stored.id):
            self.state.set_status("Request saved")
        return True

    def _leave(self, message: str) -> None:
        self.state.draft = None
        self.return_to_main()
        self.state.set_status(message)

