"""Main screen: request list, detail and response panes."""

from dataclasses import replace
from pathlib import Path
from typing import assert_never

from tuiman.core.export_import import default_export_dir, export_requests, import_requests
from tuiman.core.json_body import apply_body_edit
from tuiman.core.models.request import Request, guess_name
from tuiman.tui import keys
from tuiman.tui.controllers.base import ScreenController
from tuiman.tui.layout import (
    RATIO_STEP,
    compute_main_layout,
    nudge_response_ratio,
    nudge_split_ratio,
    round_half_up,
)
from tuiman.tui.state import (
    MAIN_DEFAULT_STATUS,
    DraftField,
    MainAction,
    MainCommand,
    MainDeleteConfirm,
    MainNormal,
    MainReverseSearch,
    MainSearch,
    ScreenName,
)
from tuiman.utils.errors import TuimanError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

ACTION_PROMPT = "[esc/n] cancel   [y] send request   [e] edit body   [a] edit auth"


def delete_prompt(name: str) -> str:
    return f"Delete '{name}'? [y] yes  [n/Esc] cancel"


def resize_status(state) -> str:
    layout = compute_main_layout(
        state.width, state.height, state.ratios.split, state.ratios.response
    )
    return (
        f"Resize: left={round_half_up(state.ratios.split * 100)}%"
        f" response={round_half_up(state.ratios.response * 100)}%"
        f" ({layout.response_height} lines)"
    )


class MainController(ScreenController):
    """Modes: Normal, Action, Search, ReverseSearch, Command, DeleteConfirm."""

    def handle_key(self, key: str) -> None:
        mode = self.state.main_mode
        match mode:
            case MainNormal():
                self._handle_normal(key)
            case MainAction():
                self._handle_action(key)
            case MainSearch() | MainReverseSearch():
                self._handle_prompt(key, mode.buffer, self._commit_search)
            case MainCommand():
                self._handle_prompt(key, mode.buffer, self._run_command)
            case MainDeleteConfirm():
                self._handle_delete_confirm(key, mode)
            case _:
                assert_never(mode)

    ## Normal mode

    def _handle_normal(self, key: str) -> None:
        state = self.state
        chord = state.chords.feed(key)
        if chord.action == "quit":
            state.running = False
            return
        if chord.action == "first":
            self._move(state.index.first)
            return
        if chord.consumed:
            return

        match key:
            case "j" | "n":
                self._move(state.index.next)
            case "k" | "N":
                self._move(state.index.prev)
            case "G":
                self._move(state.index.last)
            case "{":
                state.scroll.request_body = max(0, state.scroll.request_body - 1)
            case "}":
                state.scroll.request_body += 1
            case "[":
                state.scroll.response_body = max(0, state.scroll.response_body - 1)
            case "]":
                state.scroll.response_body += 1
            case "H" | "L":
                delta = -RATIO_STEP if key == "H" else RATIO_STEP
                state.ratios.split = nudge_split_ratio(state.ratios.split, delta)
                state.set_status(resize_status(state))
            case "K" | "J":
                delta = -RATIO_STEP if key == "K" else RATIO_STEP
                state.ratios.response = nudge_response_ratio(state.ratios.response, delta)
                state.set_status(resize_status(state))
            case "/":
                state.main_mode = MainSearch()
            case "?":
                state.main_mode = MainReverseSearch()
            case ":":
                state.main_mode = MainCommand()
            case keys.ENTER:
                if state.selected_request() is not None:
                    state.main_mode = MainAction()
            case "E":
                self._edit_selected(DraftField.NAME)
            case "d":
                request = state.selected_request()
                if request is not None:
                    state.main_mode = MainDeleteConfirm(request.id, request.name)
            case keys.ESCAPE:
                if state.index.filter_text:
                    state.index.apply(state.requests, filter_text="")
                    state.scroll.request_body = 0
                state.set_status(MAIN_DEFAULT_STATUS)

    def _move(self, step) -> None:
        if step():
            self.state.scroll.request_body = 0

    def _edit_selected(self, focus: DraftField) -> None:
        request = self.state.selected_request()
        if request is None:
            self.state.set_error("No request selected")
            return
        self.open_editor(request, existing=True, focus=focus)

    ## Search and command line

    def _handle_prompt(self, key: str, buffer: keys.LineBuffer, commit) -> None:
        if key == keys.ESCAPE:
            self.state.main_mode = MainNormal()
            self.state.set_status(MAIN_DEFAULT_STATUS)
        elif key == keys.ENTER:
            text = buffer.text
            self.state.main_mode = MainNormal()
            commit(text)
        else:
            buffer.handle(key)

    def _commit_search(self, text: str) -> None:
        """Both search prompts replace the filter outright."""
        state = self.state
        state.index.apply(state.requests, filter_text=text)
        state.scroll.request_body = 0
        if text:
            state.set_status(f"FILTER: {text} ({len(state.index)} results)")
        else:
            state.set_status(MAIN_DEFAULT_STATUS)

    def _run_command(self, line: str) -> None:
        verb, _, rest = line.strip().partition(" ")
        rest = rest.strip()

        match verb:
            case "":
                self.state.set_status(MAIN_DEFAULT_STATUS)
            case "q" | "quit" | "exit":
                self.state.running = False
            case "help":
                self.state.screen = ScreenName.HELP
            case "new":
                self._command_new(rest)
            case "edit":
                self._edit_selected(DraftField.NAME)
            case "history":
                self._command_history()
            case "export":
                self._command_export(rest)
            case "import":
                self._command_import(rest)
            case _:
                self.state.set_error(f"Unknown command: {verb}")

    def _command_new(self, args: str) -> None:
        method_arg, _, url = args.partition(" ")
        method = method_arg.upper() or "GET"
        url = url.strip()
        request = Request(method=method, url=url, name=guess_name(method, url))
        self.open_editor(request, existing=False, focus=DraftField.NAME)

    def _command_history(self) -> None:
        try:
            self.state.runs = self.services.history.list(self.services.history_limit)
        except TuimanError as e:
            self.state.set_error(f"Failed to load history: {e.message}")
            return
        self.state.history_selected = 0
        self.state.scroll.history_list = 0
        self.state.scroll.history_detail = 0
        self.state.screen = ScreenName.HISTORY
        self.state.clear_status()

    def _command_export(self, directory: str) -> None:
        destination = Path(directory).expanduser() if directory else default_export_dir()
        try:
            report = export_requests(self.state.requests, destination)
        except TuimanError as e:
            self.state.set_error(f"Export failed: {e.message}")
            return
        self.state.set_status(
            f"Exported {report.exported} requests to {destination}"
            f" (scrubbed {report.scrubbed_secret_refs} secret refs)"
        )

    def _command_import(self, directory: str) -> None:
        if not directory:
            self.state.set_error("Usage: :import /path/to/export-dir")
            return
        try:
            report = import_requests(self.services.store, Path(directory).expanduser())
        except TuimanError as e:
            self.state.set_error(f"Import failed: {e.message}")
            return
        selected = self.state.selected_request()
        if self.reload_requests(selected.id if selected else None):
            self.state.set_status(f"Imported {report.imported} requests")

    ## Delete confirmation

    def _handle_delete_confirm(self, key: str, target: MainDeleteConfirm) -> None:
        state = self.state
        if key == "y":
            successor = state.index.successor_id(state.requests)
            state.main_mode = MainNormal()
            try:
                self.services.store.delete(target.request_id)
            except TuimanError as e:
                state.set_error(f"Failed to delete request: {e.message}")
                return
            if self.reload_requests(successor):
                state.set_status(f"Deleted request: {target.name}")
        elif key in ("n", keys.ESCAPE):
            state.main_mode = MainNormal()
            state.set_status(MAIN_DEFAULT_STATUS)

    ## Action mode

    def _handle_action(self, key: str) -> None:
        state = self.state
        request = state.selected_request()
        if key in ("n", keys.ESCAPE) or request is None:
            state.main_mode = MainNormal()
            state.set_status(MAIN_DEFAULT_STATUS)
            return

        match key:
            case "y":
                state.main_mode = MainNormal()
                self.send_and_record(request)
            case "e":
                state.main_mode = MainNormal()
                self._edit_body(request)
            case "a":
                state.main_mode = MainNormal()
                self.open_editor(request, existing=True, focus=DraftField.AUTH_TYPE)

    def _edit_body(self, request: Request) -> None:
        edited = self.edit_text(request.body, ".txt")
        if edited is None:
            self.state.set_error("Body edit cancelled or failed")
            return

        try:
            result = apply_body_edit(edited)
        except TuimanError as e:
            self.state.set_error(f"Invalid JSON: {e.message}")
            return

        try:
            self.services.store.save(replace(request, body=result.body))
        except TuimanError as e:
            self.state.set_error(f"Failed to save request: {e.message}")
            return

        if self.reload_requests(request.id):
            self.state.set_status(
                "Body updated (JSON formatted)" if result.formatted else "Body updated"
            )
