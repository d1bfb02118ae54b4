"""
Tests for the main screen state machine

Tests cover:
- Navigation, chords and scroll resets
- Search and command prompts
- Delete confirmation
- Action mode: send, body edit, auth edit
- Keyboard resizing
"""
from unittest.mock import MagicMock

from tuiman.core.http_client import HttpResponse
from tuiman.tui import keys
from tuiman.tui.controllers.main import resize_status
from tuiman.tui.state import (
    MAIN_DEFAULT_STATUS,
    DraftField,
    MainAction,
    MainDeleteConfirm,
    MainNormal,
    MainSearch,
    ScreenName,
)
from tuiman.utils.errors import EditorError, StorageError


def selected_id(state):
    request = state.selected_request()
    return request.id if request else None


class TestStartup:
    """Tests for the first frame"""

    def test_collection_loaded(self, state):
        assert [r.name for r in state.requests] == ["Alpha users", "beta create", "Gamma delete"]
        assert selected_id(state) == "req-alpha"
        assert state.status.text == MAIN_DEFAULT_STATUS

    def test_store_failure_reported(self, services):
        from tuiman.tui.shell import AppShell

        services.store = MagicMock()
        services.store.list.side_effect = StorageError("disk gone")
        shell = AppShell(services)
        shell.startup()
        assert shell.state.status.is_error
        assert shell.state.status.text == "Failed to load requests: disk gone"


class TestNavigation:
    """Tests for moving through the list"""

    def test_j_k(self, state, press):
        press("j")
        assert selected_id(state) == "req-beta"
        press("k", "k")
        assert selected_id(state) == "req-alpha"

    def test_n_and_shift_n(self, state, press):
        press("n", "n")
        assert selected_id(state) == "req-gamma"
        press("N")
        assert selected_id(state) == "req-beta"

    def test_g_g_and_shift_g(self, state, press):
        press("G")
        assert selected_id(state) == "req-gamma"
        press("g", "g")
        assert selected_id(state) == "req-alpha"

    def test_moving_resets_body_scroll(self, state, press):
        state.scroll.request_body = 5
        press("j")
        assert state.scroll.request_body == 0

    def test_body_scroll_keys(self, state, press):
        press("}", "}", "{")
        assert state.scroll.request_body == 1
        press("{", "{")
        assert state.scroll.request_body == 0
        press("]", "]")
        assert state.scroll.response_body == 2

    def test_quit_chords(self, shell, press):
        press("Z", "Z")
        assert not shell.running

    def test_quit_chord_zq(self, shell, press):
        press("Z", "Q")
        assert not shell.running

    def test_broken_chord_handles_second_key(self, state, press):
        press("Z", "j")
        assert selected_id(state) == "req-beta"
        assert state.running


class TestSearch:
    """Tests for the search prompts"""

    def test_search_commit(self, state, press):
        press("/", *"beta", keys.ENTER)
        assert isinstance(state.main_mode, MainNormal)
        assert len(state.index) == 1
        assert selected_id(state) == "req-beta"
        assert state.status.text == "FILTER: beta (1 results)"

    def test_reverse_search_commits_the_same_way(self, state, press):
        press("?", *"example.com", keys.ENTER)
        assert len(state.index) == 2
        assert state.status.text == "FILTER: example.com (2 results)"

    def test_search_buffer_editing(self, state, press):
        press("/", *"gamma x", keys.WORD_BACKSPACE, keys.BACKSPACE)
        assert isinstance(state.main_mode, MainSearch)
        assert state.main_mode.buffer.text == "gamma"

    def test_escape_cancels_prompt(self, state, press):
        press("/", *"beta", keys.ESCAPE)
        assert isinstance(state.main_mode, MainNormal)
        assert len(state.index) == 3

    def test_empty_search_restores_default_status(self, state, press):
        press("/", *"beta", keys.ENTER, "/", keys.ENTER)
        assert len(state.index) == 3
        assert state.status.text == MAIN_DEFAULT_STATUS

    def test_escape_in_normal_clears_filter(self, state, press):
        press("/", *"beta", keys.ENTER, keys.ESCAPE)
        assert state.index.filter_text == ""
        assert len(state.index) == 3
        assert state.status.text == MAIN_DEFAULT_STATUS


class TestCommands:
    """Tests for the command line"""

    def test_new_with_method_and_url(self, state, press):
        press(":", *"new post https://x.test/a", keys.ENTER)
        assert state.screen is ScreenName.EDITOR
        assert not state.draft.existing
        assert state.draft.request.method == "POST"
        assert state.draft.request.url == "https://x.test/a"
        assert state.draft.request.name == "POST https://x.test/a"
        assert state.draft.current_field is DraftField.NAME

    def test_new_without_arguments(self, state, press):
        press(":", *"new", keys.ENTER)
        assert state.draft.request.method == "GET"
        assert state.draft.request.name == "GET request"

    def test_edit(self, state, press):
        press("j", ":", *"edit", keys.ENTER)
        assert state.screen is ScreenName.EDITOR
        assert state.draft.existing
        assert state.draft.request.id == "req-beta"

    def test_edit_with_nothing_selected(self, state, press):
        press("/", *"zzz", keys.ENTER, "E")
        assert state.screen is ScreenName.MAIN
        assert state.status.text == "No request selected"
        assert state.status.is_error

    def test_unknown(self, state, press):
        press(":", *"frobnicate now", keys.ENTER)
        assert state.status.text == "Unknown command: frobnicate"
        assert state.status.is_error

    def test_help_and_back(self, state, press):
        press(":", *"help", keys.ENTER)
        assert state.screen is ScreenName.HELP
        press(keys.ESCAPE)
        assert state.screen is ScreenName.MAIN

    def test_quit(self, shell, press):
        press(":", "q", keys.ENTER)
        assert not shell.running

    def test_history(self, state, press):
        press(":", *"history", keys.ENTER)
        assert state.screen is ScreenName.HISTORY
        assert state.runs == []

    def test_history_failure(self, state, press, services):
        services.history = MagicMock()
        services.history.list.side_effect = StorageError("locked")
        press(":", *"history", keys.ENTER)
        assert state.screen is ScreenName.MAIN
        assert state.status.text == "Failed to load history: locked"

    def test_export(self, state, press, tmp_path):
        destination = tmp_path / "out"
        press(":", *f"export {destination}", keys.ENTER)
        assert state.status.text == (
            f"Exported 3 requests to {destination} (scrubbed 1 secret refs)"
        )
        assert (destination / "manifest.json").exists()

    def test_import_requires_directory(self, state, press):
        press(":", *"import", keys.ENTER)
        assert state.status.text == "Usage: :import /path/to/export-dir"

    def test_import(self, state, press, store, tmp_path):
        destination = tmp_path / "out"
        press(":", *f"export {destination}", keys.ENTER)
        store.delete("req-gamma")
        press(":", *f"import {destination}", keys.ENTER)
        assert state.status.text == "Imported 3 requests"
        assert len(state.requests) == 3

    def test_import_failure(self, state, press, tmp_path):
        press(":", *f"import {tmp_path / 'missing'}", keys.ENTER)
        assert state.status.is_error
        assert state.status.text.startswith("Import failed: ")


class TestDelete:
    """Tests for delete confirmation"""

    def test_confirm(self, state, press, store):
        press("d")
        assert state.main_mode == MainDeleteConfirm("req-alpha", "Alpha users")
        press("y")
        assert state.status.text == "Deleted request: Alpha users"
        assert [r.id for r in store.list()] == ["req-beta", "req-gamma"]
        assert selected_id(state) == "req-beta"

    def test_deleting_middle_selects_next_in_place(self, state, press, store):
        press("j")
        assert state.index.selected == 1
        press("d", "y")
        assert [r.id for r in store.list()] == ["req-alpha", "req-gamma"]
        assert state.index.selected == 1
        assert selected_id(state) == "req-gamma"

    def test_deleting_last_selects_previous(self, state, press):
        press("G", "d", "y")
        assert selected_id(state) == "req-beta"

    def test_cancel(self, state, press, store):
        press("d", "n")
        assert isinstance(state.main_mode, MainNormal)
        assert len(store.list()) == 3
        press("d", keys.ESCAPE)
        assert len(store.list()) == 3

    def test_other_keys_keep_prompt(self, state, press):
        press("d", "j")
        assert isinstance(state.main_mode, MainDeleteConfirm)


class TestActionMode:
    """Tests for the Enter action menu"""

    def test_enter_opens_actions(self, state, press):
        press(keys.ENTER)
        assert isinstance(state.main_mode, MainAction)

    def test_enter_on_empty_list(self, state, press):
        press("/", *"zzz", keys.ENTER, keys.ENTER)
        assert isinstance(state.main_mode, MainNormal)

    def test_send(self, state, press, transport, history):
        press(keys.ENTER, "y")

        assert [r.id for r in transport.sent] == ["req-alpha"]
        assert state.status.text == "Request sent"
        assert state.last_response.status_code == 200
        assert state.last_response.request_name == "Alpha users"
        [run] = history.list()
        assert run.request_id == "req-alpha"
        assert run.request_snapshot.startswith("name: Alpha users\n")
        assert run.response_body == '{"ok": true}'
        assert run.created_at == state.last_response.at

    def test_failed_send_still_recorded(self, state, press, transport, history):
        transport.response = HttpResponse(duration_ms=3, error="connection refused")
        press(keys.ENTER, "y")

        assert state.status.is_error
        assert state.status.text == "Request failed: connection refused"
        assert history.list()[0].error == "connection refused"

    def test_history_write_failure(self, state, press, services):
        from tuiman.utils.errors import HistoryWriteError

        services.history = MagicMock()
        services.history.append.side_effect = HistoryWriteError("read-only")
        press(keys.ENTER, "y")
        assert state.status.text == "Failed to record run: read-only"
        assert state.last_response is not None

    def test_edit_body_formats_json(self, state, press, editor, store):
        editor.result = '{"a":1}'
        press(keys.ENTER, "e")

        assert editor.calls == [("", ".txt")]
        assert store.load("req-alpha").body == '{\n  "a": 1\n}'
        assert state.status.text == "Body updated (JSON formatted)"
        assert selected_id(state) == "req-alpha"

    def test_edit_body_plain_text(self, state, press, editor, store):
        editor.result = "a=1"
        press(keys.ENTER, "e")
        assert store.load("req-alpha").body == "a=1"
        assert state.status.text == "Body updated"

    def test_edit_body_invalid_json(self, state, press, editor, store):
        editor.result = "{broken"
        press("j", keys.ENTER, "e")
        assert state.status.text.startswith("Invalid JSON: ")
        assert store.load("req-beta").body == '{\n  "name": "widget"\n}'

    def test_edit_body_editor_failure(self, state, press, editor):
        editor.error = EditorError("exit 1")
        press(keys.ENTER, "e")
        assert state.status.text == "Body edit cancelled or failed"

    def test_edit_auth(self, state, press):
        press(keys.ENTER, "a")
        assert state.screen is ScreenName.EDITOR
        assert state.draft.current_field is DraftField.AUTH_TYPE

    def test_cancel(self, state, press, transport):
        press(keys.ENTER, "n")
        assert isinstance(state.main_mode, MainNormal)
        press(keys.ENTER, keys.ESCAPE)
        assert isinstance(state.main_mode, MainNormal)
        assert transport.sent == []


class TestKeyboardResize:
    """Tests for H/L and K/J"""

    def test_split(self, state, press):
        press("H")
        assert round(state.ratios.split, 2) == 0.63
        assert state.status.text == "Resize: left=63% response=28% (11 lines)"

    def test_response(self, state, press):
        press("K")
        assert state.status.text == "Resize: left=66% response=25% (10 lines)"

    def test_half_percent_rounds_up(self, state):
        """Test a 4/32 split shows 13%, as does a 3/8 response"""
        state.ratios.split = 4 / 32
        state.ratios.response = 3 / 8
        assert resize_status(state) == "Resize: left=13% response=38% (15 lines)"

    def test_clamped(self, state, press):
        press(*"L" * 20)
        assert state.ratios.split == 0.80
