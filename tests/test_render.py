"""
Tests for pane rendering

Renderers return rich Text; these tests look at the plain characters.
"""
import pytest

from tuiman.tui import keys
from tuiman.tui.layout import compute_editor_layout, compute_history_layout, compute_main_layout
from tuiman.tui.render import (
    NARROW_NOTICE,
    PaneCanvas,
    render_editor_fields,
    render_editor_preview,
    render_editor_status,
    render_help,
    render_history_detail,
    render_history_list,
    render_history_status,
    render_horizontal_divider,
    render_main_status,
    render_request_detail,
    render_request_list,
    render_response,
    render_too_small,
)
from tuiman.tui.state import MAIN_DEFAULT_STATUS


def rows(text):
    return text.plain.split("\n")


@pytest.fixture
def main_layout(state):
    return compute_main_layout(
        state.width, state.height, state.ratios.split, state.ratios.response
    )


class TestCanvas:
    """Tests for the fixed-size canvas"""

    def test_rows_padded_and_cropped(self):
        canvas = PaneCanvas(5, 2)
        canvas.put(0, 0, "abcdefgh")
        assert rows(canvas.render()) == ["abcde", "     "]

    def test_overwrite_at_column(self):
        canvas = PaneCanvas(10, 1)
        canvas.put(0, 0, "aaaaaa")
        canvas.put(0, 2, "XY")
        assert rows(canvas.render()) == ["aaXY      "]

    def test_control_characters_replaced(self):
        canvas = PaneCanvas(6, 1)
        canvas.put(0, 0, "a\tb\x1bc")
        assert rows(canvas.render()) == ["a b?c "]

    def test_out_of_bounds_ignored(self):
        canvas = PaneCanvas(3, 1)
        canvas.put(5, 0, "x")
        canvas.put(0, 9, "x")
        assert rows(canvas.render()) == ["   "]


class TestMainPanes:
    """Tests for the request list, detail and response panes"""

    def test_list_rows(self, state, main_layout):
        lines = rows(render_request_list(state, main_layout))
        assert len(lines) == main_layout.top_height
        assert all(len(line) == main_layout.columns.left_width for line in lines)
        assert "Name" in lines[0] and "URL" in lines[0]
        assert lines[1].startswith(" Alpha users")
        assert "GET" in lines[1]
        assert "https://api.example.com/users" in lines[1]

    def test_list_empty(self, state, press, main_layout):
        press("/", *"zzz", keys.ENTER)
        lines = rows(render_request_list(state, main_layout))
        assert lines[1].strip() == "(empty)"
        assert lines[2].strip() == "Use :new [METHOD] [URL]"

    def test_narrow_notice(self, shell, state):
        shell.resize(40, 20)
        layout = compute_main_layout(40, 20, state.ratios.split, state.ratios.response)
        lines = rows(render_request_list(state, layout))
        assert lines[-1].strip() == NARROW_NOTICE

    def test_detail_shows_auth_reference(self, state, press, main_layout):
        press("j")
        text = render_request_detail(state, main_layout).plain
        assert "name: beta create" in text
        assert "auth: bearer ref=api-token" in text
        assert '"name": "widget"' in text

    def test_detail_clamps_scroll(self, state, main_layout):
        state.scroll.request_body = 50
        render_request_detail(state, main_layout)
        assert state.scroll.request_body == 0

    def test_detail_placeholder(self, state, press, main_layout):
        press("/", *"zzz", keys.ENTER)
        assert "No requests. Use :new to create one." in render_request_detail(state, main_layout).plain

    def test_response_placeholder(self, state, main_layout):
        lines = rows(render_response(state, main_layout))
        assert len(lines) == main_layout.response_height
        assert lines[0].startswith("No response yet.")

    def test_response_after_send(self, state, press, main_layout):
        press(keys.ENTER, "y")
        text = render_response(state, main_layout).plain
        assert "status: 200  duration=12ms" in text
        assert "request: GET https://api.example.com/users" in text
        assert '{"ok": true}' in text


class TestStatusLines:
    """Tests for the status bar per mode"""

    def test_main_default(self, state):
        assert render_main_status(state, 200).plain == MAIN_DEFAULT_STATUS

    def test_search_prompt(self, state, press):
        press("/", "a", "b")
        assert render_main_status(state, 80).plain == "/ab "

    def test_delete_prompt(self, state, press):
        press("d")
        assert render_main_status(state, 80).plain == "Delete 'Alpha users'? [y] yes  [n/Esc] cancel"

    def test_truncated_to_width(self, state):
        assert len(render_main_status(state, 10).plain) == 10

    def test_editor_hint(self, state, press):
        press("E")
        assert render_editor_status(state, 200).plain.startswith("NORMAL | j/k field")

    def test_editor_insert_echo(self, state, press):
        press("E", "i")
        assert render_editor_status(state, 200).plain == "INSERT | Name: Alpha users "

    def test_secret_masked_on_command_line(self, state, press):
        press("j", "E", ":", *"secret hunter2")
        plain = render_editor_status(state, 200).plain
        assert "hunter2" not in plain
        assert plain == ":secret ******* "

    def test_history_hint_and_error(self, state, press):
        press(":", *"history", keys.ENTER)
        assert render_history_status(state, 200).plain.startswith("HISTORY | j/k move")
        state.set_error("Could not load request for replay")
        assert render_history_status(state, 200).plain == "Could not load request for replay"


class TestEditorPanes:
    """Tests for the editor field list and preview"""

    def test_fields(self, state, press):
        press("j", "E")
        layout = compute_editor_layout(state.width, state.height, state.ratios.split)
        lines = rows(render_editor_fields(state, layout))
        assert lines[0].strip() == "Edit Request"
        assert lines[2].startswith(" Name:")
        assert lines[2][16:].startswith("beta create")
        assert lines[3][16:].startswith("POST")
        assert any(line.strip() == "Body bytes: 22" for line in lines)

    def test_preview_follows_draft(self, state, press):
        press("E", "j", "j", "i", *"/v2")
        layout = compute_editor_layout(state.width, state.height, state.ratios.split)
        assert "https://api.example.com/users/v2" in render_editor_preview(state, layout).plain


class TestHistoryPanes:
    """Tests for the history list and run detail"""

    @pytest.fixture
    def layout(self, state):
        return compute_history_layout(state.width, state.height, state.ratios.split)

    def test_empty(self, state, press, layout):
        press(":", *"history", keys.ENTER)
        assert "No history yet" in render_history_list(state, layout).plain
        assert "No history yet" in render_history_detail(state, layout).plain

    def test_error_run_shows_err(self, state, press, transport, layout):
        from tuiman.core.http_client import HttpResponse

        transport.response = HttpResponse(duration_ms=1, error="timed out")
        press(keys.ENTER, "y", ":", *"history", keys.ENTER)
        lines = rows(render_history_list(state, layout))
        assert "ERR" in lines[3]
        assert "Alpha users" in lines[3]

    def test_detail_text(self, state, press, layout):
        press("j", keys.ENTER, "y", ":", *"history", keys.ENTER)
        text = render_history_detail(state, layout).plain
        assert "Run Detail" in text
        assert "name: beta create" in text
        assert "Request + Response" in text
        assert "auth: bearer" in text
        assert "secret_ref: api-token" in text


class TestOtherScreens:
    """Tests for help, dividers and the too-small notice"""

    def test_help_footer(self):
        lines = rows(render_help(100, 20))
        assert lines[0].strip() == "Help"
        assert lines[-1].strip() == "Press Esc to return"
        assert all(len(line) == 100 for line in lines)

    def test_horizontal_divider_junction(self):
        assert render_horizontal_divider(5, 2, False).plain == "──┴──"

    def test_too_small(self):
        assert rows(render_too_small(20, 2))[0] == "Window too small    "
