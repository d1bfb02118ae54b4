"""Textual front end: draws the AppShell state and feeds it input events."""

from typing import Optional, assert_never

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Static

from tuiman.core.editor import ExternalEditor
from tuiman.tui import render
from tuiman.tui.keys import key_from_event
from tuiman.tui.layout import (
    STATUS_HEIGHT,
    Columns,
    compute_editor_layout,
    compute_history_layout,
    compute_main_layout,
)
from tuiman.tui.shell import AppShell, PointerAction, PointerEvent
from tuiman.tui.state import DragMode, ScreenName
from tuiman.utils.errors import EditorError
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

VIEW_IDS = {
    ScreenName.MAIN: "main-view",
    ScreenName.EDITOR: "editor-view",
    ScreenName.HISTORY: "history-view",
    ScreenName.HELP: "help-view",
}


class SuspendingEditor:
    """External editor that hands the terminal over while it runs."""

    def __init__(self, editor: ExternalEditor):
        self.editor = editor
        self.app: Optional[App] = None

    def attach(self, app: App) -> None:
        self.app = app

    def edit(self, initial_text: str, suffix: str = ".txt") -> str:
        if self.app is None:
            return self.editor.edit(initial_text, suffix)
        try:
            with self.app.suspend():
                return self.editor.edit(initial_text, suffix)
        except SuspendNotSupported as e:
            raise EditorError(
                "Cannot suspend the terminal for the external editor",
                details={"reason": str(e)},
            ) from e


class WorkspaceScreen(Screen):
    """One screen hosting every view; the shell decides which is shown."""

    def __init__(self, shell: AppShell):
        super().__init__()
        self.shell = shell

    def compose(self) -> ComposeResult:
        yield Static(id="too-small")
        with Vertical(id="main-view"):
            with Horizontal(id="main-top"):
                yield Static(id="request-list")
                yield Static(id="main-vsep", classes="divider")
                yield Static(id="request-detail")
            yield Static(id="main-hsep", classes="divider")
            yield Static(id="response")
        with Horizontal(id="editor-view"):
            yield Static(id="editor-fields")
            yield Static(id="editor-vsep", classes="divider")
            yield Static(id="editor-preview")
        with Horizontal(id="history-view"):
            yield Static(id="history-list")
            yield Static(id="history-vsep", classes="divider")
            yield Static(id="history-detail")
        yield Static(id="help-view")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.shell.resize(self.size.width, self.size.height)
        self.redraw()

    def on_resize(self, event: events.Resize) -> None:
        self.shell.resize(event.size.width, event.size.height)
        self.redraw()

    ## Input

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.shell.handle_key(key_from_event(event))
        if not self.shell.running:
            self.app.exit()
            return
        self.redraw()

    def _pointer(self, action: PointerAction, event: events.MouseEvent) -> bool:
        changed = self.shell.handle_pointer(
            PointerEvent(action, int(event.screen_x), int(event.screen_y))
        )
        if changed or action is not PointerAction.MOVE:
            self.redraw()
        return changed

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if event.button != 1:
            return
        self._pointer(PointerAction.PRESS, event)
        if self.shell.state.drag is not DragMode.NONE:
            self.capture_mouse()
            event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.shell.state.drag is DragMode.NONE:
            return
        self._pointer(PointerAction.MOVE, event)
        event.stop()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        dragging = self.shell.state.drag is not DragMode.NONE
        self._pointer(PointerAction.RELEASE, event)
        if dragging:
            self.release_mouse()
            event.stop()

    ## Drawing

    def _place(self, widget_id: str, width: int, height: int, content: Optional[Text] = None) -> None:
        widget = self.query_one(f"#{widget_id}")
        visible = width > 0 and height > 0
        widget.display = visible
        if not visible:
            return
        widget.styles.width = width
        widget.styles.height = height
        if content is not None:
            widget.update(content)

    def _place_columns(
        self, ids: tuple[str, str, str], columns: Columns, height: int, left: Text, right: Text, active: bool
    ) -> None:
        left_id, sep_id, right_id = ids
        self._place(left_id, columns.left_width, height, left)
        if columns.show_right:
            self._place(sep_id, 1, height, render.render_vertical_divider(height, active))
            self._place(right_id, columns.right_width, height, right)
        else:
            self._place(sep_id, 0, 0)
            self._place(right_id, 0, 0)

    def redraw(self) -> None:
        state = self.shell.state
        width, height = state.width, state.height

        for view_id in VIEW_IDS.values():
            self.query_one(f"#{view_id}").display = False
        self._place("too-small", 0, 0)

        match state.screen:
            case ScreenName.MAIN:
                valid = self._draw_main()
                status = render.render_main_status(state, width)
            case ScreenName.EDITOR:
                valid = self._draw_editor()
                status = render.render_editor_status(state, width)
            case ScreenName.HISTORY:
                valid = self._draw_history()
                status = render.render_history_status(state, width)
            case ScreenName.HELP:
                valid = True
                self._place("help-view", width, height - STATUS_HEIGHT,
                            render.render_help(width, height - STATUS_HEIGHT))
                status = render.render_main_status(state, width)
            case _:
                assert_never(state.screen)

        if not valid:
            self._place("too-small", width, height, render.render_too_small(width, height))
            self._place("status-bar", 0, 0)
            return
        self.query_one(f"#{VIEW_IDS[state.screen]}").display = True
        self._place("status-bar", width, STATUS_HEIGHT, status)

    def _draw_main(self) -> bool:
        state = self.shell.state
        layout = compute_main_layout(
            state.width, state.height, state.ratios.split, state.ratios.response
        )
        if not layout.valid:
            return False

        vertical_active, horizontal_active = render.main_dividers_active(state)
        self._place("main-view", layout.width, layout.available_height)
        self._place("main-top", layout.width, layout.top_height)
        self._place_columns(
            ("request-list", "main-vsep", "request-detail"),
            layout.columns,
            layout.top_height,
            render.render_request_list(state, layout),
            render.render_request_detail(state, layout) if layout.columns.show_right else Text(),
            vertical_active,
        )
        if layout.show_response:
            separator_x = layout.columns.separator_x if layout.columns.show_right else -1
            self._place(
                "main-hsep", layout.width, 1,
                render.render_horizontal_divider(layout.width, separator_x, horizontal_active),
            )
            self._place(
                "response", layout.width, layout.response_height,
                render.render_response(state, layout),
            )
        else:
            self._place("main-hsep", 0, 0)
            self._place("response", 0, 0)
        return True

    def _draw_editor(self) -> bool:
        state = self.shell.state
        layout = compute_editor_layout(state.width, state.height, state.ratios.split)
        if not layout.valid:
            return False
        self._place("editor-view", layout.width, layout.content_height)
        self._place_columns(
            ("editor-fields", "editor-vsep", "editor-preview"),
            layout.columns,
            layout.content_height,
            render.render_editor_fields(state, layout),
            render.render_editor_preview(state, layout) if layout.columns.show_right else Text(),
            state.drag is DragMode.VERTICAL,
        )
        return True

    def _draw_history(self) -> bool:
        state = self.shell.state
        layout = compute_history_layout(state.width, state.height, state.ratios.split)
        if not layout.valid:
            return False
        self._place("history-view", layout.width, layout.content_height)
        self._place_columns(
            ("history-list", "history-vsep", "history-detail"),
            layout.columns,
            layout.content_height,
            render.render_history_list(state, layout),
            render.render_history_detail(state, layout) if layout.columns.show_right else Text(),
            state.drag is DragMode.VERTICAL,
        )
        return True


class TuimanApp(App):
    CSS_PATH = "styles.tcss"
    TITLE = "tuiman - terminal HTTP requests"
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, shell: AppShell):
        super().__init__()
        self.shell = shell

    def get_default_screen(self) -> Screen:
        return WorkspaceScreen(self.shell)
