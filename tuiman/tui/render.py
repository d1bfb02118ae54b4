"""Pane renderers.

Each function draws one pane into a fixed-size ``rich.text.Text`` block.
Body previews clamp their scroll offset and write it back to the state,
so a stored offset never points past the content it scrolls.
"""

from typing import List, Optional

from rich.style import Style
from rich.text import Text

from tuiman.core.models.request import Request
from tuiman.core.models.run import history_detail_text
from tuiman.tui.controllers.help import HELP_FOOTER, HELP_LINES
from tuiman.tui.controllers.history import HISTORY_HINT
from tuiman.tui.controllers.main import ACTION_PROMPT, delete_prompt
from tuiman.tui.layout import MainLayout, SplitLayout
from tuiman.tui.state import (
    DRAFT_FIELDS,
    AppState,
    DragMode,
    DraftField,
    EditorCommand,
    EditorInsert,
    MainAction,
    MainCommand,
    MainDeleteConfirm,
    MainReverseSearch,
    MainSearch,
)
from tuiman.tui.viewport import body_preview, wrap

TITLE_STYLE = Style(bold=True)
LABEL_STYLE = Style(dim=True)
SELECTED_STYLE = Style(reverse=True)
INSERT_STYLE = Style(bold=True, underline=True)
ERROR_STYLE = Style(color="red", bold=True)
CURSOR_STYLE = Style(reverse=True)
DIVIDER_STYLE = Style(dim=True)
DIVIDER_ACTIVE_STYLE = Style(color="cyan", bold=True)

METHOD_COLORS = {
    "GET": "green",
    "POST": "yellow",
    "PUT": "cyan",
    "PATCH": "magenta",
    "DELETE": "red",
}

NARROW_NOTICE = "Preview hidden (window too narrow)"
TOO_SMALL_NOTICE = "Window too small"
EDITOR_HINT = " | j/k field | i edit | h/l method | { } body | e body | :w save | :q cancel"

_CONTROL_CHARS = {i: "?" for i in range(32)} | {9: " ", 127: "?"}


def method_style(method: str) -> Style:
    return Style(color=METHOD_COLORS.get(method.upper(), "white"), bold=True)


def status_style(status_code: int) -> Style:
    if 200 <= status_code < 300:
        return Style(color="green", bold=True)
    if 300 <= status_code < 400:
        return Style(color="cyan", bold=True)
    if 400 <= status_code < 500:
        return Style(color="yellow", bold=True)
    if status_code >= 500:
        return Style(color="red", bold=True)
    return Style(dim=True)


def _meaningful(value: str) -> bool:
    return value.strip() not in ("", "none", "(none)")


## Canvas


class PaneCanvas:
    """Fixed grid of rows written left to right."""

    def __init__(self, width: int, height: int):
        self.width = max(0, width)
        self.height = max(0, height)
        self.rows: List[Text] = [Text() for _ in range(self.height)]
        self._row_styles: dict[int, Style] = {}

    def put(self, y: int, x: int, text: str | Text, style: Style | str = "") -> None:
        if not 0 <= y < self.height or x >= self.width:
            return
        row = self.rows[y]
        if row.cell_len > x:
            row.truncate(x)
        elif row.cell_len < x:
            row.append(" " * (x - row.cell_len))
        if isinstance(text, Text):
            row.append_text(text)
        else:
            row.append(text.translate(_CONTROL_CHARS), style=style)

    def rule(self, y: int, style: Style = DIVIDER_STYLE) -> None:
        self.put(y, 0, "─" * self.width, style)

    def style_row(self, y: int, style: Style) -> None:
        if 0 <= y < self.height:
            self._row_styles[y] = style

    def put_lines(self, y: int, x: int, lines: List[str], style: Style | str = "") -> int:
        """Write consecutive lines; returns the next free row."""
        for line in lines:
            self.put(y, x, line, style)
            y += 1
        return y

    def render(self) -> Text:
        for y, row in enumerate(self.rows):
            row.truncate(self.width, overflow="crop", pad=True)
            if y in self._row_styles:
                row.stylize(self._row_styles[y], 0, len(row))
        return Text("\n", no_wrap=True, overflow="crop").join(self.rows)


def _labelled(label: str, value: str | Text) -> Text:
    line = Text(f"{label}: ", style=LABEL_STYLE)
    if isinstance(value, Text):
        line.append_text(value)
    else:
        line.append(value.translate(_CONTROL_CHARS))
    return line


def _body_block(
    canvas: PaneCanvas, row: int, text: str, offset: int, x: int = 0
) -> int:
    """Draw a windowed body preview from ``row`` to the bottom; returns the clamped offset."""
    height = canvas.height - row
    if height <= 0:
        return 0
    window = body_preview(text, canvas.width - x, height, offset)
    for line in window.lines:
        canvas.put(row, x, line)
        row += 1
    if window.indicator is not None:
        canvas.put(row, x, window.indicator, LABEL_STYLE)
    return window.offset


def render_too_small(width: int, height: int) -> Text:
    canvas = PaneCanvas(width, height)
    canvas.put(0, 0, TOO_SMALL_NOTICE, ERROR_STYLE)
    return canvas.render()


def render_vertical_divider(height: int, active: bool) -> Text:
    style = DIVIDER_ACTIVE_STYLE if active else DIVIDER_STYLE
    return Text("\n".join("│" for _ in range(max(0, height))), style=style, no_wrap=True)


def render_horizontal_divider(width: int, separator_x: int, active: bool) -> Text:
    style = DIVIDER_ACTIVE_STYLE if active else DIVIDER_STYLE
    cells = ["─"] * max(0, width)
    if 0 <= separator_x < width:
        cells[separator_x] = "┴"
    return Text("".join(cells), style=style, no_wrap=True, overflow="crop")


def _prompt(prefix: str, buffer_text: str) -> Text:
    line = Text(prefix + buffer_text.translate(_CONTROL_CHARS))
    line.append(" ", style=CURSOR_STYLE)
    return line


def _status_text(state: AppState, fallback: str = "") -> Text:
    if state.status.is_error:
        return Text(state.status.text, style=ERROR_STYLE)
    return Text(state.status.text or fallback)


## Main screen


def render_request_list(state: AppState, layout: MainLayout) -> Text:
    width, height = layout.columns.left_width, layout.top_height
    canvas = PaneCanvas(width, height)
    method_x = max(8, width // 2)
    url_x = method_x + 8

    canvas.put(0, 1, "Name", TITLE_STYLE)
    canvas.put(0, method_x, "Type", TITLE_STYLE)
    canvas.put(0, url_x, "URL", TITLE_STYLE)

    index = state.index
    if not len(index):
        canvas.put(1, 1, "(empty)", LABEL_STYLE)
        canvas.put(2, 1, "Use :new [METHOD] [URL]", LABEL_STYLE)
    else:
        view_rows = max(1, height - 1)
        scroll = index.follow_selection(view_rows)
        for row in range(view_rows):
            position = scroll + row
            if position >= len(index):
                break
            request = index.request_at(state.requests, position)
            y = row + 1
            name_width = max(1, min(28, method_x - 2))
            canvas.put(y, 1, request.name[:name_width])
            canvas.put(y, method_x, request.method[:6], method_style(request.method))
            canvas.put(y, url_x, request.url[: max(0, width - url_x - 1)])
            if position == index.selected:
                canvas.style_row(y, SELECTED_STYLE)

    if not layout.columns.show_right and height >= 3:
        canvas.put(height - 1, 1, NARROW_NOTICE, LABEL_STYLE)
    return canvas.render()


def _request_summary(canvas: PaneCanvas, row: int, request: Request, url_lines: int) -> int:
    canvas.put(row, 0, _labelled("name", request.name or "(unnamed)"))
    row += 1
    canvas.put(row, 0, _labelled("method", Text(request.method, style=method_style(request.method))))
    row += 1
    canvas.put(row, 0, Text("url: ", style=LABEL_STYLE))
    lines = wrap(request.url, max(1, canvas.width - 5))[:url_lines] or ["(empty)"]
    row = canvas.put_lines(row, 5, lines)

    if _meaningful(request.auth_type):
        auth = request.auth_type
        if request.auth_secret_ref:
            auth += f" ref={request.auth_secret_ref}"
        if request.auth_key_name:
            auth += f" key={request.auth_key_name}"
        if request.auth_location:
            auth += f" in={request.auth_location}"
        if request.auth_username:
            auth += f" user={request.auth_username}"
        canvas.put(row, 0, _labelled("auth", auth))
        row += 1
    if request.header_key:
        canvas.put(row, 0, _labelled("header", f"{request.header_key}: {request.header_value}"))
        row += 1
    return row


def render_request_detail(state: AppState, layout: MainLayout) -> Text:
    canvas = PaneCanvas(layout.columns.right_width, layout.top_height)
    canvas.put(0, 0, "Request", TITLE_STYLE)
    canvas.rule(1)

    request = state.selected_request()
    if request is None:
        canvas.put_lines(2, 0, wrap("No requests. Use :new to create one.", canvas.width))
        state.scroll.request_body = 0
        return canvas.render()

    url_lines = min(5, max(1, canvas.height - 8))
    row = _request_summary(canvas, 2, request, url_lines)
    canvas.put(row, 0, "Body", TITLE_STYLE)
    state.scroll.request_body = _body_block(
        canvas, row + 1, request.body, state.scroll.request_body
    )
    return canvas.render()


def render_response(state: AppState, layout: MainLayout) -> Text:
    canvas = PaneCanvas(layout.width, layout.response_height)
    response = state.last_response
    if response is None:
        canvas.put(0, 0, "No response yet.", LABEL_STYLE)
        canvas.put(1, 0, "Select a request, press Enter, then y.", LABEL_STYLE)
        state.scroll.response_body = 0
        return canvas.render()

    status_line = Text("status: ", style=LABEL_STYLE)
    status_line.append(str(response.status_code), style=status_style(response.status_code))
    status_line.append(f"  duration={response.duration_ms}ms")
    request_line = _labelled("request", f"{response.method} {response.url}")
    error_line = (
        Text(f"error: {response.error}", style=ERROR_STYLE) if response.error else None
    )

    header = [status_line, _labelled("at", response.at), request_line,
              _labelled("name", response.request_name)]
    if error_line is not None:
        header.append(error_line)

    budget = max(1, canvas.height - 3)
    if len(header) > budget:
        header = [status_line, request_line] + ([error_line] if error_line else [])
        header = header[:budget]

    for row, line in enumerate(header):
        canvas.put(row, 0, line)
    state.scroll.response_body = _body_block(
        canvas, len(header), response.body, state.scroll.response_body
    )
    return canvas.render()


def render_main_status(state: AppState, width: int) -> Text:
    mode = state.main_mode
    match mode:
        case MainSearch():
            line = _prompt("/", mode.buffer.text)
        case MainReverseSearch():
            line = _prompt("?", mode.buffer.text)
        case MainCommand():
            line = _prompt(":", mode.buffer.text)
        case MainAction():
            line = Text(ACTION_PROMPT, style=Style(bold=True))
        case MainDeleteConfirm():
            line = Text(delete_prompt(mode.name), style=Style(color="yellow", bold=True))
        case _:
            line = _status_text(state)
    line.truncate(width, overflow="crop")
    return line


def main_dividers_active(state: AppState) -> tuple[bool, bool]:
    """(vertical, horizontal) divider highlight while dragging."""
    return state.drag is DragMode.VERTICAL, state.drag is DragMode.HORIZONTAL


## Editor screen


def render_editor_fields(state: AppState, layout: SplitLayout) -> Text:
    canvas = PaneCanvas(layout.columns.left_width, layout.content_height)
    draft = state.draft
    if draft is None:
        return canvas.render()

    canvas.put(0, 1, "Edit Request" if draft.existing else "New Request", TITLE_STYLE)
    canvas.rule(1)

    value_x = 16
    for position, draft_field in enumerate(DRAFT_FIELDS):
        y = 2 + position
        canvas.put(y, 1, f"{draft_field.label}:", LABEL_STYLE)
        value = draft.get_value(draft_field)
        if draft_field is DraftField.METHOD:
            canvas.put(y, value_x, value, method_style(value))
        else:
            canvas.put(y, value_x, value)
        if position == draft.field_index:
            focused = INSERT_STYLE if isinstance(draft.mode, EditorInsert) else SELECTED_STYLE
            canvas.style_row(y, focused)

    notes_y = 3 + len(DRAFT_FIELDS)
    canvas.put(notes_y, 1, "Notes", TITLE_STYLE)
    canvas.put(notes_y + 1, 1, f"Body bytes: {len(draft.request.body.encode('utf-8'))}")
    canvas.put(notes_y + 2, 1, "Method field uses h/l cycle only", LABEL_STYLE)

    if not layout.columns.show_right:
        canvas.put(canvas.height - 1, 1, NARROW_NOTICE, LABEL_STYLE)
    return canvas.render()


def render_editor_preview(state: AppState, layout: SplitLayout) -> Text:
    canvas = PaneCanvas(layout.columns.right_width, layout.content_height)
    draft = state.draft
    canvas.put(0, 0, "Preview", TITLE_STYLE)
    canvas.rule(1)
    if draft is None:
        return canvas.render()

    row = _request_summary(canvas, 2, draft.request, min(3, max(1, canvas.height - 8)))
    canvas.put(row, 0, "Body", TITLE_STYLE)
    draft.body_scroll = _body_block(canvas, row + 1, draft.request.body, draft.body_scroll)
    return canvas.render()


def _masked_command(text: str) -> str:
    verb, space, rest = text.partition(" ")
    if verb == "secret" and rest:
        return f"{verb}{space}{'*' * len(rest)}"
    return text


def render_editor_status(state: AppState, width: int) -> Text:
    draft = state.draft
    if draft is not None and isinstance(draft.mode, EditorCommand):
        line = _prompt(":", _masked_command(draft.mode.buffer.text))
    else:
        inserting = draft is not None and isinstance(draft.mode, EditorInsert)
        line = Text("INSERT" if inserting else "NORMAL", style=Style(bold=True))
        if inserting:
            line.append(f" | {draft.current_field.label}: ")
            line.append_text(_prompt("", draft.mode.buffer.text))
        elif state.status.text:
            line.append(" | ")
            line.append_text(_status_text(state))
        else:
            line.append(EDITOR_HINT, style=LABEL_STYLE)
    line.truncate(width, overflow="crop")
    return line


## History screen


def render_history_list(state: AppState, layout: SplitLayout) -> Text:
    width, height = layout.columns.left_width, layout.content_height
    canvas = PaneCanvas(width, height)
    canvas.put(0, 1, "History", TITLE_STYLE)
    canvas.rule(1)

    if not state.runs:
        canvas.put(2, 1, "No history yet", LABEL_STYLE)
        state.scroll.history_list = 0
        return canvas.render()

    compact = width < 60
    method_x, status_x, duration_x, name_x = (
        (1, 9, 15, 23) if compact else (1 + 21, 30, 38, 45)
    )
    if not compact:
        canvas.put(2, 1, "When", TITLE_STYLE)
    canvas.put(2, method_x, "Method", TITLE_STYLE)
    canvas.put(2, status_x, "Status", TITLE_STYLE)
    canvas.put(2, duration_x, "ms", TITLE_STYLE)
    canvas.put(2, name_x, "Name", TITLE_STYLE)

    view_rows = max(1, height - 3)
    selected = state.history_selected
    scroll = state.scroll.history_list
    if selected < scroll:
        scroll = selected
    elif selected >= scroll + view_rows:
        scroll = selected - view_rows + 1
    state.scroll.history_list = scroll = max(0, min(scroll, max(0, len(state.runs) - view_rows)))

    for row in range(view_rows):
        position = scroll + row
        if position >= len(state.runs):
            break
        run = state.runs[position]
        y = 3 + row
        if not compact:
            canvas.put(y, 1, run.created_at)
        canvas.put(y, method_x, run.method[:6], method_style(run.method))
        if run.error and not run.status_code:
            canvas.put(y, status_x, "ERR", ERROR_STYLE)
        else:
            canvas.put(y, status_x, str(run.status_code), status_style(run.status_code))
        canvas.put(y, duration_x, str(run.duration_ms))
        canvas.put(y, name_x, run.request_name)
        if position == selected:
            canvas.style_row(y, SELECTED_STYLE)

    if not layout.columns.show_right:
        canvas.put(height - 1, 1, NARROW_NOTICE, LABEL_STYLE)
    return canvas.render()


def render_history_detail(state: AppState, layout: SplitLayout) -> Text:
    canvas = PaneCanvas(layout.columns.right_width, layout.content_height)
    canvas.put(0, 0, "Run Detail", TITLE_STYLE)
    canvas.rule(1)

    run = state.selected_run()
    if run is None:
        canvas.put(2, 0, "No history yet", LABEL_STYLE)
        state.scroll.history_detail = 0
        return canvas.render()

    status = Text(str(run.status_code), style=status_style(run.status_code))
    status.append(f"  duration={run.duration_ms}ms", style="")
    lines = [
        _labelled("name", run.request_name or "(unnamed)"),
        _labelled("method", Text(run.method, style=method_style(run.method))),
        _labelled("status", status),
        _labelled("at", run.created_at),
        _labelled("id", str(run.id) if run.id is not None else "-"),
    ]
    row = 2
    for line in lines:
        canvas.put(row, 0, line)
        row += 1
    canvas.rule(row)
    canvas.put(row + 1, 0, "Request + Response", TITLE_STYLE)
    state.scroll.history_detail = _body_block(
        canvas, row + 2, history_detail_text(run), state.scroll.history_detail
    )
    return canvas.render()


def render_history_status(state: AppState, width: int) -> Text:
    line = Text(state.status.text, style=ERROR_STYLE) if state.status.is_error else Text(HISTORY_HINT)
    line.truncate(width, overflow="crop")
    return line


## Help screen


def render_help(width: int, height: int, status: Optional[str] = None) -> Text:
    canvas = PaneCanvas(width, height)
    canvas.put(0, 1, "Help", TITLE_STYLE)
    canvas.rule(1)
    row = 2
    for line in HELP_LINES:
        row = canvas.put_lines(row, 1, wrap(line, max(1, width - 2)))
    canvas.put(max(row + 1, height - 1), 1, status or HELP_FOOTER, LABEL_STYLE)
    return canvas.render()
