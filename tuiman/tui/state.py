"""Application state and the per-screen mode types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from tuiman.core.models.request import Request
from tuiman.core.models.run import Run
from tuiman.tui.filter_index import FilterIndex
from tuiman.tui.keys import ChordBuffer, LineBuffer
from tuiman.tui.layout import DEFAULT_RESPONSE_RATIO, DEFAULT_SPLIT_RATIO

MAIN_DEFAULT_STATUS = (
    "j/k move | / search | : command | Enter actions | E edit | d delete"
    " | ZZ/ZQ quit | { } req body | [ ] resp body | drag"
)

MAIN_CHORDS = {
    ("g", "g"): "first",
    ("Z", "Z"): "quit",
    ("Z", "Q"): "quit",
}


class ScreenName(Enum):
    MAIN = "main"
    EDITOR = "editor"
    HISTORY = "history"
    HELP = "help"


## Main screen modes


@dataclass
class MainNormal:
    pass


@dataclass
class MainAction:
    pass


@dataclass
class MainSearch:
    buffer: LineBuffer = field(default_factory=LineBuffer)


@dataclass
class MainReverseSearch:
    buffer: LineBuffer = field(default_factory=LineBuffer)


@dataclass
class MainCommand:
    buffer: LineBuffer = field(default_factory=LineBuffer)


@dataclass(frozen=True)
class MainDeleteConfirm:
    """Snapshot of the delete target, taken when the prompt opens."""

    request_id: str
    name: str


MainMode = Union[
    MainNormal, MainAction, MainSearch, MainReverseSearch, MainCommand, MainDeleteConfirm
]


## Editor screen modes


@dataclass
class EditorNormal:
    pass


@dataclass
class EditorInsert:
    buffer: LineBuffer = field(default_factory=LineBuffer)


@dataclass
class EditorCommand:
    buffer: LineBuffer = field(default_factory=LineBuffer)


EditorMode = Union[EditorNormal, EditorInsert, EditorCommand]


class DraftField(Enum):
    """Editor fields in display order; value is the Request attribute."""

    NAME = "name"
    METHOD = "method"
    URL = "url"
    HEADER_KEY = "header_key"
    HEADER_VALUE = "header_value"
    AUTH_TYPE = "auth_type"
    SECRET_REF = "auth_secret_ref"
    AUTH_KEY_NAME = "auth_key_name"
    AUTH_LOCATION = "auth_location"
    AUTH_USERNAME = "auth_username"

    @property
    def label(self) -> str:
        return FIELD_LABELS[self]


FIELD_LABELS = {
    DraftField.NAME: "Name",
    DraftField.METHOD: "Method",
    DraftField.URL: "URL",
    DraftField.HEADER_KEY: "Header Key",
    DraftField.HEADER_VALUE: "Header Value",
    DraftField.AUTH_TYPE: "Auth Type",
    DraftField.SECRET_REF: "Secret Ref",
    DraftField.AUTH_KEY_NAME: "Auth Key Name",
    DraftField.AUTH_LOCATION: "Auth Location",
    DraftField.AUTH_USERNAME: "Auth Username",
}

DRAFT_FIELDS = tuple(DraftField)


@dataclass
class Draft:
    """Working copy of a request plus editor cursor state."""

    request: Request
    existing: bool
    field_index: int = 0
    mode: EditorMode = field(default_factory=EditorNormal)
    body_scroll: int = 0

    @property
    def current_field(self) -> DraftField:
        return DRAFT_FIELDS[self.field_index]

    def get_value(self, draft_field: DraftField) -> str:
        return getattr(self.request, draft_field.value)

    def set_value(self, draft_field: DraftField, value: str) -> None:
        setattr(self.request, draft_field.value, value)


## Shared state


class DragMode(Enum):
    NONE = "none"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass
class Status:
    text: str = ""
    is_error: bool = False


@dataclass(frozen=True)
class LastResponse:
    request_id: str
    request_name: str
    method: str
    url: str
    at: str
    status_code: int
    duration_ms: int
    error: str
    body: str


@dataclass
class ScrollOffsets:
    request_body: int = 0
    response_body: int = 0
    history_list: int = 0
    history_detail: int = 0


@dataclass
class PaneRatios:
    split: float = DEFAULT_SPLIT_RATIO
    response: float = DEFAULT_RESPONSE_RATIO


@dataclass
class AppState:
    """Everything the UI shows; mutated only by the active screen's handler."""

    requests: List[Request] = field(default_factory=list)
    index: FilterIndex = field(default_factory=FilterIndex)
    screen: ScreenName = ScreenName.MAIN
    main_mode: MainMode = field(default_factory=MainNormal)
    chords: ChordBuffer = field(default_factory=lambda: ChordBuffer(MAIN_CHORDS))
    ratios: PaneRatios = field(default_factory=PaneRatios)
    scroll: ScrollOffsets = field(default_factory=ScrollOffsets)
    last_response: Optional[LastResponse] = None
    draft: Optional[Draft] = None
    runs: List[Run] = field(default_factory=list)
    history_selected: int = 0
    status: Status = field(default_factory=lambda: Status(MAIN_DEFAULT_STATUS))
    drag: DragMode = DragMode.NONE
    width: int = 80
    height: int = 24
    running: bool = True

    def set_status(self, text: str, is_error: bool = False) -> None:
        self.status = Status(text, is_error)

    def set_error(self, text: str) -> None:
        self.status = Status(text, True)

    def clear_status(self) -> None:
        self.status = Status()

    def selected_request(self) -> Optional[Request]:
        return self.index.selected_request(self.requests)

    def selected_run(self) -> Optional[Run]:
        if 0 <= self.history_selected < len(self.runs):
            return self.runs[self.history_selected]
        return None
