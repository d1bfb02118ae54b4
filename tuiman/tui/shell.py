"""Application shell: owns the state, routes input to the active screen."""

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from tuiman.tui.controllers import (
    EditorController,
    HelpController,
    HistoryController,
    MainController,
    ScreenController,
    Services,
)
from tuiman.tui.controllers.main import resize_status
from tuiman.tui.layout import (
    MAIN_MIN_LEFT,
    MAIN_MIN_RIGHT,
    compute_editor_layout,
    compute_history_layout,
    compute_main_layout,
    response_ratio_from_y,
    split_ratio_from_x,
)
from tuiman.tui.state import MAIN_DEFAULT_STATUS, AppState, DragMode, PaneRatios, ScreenName
from tuiman.utils.logging import get_logger

logger = get_logger(__name__)


class PointerAction(Enum):
    PRESS = "press"
    MOVE = "move"
    RELEASE = "release"


@dataclass(frozen=True)
class PointerEvent:
    """Mouse event in terminal cell coordinates."""

    action: PointerAction
    x: int
    y: int


class AppShell:
    """Single writer of ``AppState``: one input event is handled at a time."""

    def __init__(self, services: Services, ratios: PaneRatios | None = None):
        self.services = services
        self.state = AppState(ratios=ratios or PaneRatios())
        self.controllers: dict[ScreenName, ScreenController] = {
            ScreenName.MAIN: MainController(self.state, services),
            ScreenName.EDITOR: EditorController(self.state, services),
            ScreenName.HISTORY: HistoryController(self.state, services),
            ScreenName.HELP: HelpController(self.state, services),
        }

    def startup(self) -> None:
        """Load the request collection for the first frame."""
        if self.controllers[ScreenName.MAIN].reload_requests():
            self.state.set_status(MAIN_DEFAULT_STATUS)
        logger.info(f"Loaded {len(self.state.requests)} requests")

    def resize(self, width: int, height: int) -> None:
        self.state.width = max(0, width)
        self.state.height = max(0, height)

    def handle_key(self, key: str) -> None:
        """Dispatch one key to the active screen. Any key ends a drag."""
        self.state.drag = DragMode.NONE
        self.controllers[self.state.screen].handle_key(key)

    ## Pointer drag

    def handle_pointer(self, event: PointerEvent) -> bool:
        """Track divider drags. Returns True when pane ratios changed."""
        state = self.state
        if event.action is PointerAction.RELEASE:
            state.drag = DragMode.NONE
            return False

        screen = state.screen
        match screen:
            case ScreenName.MAIN:
                return self._drag_main(event)
            case ScreenName.EDITOR | ScreenName.HISTORY:
                return self._drag_split(event, screen)
            case ScreenName.HELP:
                return False
            case _:
                assert_never(screen)

    def _drag_main(self, event: PointerEvent) -> bool:
        state = self.state
        layout = compute_main_layout(
            state.width, state.height, state.ratios.split, state.ratios.response
        )
        if not layout.valid:
            state.drag = DragMode.NONE
            return False

        if event.action is PointerAction.PRESS:
            if layout.near_vertical_divider(event.x, event.y):
                state.drag = DragMode.VERTICAL
            elif layout.near_horizontal_divider(event.x, event.y):
                state.drag = DragMode.HORIZONTAL
            else:
                state.drag = DragMode.NONE
                return False

        match state.drag:
            case DragMode.VERTICAL:
                ratio = split_ratio_from_x(event.x, state.width, MAIN_MIN_LEFT, MAIN_MIN_RIGHT)
                if ratio is None:
                    return False
                state.ratios.split = ratio
            case DragMode.HORIZONTAL:
                ratio = response_ratio_from_y(event.y, layout.available_height)
                if ratio is None:
                    return False
                state.ratios.response = ratio
            case DragMode.NONE:
                return False

        state.set_status(resize_status(state))
        return True

    def _drag_split(self, event: PointerEvent, screen: ScreenName) -> bool:
        state = self.state
        compute = compute_editor_layout if screen is ScreenName.EDITOR else compute_history_layout
        layout = compute(state.width, state.height, state.ratios.split)
        if not layout.valid:
            state.drag = DragMode.NONE
            return False

        if event.action is PointerAction.PRESS:
            if not layout.near_vertical_divider(event.x, event.y):
                state.drag = DragMode.NONE
                return False
            state.drag = DragMode.VERTICAL

        if state.drag is not DragMode.VERTICAL:
            return False

        ratio = split_ratio_from_x(event.x, state.width, layout.min_left, layout.min_right)
        if ratio is None:
            return False
        state.ratios.split = ratio
        return True

    @property
    def running(self) -> bool:
        return self.state.running
