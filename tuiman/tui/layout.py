"""Pane geometry for the main, editor and history screens.

Everything here is a pure function of terminal size and split ratios so it
can be recomputed on every redraw. Ratios are applied as given; callers
clamp them with ``nudge_split_ratio``/``nudge_response_ratio``.
"""

import math
from dataclasses import dataclass
from typing import Optional

STATUS_HEIGHT = 1
MIN_WIDTH = 24
MIN_CONTENT_HEIGHT = 3

MAIN_MIN_LEFT = 24
MAIN_MIN_RIGHT = 20
MAIN_MIN_TOP = 4
MAIN_MIN_RESPONSE = 4

EDITOR_MIN_LEFT = 42
EDITOR_MIN_RIGHT = 30

HISTORY_MIN_LEFT = MAIN_MIN_LEFT
HISTORY_MIN_RIGHT = MAIN_MIN_RIGHT

DEFAULT_SPLIT_RATIO = 0.66
DEFAULT_RESPONSE_RATIO = 0.28
RATIO_STEP = 0.03
SPLIT_RATIO_RANGE = (0.20, 0.80)
RESPONSE_RATIO_RANGE = (0.15, 0.70)

# Pointer distance (cells) that still counts as grabbing a divider
DIVIDER_GRAB_DISTANCE = 2


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp(value, low, high):
    return max(low, min(value, high))


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom


EMPTY_RECT = Rect(0, 0, 0, 0)


@dataclass(frozen=True)
class Columns:
    """Result of splitting a width into left pane, divider and right pane."""

    left_width: int
    separator_x: int = -1
    right_x: int = 0
    right_width: int = 0

    @property
    def show_right(self) -> bool:
        return self.right_width > 0


def split_columns(width: int, ratio: float, min_left: int, min_right: int) -> Columns:
    """Carve a right pane when the width allows both minimums plus a divider."""
    if width < min_left + min_right + 1:
        return Columns(left_width=width)

    left = clamp(round_half_up(ratio * width), min_left, width - min_right - 1)
    return Columns(
        left_width=left,
        separator_x=left,
        right_x=left + 1,
        right_width=width - left - 1,
    )


@dataclass(frozen=True)
class MainLayout:
    valid: bool
    width: int
    height: int
    available_height: int = 0
    top_height: int = 0
    response_height: int = 0
    horizontal_separator_y: int = -1
    columns: Columns = Columns(left_width=0)

    @property
    def show_response(self) -> bool:
        return self.response_height > 0

    @property
    def response_y(self) -> int:
        return self.horizontal_separator_y + 1

    @property
    def list_rect(self) -> Rect:
        return Rect(0, 0, self.columns.left_width, self.top_height)

    @property
    def separator_rect(self) -> Rect:
        if not self.columns.show_right:
            return EMPTY_RECT
        return Rect(self.columns.separator_x, 0, 1, self.top_height)

    @property
    def detail_rect(self) -> Rect:
        if not self.columns.show_right:
            return EMPTY_RECT
        return Rect(self.columns.right_x, 0, self.columns.right_width, self.top_height)

    @property
    def horizontal_separator_rect(self) -> Rect:
        if not self.show_response:
            return EMPTY_RECT
        return Rect(0, self.horizontal_separator_y, self.width, 1)

    @property
    def response_rect(self) -> Rect:
        if not self.show_response:
            return EMPTY_RECT
        return Rect(0, self.response_y, self.width, self.response_height)

    @property
    def status_rect(self) -> Rect:
        return Rect(0, self.height - STATUS_HEIGHT, self.width, STATUS_HEIGHT)

    def near_vertical_divider(self, x: int, y: int) -> bool:
        return (
            self.valid
            and self.columns.show_right
            and abs(x - self.columns.separator_x) <= DIVIDER_GRAB_DISTANCE
            and y < self.top_height
        )

    def near_horizontal_divider(self, x: int, y: int) -> bool:
        return (
            self.valid
            and self.show_response
            and abs(y - self.horizontal_separator_y) <= DIVIDER_GRAB_DISTANCE
        )


@dataclass(frozen=True)
class SplitLayout:
    """Two side-by-side panes above the status line (editor, history)."""

    valid: bool
    width: int
    height: int
    content_height: int = 0
    columns: Columns = Columns(left_width=0)
    min_left: int = 0
    min_right: int = 0

    @property
    def left_rect(self) -> Rect:
        return Rect(0, 0, self.columns.left_width, self.content_height)

    @property
    def separator_rect(self) -> Rect:
        if not self.columns.show_right:
            return EMPTY_RECT
        return Rect(self.columns.separator_x, 0, 1, self.content_height)

    @property
    def right_rect(self) -> Rect:
        if not self.columns.show_right:
            return EMPTY_RECT
        return Rect(self.columns.right_x, 0, self.columns.right_width, self.content_height)

    @property
    def status_rect(self) -> Rect:
        return Rect(0, self.height - STATUS_HEIGHT, self.width, STATUS_HEIGHT)

    def near_vertical_divider(self, x: int, y: int) -> bool:
        return (
            self.valid
            and self.columns.show_right
            and abs(x - self.columns.separator_x) <= DIVIDER_GRAB_DISTANCE
        )


def _too_small(width: int, height: int) -> bool:
    return height - STATUS_HEIGHT < MIN_CONTENT_HEIGHT or width < MIN_WIDTH


def compute_main_layout(
    width: int, height: int, split_ratio: float, response_ratio: float
) -> MainLayout:
    """List/detail panes on top, response pane below, status line last."""
    if _too_small(width, height):
        return MainLayout(valid=False, width=width, height=height)

    available = height - STATUS_HEIGHT
    response_height = 0
    separator_y = -1
    top_height = available

    if available >= MAIN_MIN_TOP + MAIN_MIN_RESPONSE + 1:
        response_height = clamp(
            round_half_up(response_ratio * available),
            MAIN_MIN_RESPONSE,
            available - MAIN_MIN_TOP - 1,
        )
        separator_y = available - response_height - 1
        top_height = separator_y

    if top_height < 2:
        return MainLayout(valid=False, width=width, height=height)

    return MainLayout(
        valid=True,
        width=width,
        height=height,
        available_height=available,
        top_height=top_height,
        response_height=response_height,
        horizontal_separator_y=separator_y,
        columns=split_columns(width, split_ratio, MAIN_MIN_LEFT, MAIN_MIN_RIGHT),
    )


def _compute_split_layout(
    width: int, height: int, split_ratio: float, min_left: int, min_right: int
) -> SplitLayout:
    if _too_small(width, height):
        return SplitLayout(valid=False, width=width, height=height)

    return SplitLayout(
        valid=True,
        width=width,
        height=height,
        content_height=height - STATUS_HEIGHT,
        columns=split_columns(width, split_ratio, min_left, min_right),
        min_left=min_left,
        min_right=min_right,
    )


def compute_editor_layout(width: int, height: int, split_ratio: float) -> SplitLayout:
    """Field list on the left, live preview on the right."""
    return _compute_split_layout(
        width, height, split_ratio, EDITOR_MIN_LEFT, EDITOR_MIN_RIGHT
    )


def compute_history_layout(width: int, height: int, split_ratio: float) -> SplitLayout:
    """Run list on the left, run detail on the right."""
    return _compute_split_layout(
        width, height, split_ratio, HISTORY_MIN_LEFT, HISTORY_MIN_RIGHT
    )


## Ratio adjustment


def nudge_split_ratio(ratio: float, delta: float) -> float:
    return clamp(ratio + delta, *SPLIT_RATIO_RANGE)


def nudge_response_ratio(ratio: float, delta: float) -> float:
    return clamp(ratio + delta, *RESPONSE_RATIO_RANGE)


def split_ratio_from_x(x: int, width: int, min_left: int, min_right: int) -> Optional[float]:
    """Split ratio that puts the vertical divider at column ``x``."""
    if width <= 0:
        return None
    left = clamp(x, min_left, width - min_right - 1)
    return left / width


def response_ratio_from_y(y: int, available_height: int) -> Optional[float]:
    """Response ratio that puts the horizontal divider at row ``y``."""
    if available_height < MAIN_MIN_TOP + MAIN_MIN_RESPONSE + 1:
        return None
    separator_y = clamp(y, MAIN_MIN_TOP, available_height - MAIN_MIN_RESPONSE - 1)
    response_height = available_height - separator_y - 1
    return response_height / available_height
