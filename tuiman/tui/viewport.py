"""Hard-wrapping text into display lines and windowing it into a viewport."""

import re
from dataclasses import dataclass
from itertools import islice
from typing import Iterator, List, Optional, Sequence

EMPTY_PLACEHOLDER = "(empty)"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _logical_lines(text: str) -> Iterator[str]:
    """Split on any line-break convention; a trailing break adds no line."""
    start = 0
    for match in _LINE_BREAK.finditer(text):
        yield text[start:match.start()]
        start = match.end()
    if start < len(text):
        yield text[start:]


def iter_wrapped(text: str, width: int) -> Iterator[str]:
    """Lazily yield display lines of at most ``width`` characters.

    Long lines are cut at exactly ``width`` characters, no word breaking.
    An empty logical line yields one empty display line.
    """
    if width <= 0 or not text:
        return
    for line in _logical_lines(text):
        if not line:
            yield ""
            continue
        for start in range(0, len(line), width):
            yield line[start:start + width]


def wrap(text: str, width: int) -> List[str]:
    return list(iter_wrapped(text, width))


def join_lines(lines: Sequence[str]) -> str:
    """Inverse of ``wrap`` on line boundaries: every display line is terminated."""
    return "".join(f"{line}\n" for line in lines)


def total_line_count(text: str, width: int) -> int:
    """Number of display lines ``wrap`` would produce, without building them."""
    if width <= 0 or not text:
        return 0
    return sum(max(1, -(-len(line) // width)) for line in _logical_lines(text))


def clamp_scroll(offset: int, total_lines: int, viewport_height: int) -> int:
    """Keep a scroll offset within ``[0, total_lines - viewport_height]``."""
    if viewport_height <= 0 or total_lines <= viewport_height:
        return 0
    return max(0, min(offset, total_lines - viewport_height))


def scroll_indicator(offset: int, shown: int, total: int) -> str:
    """``^ body 3-10/40 v`` with the arrows blanked when that way is exhausted."""
    up = "^" if offset > 0 else " "
    down = "v" if offset + shown < total else " "
    return f"{up} body {offset + 1}-{offset + shown}/{total} {down}"


@dataclass(frozen=True)
class Window:
    """A clamped slice of a longer line sequence."""

    offset: int
    lines: List[str]
    indicator: Optional[str] = None
    total: int = 0

    @property
    def rows(self) -> List[str]:
        """Visible content followed by the indicator row, if any."""
        if self.indicator is None:
            return list(self.lines)
        return [*self.lines, self.indicator]


def _content_rows(total: int, viewport_height: int) -> tuple[int, bool]:
    """Rows available for content and whether an indicator row is reserved."""
    if total > viewport_height and viewport_height >= 2:
        return viewport_height - 1, True
    return viewport_height, False


def draw_windowed(lines: Sequence[str], start_offset: int, viewport_height: int) -> Window:
    """Window an already wrapped line sequence into ``viewport_height`` rows.

    When the lines do not fit, the last row is given over to the scroll
    indicator.
    """
    if viewport_height <= 0:
        return Window(offset=0, lines=[], total=len(lines))

    total = len(lines)
    content, with_indicator = _content_rows(total, viewport_height)
    offset = clamp_scroll(start_offset, total, content)
    visible = list(lines[offset:offset + content])
    indicator = scroll_indicator(offset, len(visible), total) if with_indicator else None
    return Window(offset=offset, lines=visible, indicator=indicator, total=total)


def body_preview(text: str, width: int, viewport_height: int, offset: int) -> Window:
    """Wrap and window ``text`` without materialising lines outside the view.

    Empty text renders ``(empty)`` and forces the offset to 0.
    """
    if not text:
        return Window(offset=0, lines=[EMPTY_PLACEHOLDER][:max(viewport_height, 0)], total=1)
    if viewport_height <= 0 or width <= 0:
        return Window(offset=0, lines=[], total=0)

    total = total_line_count(text, width)
    content, with_indicator = _content_rows(total, viewport_height)
    offset = clamp_scroll(offset, total, content)
    visible = list(islice(iter_wrapped(text, width), offset, offset + content))
    indicator = scroll_indicator(offset, len(visible), total) if with_indicator else None
    return Window(offset=offset, lines=visible, indicator=indicator, total=total)
