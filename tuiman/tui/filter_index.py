"""Filtered, order-preserving view over the request collection."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from tuiman.core.models.request import Request


def matches(request: Request, filter_text: str) -> bool:
    """Case-insensitive substring match on name or url; empty matches all."""
    if not filter_text:
        return True
    needle = filter_text.lower()
    return needle in request.name.lower() or needle in request.url.lower()


@dataclass(frozen=True)
class FilterResult:
    visible_order: Tuple[int, ...]
    selected: int


def apply_filter(
    collection: Sequence[Request],
    filter_text: str,
    preferred_select_id: Optional[str] = None,
) -> FilterResult:
    """Recompute the visible indices and where the selection lands."""
    visible = tuple(i for i, request in enumerate(collection) if matches(request, filter_text))
    selected = 0
    if preferred_select_id:
        for position, index in enumerate(visible):
            if collection[index].id == preferred_select_id:
                selected = position
                break
    return FilterResult(visible_order=visible, selected=selected)


class FilterIndex:
    """Selection state over the filtered subset.

    ``selected`` and ``scroll`` are positions within the visible subset,
    never indices into the full collection.
    """

    def __init__(self) -> None:
        self.filter_text = ""
        self.visible: Tuple[int, ...] = ()
        self.selected = 0
        self.scroll = 0

    def apply(
        self,
        collection: Sequence[Request],
        filter_text: Optional[str] = None,
        preferred_select_id: Optional[str] = None,
    ) -> None:
        if filter_text is not None:
            self.filter_text = filter_text
        result = apply_filter(collection, self.filter_text, preferred_select_id)
        self.visible = result.visible_order
        self.selected = result.selected
        self.scroll = 0

    def __len__(self) -> int:
        return len(self.visible)

    def selected_index(self) -> Optional[int]:
        """Index into the full collection of the selected request."""
        if not self.visible:
            return None
        return self.visible[self.selected]

    def selected_request(self, collection: Sequence[Request]) -> Optional[Request]:
        index = self.selected_index()
        return collection[index] if index is not None else None

    def request_at(self, collection: Sequence[Request], position: int) -> Request:
        return collection[self.visible[position]]

    ## Navigation (no wraparound)

    def next(self) -> bool:
        if self.selected + 1 < len(self.visible):
            self.selected += 1
            return True
        return False

    def prev(self) -> bool:
        if self.selected > 0:
            self.selected -= 1
            return True
        return False

    def first(self) -> bool:
        moved = self.selected != 0
        self.selected = 0
        return moved

    def last(self) -> bool:
        target = max(0, len(self.visible) - 1)
        moved = self.selected != target
        self.selected = target
        return moved

    def successor_id(self, collection: Sequence[Request]) -> Optional[str]:
        """Id to select after the current item is removed: next, else previous."""
        if len(self.visible) <= 1:
            return None
        if self.selected + 1 < len(self.visible):
            return self.request_at(collection, self.selected + 1).id
        return self.request_at(collection, self.selected - 1).id

    def follow_selection(self, view_rows: int) -> int:
        """Adjust the list scroll so the selection stays inside ``view_rows``."""
        view_rows = max(1, view_rows)
        if self.selected < self.scroll:
            self.scroll = self.selected
        elif self.selected >= self.scroll + view_rows:
            self.scroll = self.selected - view_rows + 1
        self.scroll = max(0, min(self.scroll, max(0, len(self.visible) - view_rows)))
        return self.scroll
