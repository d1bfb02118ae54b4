"""Key normalisation, line editing and two-key chords."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

ESCAPE = "escape"
ENTER = "enter"
BACKSPACE = "backspace"
WORD_BACKSPACE = "word_backspace"
CTRL_S = "ctrl+s"

# Terminal key names mapped onto the names handlers understand
_NAMED_KEYS = {
    "escape": ESCAPE,
    "enter": ENTER,
    "ctrl+m": ENTER,
    "ctrl+j": ENTER,
    "backspace": BACKSPACE,
    "ctrl+h": BACKSPACE,
    "alt+backspace": WORD_BACKSPACE,
    "escape+backspace": WORD_BACKSPACE,
    "ctrl+w": WORD_BACKSPACE,
    "ctrl+backspace": WORD_BACKSPACE,
    "ctrl+s": CTRL_S,
}


def key_from_event(event) -> str:
    """Reduce a terminal key event to a handler key name.

    Printable keys become their character (so ``G``, ``{`` and ``?`` arrive
    as themselves); control keys become one of the module constants, or the
    raw key name when nothing maps.
    """
    name = getattr(event, "key", "") or ""
    if name in _NAMED_KEYS:
        return _NAMED_KEYS[name]
    character = getattr(event, "character", None)
    if character and len(character) == 1 and character.isprintable():
        return character
    return name


def is_printable(key: str) -> bool:
    """Single printable ASCII character (space through tilde)."""
    return len(key) == 1 and 32 <= ord(key) <= 126


class LineBuffer:
    """Single-line input buffer for prompts and field editing."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def insert(self, key: str) -> bool:
        if not is_printable(key):
            return False
        self.text += key
        return True

    def backspace(self) -> None:
        self.text = self.text[:-1]

    def delete_word(self) -> None:
        """Drop trailing spaces, then the word before them."""
        text = self.text.rstrip(" ")
        cut = len(text)
        while cut > 0 and text[cut - 1] != " ":
            cut -= 1
        self.text = text[:cut]

    def clear(self) -> None:
        self.text = ""

    def handle(self, key: str) -> bool:
        """Apply an editing key; False when the key is not an edit."""
        if key == BACKSPACE:
            self.backspace()
        elif key == WORD_BACKSPACE:
            self.delete_word()
        else:
            return self.insert(key)
        return True

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ChordResult:
    """``consumed`` means the key belongs to a chord and needs no further handling."""

    consumed: bool
    action: Optional[str] = None


class ChordBuffer:
    """Two-key sequences such as ``g g`` with a single pending keystroke.

    A prefix key is held back; the next key either completes a chord or
    clears the pending key and is handled normally.
    """

    def __init__(self, chords: Dict[Tuple[str, str], str]) -> None:
        self.chords = dict(chords)
        self._prefixes = {first for first, _ in self.chords}
        self.pending: Optional[str] = None

    def feed(self, key: str) -> ChordResult:
        if self.pending is not None:
            action = self.chords.get((self.pending, key))
            self.pending = None
            if action is not None:
                return ChordResult(consumed=True, action=action)

        if key in self._prefixes:
            self.pending = key
            return ChordResult(consumed=True)

        return ChordResult(consumed=False)

    def reset(self) -> None:
        self.pending = None
