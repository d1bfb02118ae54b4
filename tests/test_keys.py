"""
Tests for key normalisation, line buffers and chords
"""
from types import SimpleNamespace

import pytest

from tuiman.tui import keys
from tuiman.tui.keys import ChordBuffer, LineBuffer, key_from_event


class TestKeyFromEvent:
    """Tests for reducing terminal key events"""

    @pytest.mark.parametrize(
        "key,character,expected",
        [
            ("escape", "\x1b", keys.ESCAPE),
            ("enter", "\r", keys.ENTER),
            ("backspace", "\x08", keys.BACKSPACE),
            ("ctrl+w", "\x17", keys.WORD_BACKSPACE),
            ("ctrl+s", "\x13", keys.CTRL_S),
            ("G", "G", "G"),
            ("left_curly_bracket", "{", "{"),
            ("question_mark", "?", "?"),
            ("space", " ", " "),
            ("up", None, "up"),
        ],
    )
    def test_mapping(self, key, character, expected):
        assert key_from_event(SimpleNamespace(key=key, character=character)) == expected


class TestLineBuffer:
    """Tests for prompt editing"""

    def test_printable_ascii_only(self):
        buffer = LineBuffer()
        assert buffer.handle("a")
        assert buffer.handle(" ")
        assert not buffer.handle("é")
        assert not buffer.handle("up")
        assert buffer.text == "a "

    def test_backspace(self):
        buffer = LineBuffer("abc")
        buffer.handle(keys.BACKSPACE)
        assert buffer.text == "ab"
        LineBuffer("").backspace()

    def test_delete_word(self):
        buffer = LineBuffer("new POST https://a.test  ")
        buffer.handle(keys.WORD_BACKSPACE)
        assert buffer.text == "new POST "
        buffer.handle(keys.WORD_BACKSPACE)
        assert buffer.text == "new "


class TestChordBuffer:
    """Tests for two-key chords"""

    @pytest.fixture
    def chords(self):
        return ChordBuffer({("g", "g"): "first", ("Z", "Z"): "quit", ("Z", "Q"): "quit"})

    def test_completed_chord(self, chords):
        assert chords.feed("g").consumed
        result = chords.feed("g")
        assert result.consumed
        assert result.action == "first"

    def test_broken_chord_passes_key_through(self, chords):
        chords.feed("Z")
        result = chords.feed("j")
        assert not result.consumed
        assert chords.pending is None

    def test_prefix_after_broken_chord_starts_again(self, chords):
        chords.feed("Z")
        assert chords.feed("g").consumed
        assert chords.feed("g").action == "first"

    def test_reset(self, chords):
        chords.feed("Z")
        chords.reset()
        assert not chords.feed("Q").consumed
