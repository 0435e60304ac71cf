"""
Unit tests for the character iterator protocol.
"""

import pytest

from textrange.config import Config
from textrange.dom import comment, document, element, text
from textrange.engine import TextEngine
from textrange.errors import ProtocolMisuseError
from textrange.iterator import CharacterIterator, IteratorState
from textrange.positions import Position


class TestCharacterIterator:
    def setup_method(self):
        self.engine = TextEngine(config=Config())
        self.t = text("ab")
        self.body = element("body", self.t)
        self.root = document(self.body)

    def texts(self, iterator):
        return [c.text for c in iterator]

    def test_forward(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.body, 0))
            assert self.texts(it) == ["a", "b"]

    def test_backward(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 2), backward=True)
            assert self.texts(it) == ["b", "a"]

    def test_forward_end_is_inclusive(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 0), end=Position(self.t, 1))
            assert self.texts(it) == ["a"]

    def test_backward_end_is_exclusive(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 2), backward=True, end=Position(self.t, 1))
            assert self.texts(it) == ["b"]

    def test_characters_carry_positions(self):
        with self.engine.session() as session:
            chars = list(CharacterIterator(session, Position(self.body, 0)))
            assert [c.position for c in chars] == [Position(self.t, 1), Position(self.t, 2)]

    def test_exhausted_returns_none(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 2))
            assert it.next() is None
            assert it.next() is None

    def test_end_inside_collapsed_node(self):
        note = comment("note")
        body = element("body", "a", note, "b")
        root = document(body)
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(body, 0), end=Position(note, 0))
            assert self.texts(it) == ["a"]
        assert root.children


class TestRewind:
    def setup_method(self):
        self.engine = TextEngine(config=Config())
        self.t = text("ab")
        self.root = document(element("body", self.t))

    def test_rewind_redelivers_once(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 0))
            first = it.next()
            it.rewind()
            assert it.state is IteratorState.REWOUND
            assert it.next() is first
            assert it.next().text == "b"

    def test_rewind_before_delivery_fails(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 0))
            with pytest.raises(ProtocolMisuseError):
                it.rewind()

    def test_double_rewind_fails(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 0))
            it.next()
            it.rewind()
            with pytest.raises(ProtocolMisuseError):
                it.rewind()

    def test_use_after_dispose_fails(self):
        with self.engine.session() as session:
            with CharacterIterator(session, Position(self.t, 0)) as it:
                it.next()
            assert it.state is IteratorState.DISPOSED
            with pytest.raises(ProtocolMisuseError):
                it.next()


class TestHiddenBoundaries:
    def setup_method(self):
        self.engine = TextEngine(config=Config())
        self.span = element("span", "x")
        self.hidden = element("div", self.span, style="display:none")
        self.t = text("b c")
        self.body = element("body", "a", self.hidden, self.t)
        self.root = document(self.body)

    def texts(self, iterator):
        return [c.text for c in iterator]

    def test_forward_end_below_hidden_element(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.body, 0), end=Position(self.span, 0))
            assert self.texts(it) == ["a"]

    def test_forward_end_on_hidden_element(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.body, 0), end=Position(self.hidden, 1))
            assert self.texts(it) == ["a"]

    def test_backward_end_below_hidden_element(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 3), backward=True, end=Position(self.span, 1))
            assert self.texts(it) == ["c", " ", "b"]

    def test_start_and_end_in_same_hidden_element(self):
        with self.engine.session() as session:
            forward = CharacterIterator(session, Position(self.hidden, 0), end=Position(self.hidden, 1))
            backward = CharacterIterator(session, Position(self.hidden, 1), backward=True,
                                         end=Position(self.hidden, 0))
            assert self.texts(forward) == []
            assert self.texts(backward) == []

    def test_start_inside_hidden_element(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.span, 0), end=Position(self.t, 1))
            assert self.texts(it) == ["b"]

    def test_start_equal_to_end(self):
        with self.engine.session() as session:
            it = CharacterIterator(session, Position(self.t, 1), end=Position(self.t, 1))
            assert it.next() is None
