"""
Unit tests for word tokenization and the tokenized text provider.
"""

import logging
import re

from textrange.characters import NON_SPACE, Character
from textrange.config import Config
from textrange.dom import document, element, text
from textrange.engine import TextEngine
from textrange.iterator import CharacterIterator
from textrange.positions import Position
from textrange.words import (
    DEFAULT_LANGUAGE,
    WORD_PATTERNS,
    Token,
    TokenizedTextProvider,
    WordOptions,
    consume_word,
    default_tokenizer,
)


def characters(s):
    node = text(s)
    return [Character(c, Position(node, i + 1), kind=NON_SPACE) for i, c in enumerate(s)]


def token_texts(tokens):
    return [(str(t), t.is_word) for t in tokens]


class TestDefaultTokenizer:
    def test_words_and_gaps(self):
        tokens = default_tokenizer(characters("one, two"), WordOptions())
        assert token_texts(tokens) == [("one", True), (", ", False), ("two", True)]

    def test_leading_gap(self):
        tokens = default_tokenizer(characters("  hi"), WordOptions())
        assert token_texts(tokens) == [("  ", False), ("hi", True)]

    def test_apostrophes_stay_inside_words(self):
        tokens = default_tokenizer(characters("don't"), WordOptions())
        assert token_texts(tokens) == [("don't", True)]

    def test_include_trailing_space(self):
        tokens = default_tokenizer(characters("one two\nthree"), WordOptions(include_trailing_space=True))
        assert token_texts(tokens) == [("one ", True), ("two", True), ("\n", False), ("three", True)]

    def test_empty_input(self):
        assert default_tokenizer([], WordOptions()) == []

    def test_tokens_partition_input(self):
        chars = characters("a-b  c!")
        tokens = default_tokenizer(chars, WordOptions())
        assert [c for t in tokens for c in t.characters] == chars


class TestWordOptions:
    def test_string_pattern_compiled_case_insensitive(self):
        options = WordOptions(word_pattern="[a-z]+")
        assert options.word_pattern.flags & re.IGNORECASE
        tokens = options.tokenize(characters("ABC1"))
        assert token_texts(tokens) == [("ABC", True), ("1", False)]

    def test_compiled_pattern_kept(self):
        pattern = re.compile(r"\d+")
        assert WordOptions(word_pattern=pattern).word_pattern is pattern

    def test_custom_tokenizer(self):
        def one_token(chars, options):
            return [Token(True, chars)]

        options = WordOptions(tokenizer=one_token)
        assert token_texts(options.tokenize(characters("a b"))) == [("a b", True)]

    def test_token_repr(self):
        assert repr(Token(True, characters("hi"))) == "Token('hi', is_word=True)"

    def test_default_pattern_comes_from_language(self):
        assert WordOptions().word_pattern.pattern == WORD_PATTERNS[DEFAULT_LANGUAGE]

    def test_unknown_language_uses_default_pattern(self):
        assert WordOptions(language="tlh").word_pattern.pattern == WORD_PATTERNS[DEFAULT_LANGUAGE]

    def test_language_pattern_selected(self, monkeypatch):
        monkeypatch.setitem(WORD_PATTERNS, "xx", "[a-z]")
        options = WordOptions(language="xx")
        assert token_texts(options.tokenize(characters("ab"))) == [("a", True), ("b", True)]

    def test_explicit_pattern_beats_language(self, monkeypatch):
        monkeypatch.setitem(WORD_PATTERNS, "xx", "[a-z]")
        assert WordOptions(word_pattern=r"\d+", language="xx").word_pattern.pattern == r"\d+"


class TestConsumeWord:
    def test_word_and_following_space(self):
        t = text("one two three")
        root = document(element("body", t))
        with TextEngine(config=Config()).session() as session:
            it = CharacterIterator(session, Position(t, 0))
            chunks = ["".join(c.text for c in consume_word(it)) for _ in range(4)]
        assert chunks == ["one ", "two ", "three", ""]
        assert root.children


class TestTokenizedTextProvider:
    def setup_method(self):
        self.engine = TextEngine(config=Config())
        self.t = text("one two three")
        self.root = document(element("body", self.t))

    def test_forward_tokens(self):
        with self.engine.session() as session:
            with TokenizedTextProvider(session, Position(self.t, 0), None, WordOptions()) as provider:
                tokens = []
                while (token := provider.next_end_token()) is not None:
                    tokens.append(token)
        assert token_texts(tokens) == [
            ("one", True), (" ", False), ("two", True), (" ", False), ("three", True),
        ]

    def test_backward_tokens(self):
        with self.engine.session() as session:
            with TokenizedTextProvider(session, Position(self.t, 13), None, WordOptions()) as provider:
                words = []
                while (token := provider.previous_start_token()) is not None:
                    if token.is_word:
                        words.append(str(token))
        assert words == ["three", "two", "one"]

    def test_seed_inside_word_gives_whole_word(self):
        with self.engine.session() as session:
            with TokenizedTextProvider(session, Position(self.t, 5), None, WordOptions()) as provider:
                assert str(provider.next_end_token()) == "two"
                assert str(provider.previous_start_token()) == "two"

    def test_seed_logs_token_counts(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="textrange.words"):
            with self.engine.session() as session:
                with TokenizedTextProvider(session, Position(self.t, 5), None, WordOptions()):
                    pass
        assert "2 tokens behind, 2 ahead" in caplog.text
        assert "Token(" not in caplog.text


class TestWordIterator:
    def setup_method(self):
        self.engine = TextEngine(config=Config())
        self.t = text("one two three")
        self.root = document(element("body", self.t))

    def test_forward_words(self):
        with self.engine.create_word_iterator(self.t, 0) as words:
            assert [str(t) for t in words if t.is_word] == ["one", "two", "three"]

    def test_backward_words(self):
        with self.engine.create_word_iterator(self.t, 13, "backward") as words:
            assert [str(t) for t in words if t.is_word] == ["three", "two", "one"]

    def test_disposed_iterator_returns_none(self):
        words = self.engine.create_word_iterator(self.t, 0)
        words.dispose()
        assert words.next() is None
