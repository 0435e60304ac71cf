"""
Word tokenization over visible characters.

The tokenizer is a strategy: any callable (characters, word_options) ->
list[Token] that partitions the characters into word and non-word tokens. The
default one scans the joined text with a word regex.

TokenizedTextProvider pulls characters lazily from a pair of iterators seeded
at one position and hands out tokens forward (next_end_token) or backward
(previous_start_token). Text is consumed a word at a time and the tail of the
buffer is re-tokenized together with each new chunk, so a word split across
chunks still comes out as one token.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .characters import Character
from .iterator import CharacterIterator
from .options import CharacterOptions, is_direction_backward
from .positions import Position
from .session import Session

logger = logging.getLogger(__name__)

ALL_WHITESPACE = re.compile(r"^[\t-\r \u0085\u00A0\u1680\u180E\u2000-\u200B\u2028\u2029\u202F\u205F\u3000]+$")
NON_LINE_BREAK_WHITESPACE = re.compile(r"^[\t \u00A0\u1680\u180E\u2000-\u200B\u202F\u205F\u3000]+$")

DEFAULT_LANGUAGE = "en"
DEFAULT_WORD_PATTERN = r"[a-z0-9]+('[a-z0-9]+)*"

# Default word pattern per language; unknown languages use the default one
WORD_PATTERNS: dict[str, str] = {
    DEFAULT_LANGUAGE: DEFAULT_WORD_PATTERN,
}


@dataclass
class Token:
    """A run of characters that is, or is not, a word."""
    is_word: bool
    characters: list[Character] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(c.text for c in self.characters)

    def __repr__(self) -> str:
        return f"Token({str(self)!r}, is_word={self.is_word})"


Tokenizer = Callable[[list[Character], "WordOptions"], list[Token]]


@dataclass(frozen=True)
class WordOptions:
    """Word boundary settings.

    Without a word_pattern the language's entry in WORD_PATTERNS is used.
    String patterns are compiled case-insensitively.
    """
    word_pattern: re.Pattern | str | None = None
    include_trailing_space: bool = False
    tokenizer: Tokenizer | None = None
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self):
        if self.word_pattern is None:
            pattern = WORD_PATTERNS.get(self.language, WORD_PATTERNS[DEFAULT_LANGUAGE])
            object.__setattr__(self, "word_pattern", pattern)
        if isinstance(self.word_pattern, str):
            object.__setattr__(self, "word_pattern", re.compile(self.word_pattern, re.IGNORECASE))

    def tokenize(self, characters: list[Character]) -> list[Token]:
        tokenizer = self.tokenizer or default_tokenizer
        return tokenizer(characters, self)


def default_tokenizer(characters: list[Character], word_options: WordOptions) -> list[Token]:
    """Regex words; the gaps between them become non-word tokens."""
    text = "".join(c.text for c in characters)
    tokens: list[Token] = []
    last_end = 0

    for match in word_options.word_pattern.finditer(text):
        start, end = match.span()
        if start == end or start < last_end:
            continue
        if start > last_end:
            tokens.append(Token(False, characters[last_end:start]))
        if word_options.include_trailing_space:
            while end < len(text) and NON_LINE_BREAK_WHITESPACE.match(text[end]):
                end += 1
        tokens.append(Token(True, characters[start:end]))
        last_end = end

    if last_end < len(characters):
        tokens.append(Token(False, characters[last_end:]))

    return tokens


def consume_word(iterator: CharacterIterator) -> list[Character]:
    """Pull one word and the whitespace after it (in travel direction)."""
    chars: list[Character] = []
    inside_word = passed_boundary = False
    while True:
        char = iterator.next()
        if char is None:
            break
        if ALL_WHITESPACE.match(char.text):
            if inside_word:
                inside_word = False
                passed_boundary = True
        else:
            if passed_boundary:
                iterator.rewind()
                break
            inside_word = True
        chars.append(char)
    return chars


def _token_index(tokens: list[Token], char: Character) -> int:
    for i, token in enumerate(tokens):
        if any(c is char for c in token.characters):
            return i
    raise ValueError("Character not found in any token")


class TokenizedTextProvider:
    """Tokens on both sides of a seed position, fetched on demand."""

    def __init__(self, session: Session, position: Position,
                 character_options: CharacterOptions | None, word_options: WordOptions):
        self.word_options = word_options
        self._forward = CharacterIterator(session, position, False, None, character_options)
        self._backward = CharacterIterator(session, position, True, None, character_options)

        forward_chars = consume_word(self._forward)
        backward_chars = consume_word(self._backward)[::-1]
        tokens = word_options.tokenize(backward_chars + forward_chars)

        self._forward_tokens = tokens[_token_index(tokens, forward_chars[0]):] if forward_chars else []
        self._backward_tokens = tokens[:_token_index(tokens, backward_chars[-1]) + 1] if backward_chars else []
        logger.debug("Seeded word provider at %s: %d tokens behind, %d ahead",
                     position, len(self._backward_tokens), len(self._forward_tokens))

    def next_end_token(self) -> Token | None:
        """Next token forward, or None at the end of the text."""
        while not self._forward_tokens or (len(self._forward_tokens) == 1 and not self._forward_tokens[0].is_word):
            more = consume_word(self._forward)
            if not more:
                break
            tail = self._forward_tokens[0].characters if self._forward_tokens else []
            self._forward_tokens = self.word_options.tokenize(tail + more)
        return self._forward_tokens.pop(0) if self._forward_tokens else None

    def previous_start_token(self) -> Token | None:
        """Next token backward, or None at the start of the text."""
        while not self._backward_tokens or (len(self._backward_tokens) == 1 and not self._backward_tokens[0].is_word):
            more = consume_word(self._backward)
            if not more:
                break
            head = self._backward_tokens[0].characters if self._backward_tokens else []
            self._backward_tokens = self.word_options.tokenize(more[::-1] + head)
        return self._backward_tokens.pop() if self._backward_tokens else None

    def dispose(self):
        self._forward.dispose()
        self._backward.dispose()
        self._forward_tokens = []
        self._backward_tokens = []

    def __enter__(self) -> TokenizedTextProvider:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


class WordIterator:
    """Tokens from a starting point, in one direction."""

    def __init__(self, provider: TokenizedTextProvider, direction: str = "forward"):
        self.provider = provider
        self.backward = is_direction_backward(direction)
        self._disposed = False

    def next(self) -> Token | None:
        if self._disposed:
            return None
        if self.backward:
            return self.provider.previous_start_token()
        return self.provider.next_end_token()

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token is None:
                return
            yield token

    def dispose(self):
        if not self._disposed:
            self.provider.dispose()
            self._disposed = True

    def __enter__(self) -> WordIterator:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
