"""
TextEngine - entry point for textrange.

Wires a style oracle and a Config into a classifier, owns the session
lifecycle, and creates ranges, selections and word iterators bound to itself.

Sessions are re-entrant: the outermost session() call opens one, nested calls
reuse it, and it is detached when the outermost call exits. Every public range
and selection operation runs inside session(), so callers that batch several
operations under one explicit `with engine.session():` share the caches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

from .classify import Classifier
from .config import Config, get_config
from .dom import Node
from .errors import ConfigurationError
from .options import CharacterOptions, FindOptions
from .positions import Position
from .ranges import Range
from .selection import Selection
from .session import Session
from .style import DefaultStyleOracle, StyleOracle
from .words import TokenizedTextProvider, WordIterator, WordOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class EngineDefaults:
    """Option defaults derived from configuration."""
    word_options: WordOptions
    find_options: FindOptions


class TextEngine:
    """Visible-text engine over host trees."""

    def __init__(self, style_oracle: StyleOracle | None = None, config: Config | None = None):
        oracle = style_oracle if style_oracle is not None else DefaultStyleOracle()
        if not callable(getattr(oracle, "computed_style", None)):
            raise ConfigurationError(f"{type(oracle).__name__} has no computed_style(element, prop) method")

        self.config = config if config is not None else get_config()
        self.style_oracle = oracle
        self.classifier = Classifier(oracle, self.config.layout)
        self.defaults = EngineDefaults(
            word_options=WordOptions(
                word_pattern=self.config.words.word_pattern,
                include_trailing_space=self.config.words.include_trailing_space,
            ),
            find_options=FindOptions(
                case_sensitive=self.config.find.case_sensitive,
                whole_words_only=self.config.find.whole_words_only,
                wrap=self.config.find.wrap,
            ),
        )
        self._session: Session | None = None
        self._depth = 0

    def _acquire(self) -> Session:
        if self._session is None:
            self._session = Session(self.classifier, self.defaults)
            logger.debug("Opened text session")
        self._depth += 1
        return self._session

    def _release(self):
        self._depth -= 1
        if self._depth == 0 and self._session is not None:
            self._session.detach()
            self._session = None

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open (or join) the session for a batch of operations."""
        session = self._acquire()
        try:
            yield session
        finally:
            self._release()

    def no_mutation(self, callback: Callable[[], T]) -> T:
        """Run callback with one shared session; the tree must not change meanwhile."""
        with self.session():
            return callback()

    def create_position(self, node: Node, offset: int) -> Position:
        if offset < 0 or offset > node.length:
            raise ValueError(f"Offset {offset} out of bounds for {node.describe()} (length {node.length})")
        return Position(node, offset)

    def create_range(self, node: Node) -> Range:
        """Collapsed range at the start of node's tree."""
        return Range(self, Position(node.root(), 0))

    def create_selection(self) -> Selection:
        return Selection(self)

    def inner_text(self, node: Node, character_options: CharacterOptions | None = None) -> str:
        """Visible text of node's contents."""
        rng = self.create_range(node)
        rng.select_node_contents(node)
        return rng.text(character_options)

    def create_word_iterator(self, node: Node, offset: int, direction: str = "forward",
                             word_options: WordOptions | None = None,
                             character_options: CharacterOptions | None = None) -> WordIterator:
        """
        Tokens from (node, offset) in the given direction.

        The iterator keeps a session open until it is disposed, so use it as a
        context manager.
        """
        position = self.create_position(node, offset)
        session = self._acquire()
        try:
            provider = TokenizedTextProvider(session, position, character_options,
                                             word_options or self.defaults.word_options)
        except Exception:
            self._release()
            raise
        return _SessionWordIterator(provider, direction, self._release)


class _SessionWordIterator(WordIterator):
    """WordIterator that releases its engine session on dispose."""

    def __init__(self, provider: TokenizedTextProvider, direction: str, release: Callable[[], None]):
        super().__init__(provider, direction)
        self._release = release

    def dispose(self):
        if not self._disposed:
            super().dispose()
            self._release()
