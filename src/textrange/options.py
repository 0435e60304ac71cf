"""
Option records for text operations.

Each operation takes an optional record plus keyword overrides, e.g.
rng.find_text("cat", whole_words_only=True). Unset word/character options
fall back to the engine's defaults when the operation runs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .ranges import Range
    from .words import WordOptions

CHARACTER = "character"
WORD = "word"

FORWARD = "forward"
BACKWARD = "backward"


@dataclass(frozen=True)
class CharacterOptions:
    collapse_space_before_line_break: bool = True


@dataclass(frozen=True)
class MoveOptions:
    word_options: WordOptions | None = None
    character_options: CharacterOptions | None = None


@dataclass(frozen=True)
class ExpandOptions:
    word_options: WordOptions | None = None
    character_options: CharacterOptions | None = None
    trim: bool = False
    trim_start: bool = True
    trim_end: bool = True


@dataclass(frozen=True)
class FindOptions:
    case_sensitive: bool = False
    within_range: Range | None = None
    whole_words_only: bool = False
    wrap: bool = False
    direction: str = FORWARD
    word_options: WordOptions | None = None
    character_options: CharacterOptions | None = None


OptionsT = TypeVar("OptionsT")


def merge_options(options: OptionsT | None, default: OptionsT, **overrides) -> OptionsT:
    """Start from options (or default) and apply keyword overrides."""
    base = options if options is not None else default
    return replace(base, **overrides) if overrides else base


def is_direction_backward(direction: str | None) -> bool:
    return direction in ("backward", "backwards")
