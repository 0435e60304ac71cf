"""
Configuration for textrange.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/textrange/config.toml) if exists
3. Environment variables (TEXTRANGE_*) override file
4. Explicit arguments (engine constructor, CLI flags) override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Environment behaviour of whitespace around line breaks."""
    trailing_space_before_br_collapses: bool = True  # "1 <br>2" renders as "1\n2"
    trailing_space_in_block_collapses: bool = True  # "<p>1 </p>" renders as "1"
    table_display_is_block: bool = False  # oracle reports "block" for table parts


@dataclass
class WordsConfig:
    """Default word tokenizer settings."""
    word_pattern: str = r"[a-z0-9]+('[a-z0-9]+)*"  # matched case-insensitively
    include_trailing_space: bool = False


@dataclass
class FindConfig:
    """Default search flags."""
    case_sensitive: bool = False
    whole_words_only: bool = False
    wrap: bool = False


@dataclass
class Config:
    """Root config with all settings."""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    words: WordsConfig = field(default_factory=WordsConfig)
    find: FindConfig = field(default_factory=FindConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "textrange" / "config.toml"
    return Path.home() / ".config" / "textrange" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
            logger.warning("Ignoring unreadable config file %s: %s", path, e)

    # env var overrides
    config = _apply_env(config)

    return config


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    if "layout" in data:
        lay = data["layout"]
        for key in ("trailing_space_before_br_collapses",
                    "trailing_space_in_block_collapses",
                    "table_display_is_block"):
            if key in lay:
                setattr(config.layout, key, _as_bool(lay[key]))

    if "words" in data:
        w = data["words"]
        if "word_pattern" in w:
            config.words.word_pattern = str(w["word_pattern"])
        if "include_trailing_space" in w:
            config.words.include_trailing_space = _as_bool(w["include_trailing_space"])

    if "find" in data:
        fd = data["find"]
        for key in ("case_sensitive", "whole_words_only", "wrap"):
            if key in fd:
                setattr(config.find, key, _as_bool(fd[key]))

    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "TEXTRANGE_BR_SPACE_COLLAPSES": ("layout", "trailing_space_before_br_collapses", bool),
        "TEXTRANGE_BLOCK_SPACE_COLLAPSES": ("layout", "trailing_space_in_block_collapses", bool),
        "TEXTRANGE_TABLE_DISPLAY_IS_BLOCK": ("layout", "table_display_is_block", bool),
        "TEXTRANGE_WORD_PATTERN": ("words", "word_pattern", str),
        "TEXTRANGE_WORD_TRAILING_SPACE": ("words", "include_trailing_space", bool),
        "TEXTRANGE_CASE_SENSITIVE": ("find", "case_sensitive", bool),
        "TEXTRANGE_WHOLE_WORDS": ("find", "whole_words_only", bool),
        "TEXTRANGE_WRAP": ("find", "wrap", bool),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                converted = _as_bool(val) if conv is bool else conv(val)
                setattr(getattr(config, section), attr, converted)

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
