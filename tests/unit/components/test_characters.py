"""
Unit tests for character materialization.

Covers the raw candidates (text data, br, block and cell separators) and the
collapsing rules applied on top of them, mostly through inner_text.
"""

import pytest

from textrange.characters import (
    COLLAPSIBLE_SPACE,
    EMPTY,
    LEADING_SPACE,
    LINE_BREAK,
    NON_SPACE,
    PRE_LINE_TRAILING_SPACE,
    TRAILING_SPACE,
    UNCOLLAPSIBLE_SPACE,
    Character,
    materialize,
    possible_character,
)
from textrange.config import Config, LayoutConfig
from textrange.dom import comment, document, element, text
from textrange.engine import TextEngine
from textrange.options import CharacterOptions
from textrange.positions import Position


def engine(**layout):
    return TextEngine(config=Config(layout=LayoutConfig(**layout)))


class TestPossibleCharacter:
    def setup_method(self):
        self.engine = engine()

    def test_offset_zero_is_empty(self):
        t = text("ab")
        root = document(element("body", t))
        with self.engine.session() as session:
            assert possible_character(session, Position(t, 0)).kind == EMPTY
        assert root.children

    def test_text_kinds(self):
        t = text("a  b")
        root = document(element("body", t))
        with self.engine.session() as session:
            assert possible_character(session, Position(t, 1)).kind == NON_SPACE
            first_space = possible_character(session, Position(t, 2))
            assert first_space.kind == COLLAPSIBLE_SPACE
            assert first_space.text == " "
            second_space = possible_character(session, Position(t, 3))
            assert second_space.kind == EMPTY
            assert second_space.is_collapsible
        assert root.children

    def test_tab_and_newline_become_space(self):
        t = text("a\tb\nc")
        root = document(element("body", t))
        with self.engine.session() as session:
            assert possible_character(session, Position(t, 2)).text == " "
            assert possible_character(session, Position(t, 4)).text == " "
        assert root.children

    def test_preformatted_space(self):
        t = text("a b")
        root = document(element("body", element("pre", t)))
        with self.engine.session() as session:
            assert possible_character(session, Position(t, 2)).kind == UNCOLLAPSIBLE_SPACE
        assert root.children

    def test_pre_line_space_before_newline(self):
        t = text("a \nb")
        root = document(element("body", element("div", t, style="white-space: pre-line")))
        with self.engine.session() as session:
            assert possible_character(session, Position(t, 2)).kind == PRE_LINE_TRAILING_SPACE
            newline = possible_character(session, Position(t, 3))
            assert newline.kind == NON_SPACE
            assert newline.text == "\n"
        assert root.children

    def test_br_is_line_break(self):
        body = element("body", "1", element("br"), "2")
        root = document(body)
        with self.engine.session() as session:
            char = possible_character(session, Position(body, 2))
            assert char.kind == LINE_BREAK
            assert char.text == "\n"
            assert char.is_line_break_element
        assert root.children

    def test_block_trailing_space(self):
        body = element("body", element("p", "a"), element("p", "b"))
        root = document(body)
        with self.engine.session() as session:
            char = possible_character(session, Position(body, 1))
            assert char.kind == TRAILING_SPACE
            assert char.is_trailing_space
            assert char.text == "\n"
        assert root.children

    def test_block_leading_space(self):
        body = element("body", "a", element("p", "b"))
        root = document(body)
        with self.engine.session() as session:
            char = possible_character(session, Position(body, 1))
            assert char.kind == LEADING_SPACE
            assert char.is_leading_space
        assert root.children

    def test_table_cell_tab(self):
        row = element("tr", element("td", "a"), element("td", "b"))
        root = document(element("body", element("table", row)))
        with self.engine.session() as session:
            assert possible_character(session, Position(row, 1)).text == "\t"
        assert root.children

    def test_empty_block_has_no_space(self):
        body = element("body", "a", element("div"), "b")
        root = document(body)
        with self.engine.session() as session:
            assert possible_character(session, Position(body, 2)).text == ""
        assert root.children

    def test_comment_data_is_empty(self):
        note = comment("note")
        root = document(element("body", note))
        with self.engine.session() as session:
            assert possible_character(session, Position(note, 2)).text == ""
        assert root.children


class TestMaterialize:
    def test_space_before_text_is_kept(self):
        t = text("a b")
        root = document(element("body", t))
        with engine().session() as session:
            assert materialize(session, Position(t, 2)).text == " "
        assert root.children

    def test_leading_space_is_dropped(self):
        t = text(" a")
        root = document(element("body", t))
        with engine().session() as session:
            assert materialize(session, Position(t, 1)).text == ""
        assert root.children

    def test_results_are_cached_per_options(self):
        t = text("a b")
        root = document(element("body", t))
        with engine().session() as session:
            first = materialize(session, Position(t, 2))
            assert materialize(session, Position(t, 2)) is first
            other = materialize(session, Position(t, 2), CharacterOptions(collapse_space_before_line_break=False))
            assert other == first
        assert root.children

    def test_collapses_preceding_space(self):
        pos = Position(text("x"), 1)
        layout = LayoutConfig()
        assert Character("\n", pos, is_line_break_element=True).collapses_preceding_space(layout)
        assert Character("\n", pos, is_trailing_space=True).collapses_preceding_space(layout)
        assert not Character("\n", pos).collapses_preceding_space(layout)
        assert not Character("\n", pos, is_line_break_element=True).collapses_preceding_space(
            LayoutConfig(trailing_space_before_br_collapses=False))

    def test_str_is_text(self):
        assert str(Character("q", Position(text("q"), 1))) == "q"


def inner_text(body, character_options=None, **layout):
    root = document(body)
    result = engine(**layout).inner_text(body, character_options)
    assert root.children
    return result


class TestInnerText:
    def test_collapses_runs_of_space(self):
        assert inner_text(element("body", "a  b")) == "a b"

    def test_trims_block_edges(self):
        assert inner_text(element("body", "  a  ")) == "a"

    def test_space_across_inline_elements(self):
        body = element("body", element("p", "Hello ", element("b", "big"), " world"))
        assert inner_text(body) == "Hello big world"

    def test_double_space_across_inline_elements(self):
        body = element("body", "a ", element("b", " b"))
        assert inner_text(body) == "a b"

    def test_paragraphs(self):
        body = element("body", element("p", "a"), element("p", "b"))
        assert inner_text(body) == "a\nb"

    def test_block_inside_inline_content(self):
        body = element("body", "a", element("p", "b"), "c")
        assert inner_text(body) == "a\nb\nc"

    def test_table_cells(self):
        row = element("tr", element("td", "a"), element("td", "b"))
        body = element("body", element("table", row))
        assert inner_text(body) == "a\tb"

    def test_hidden_content_is_skipped(self):
        body = element(
            "body",
            "a",
            element("span", "x", style="display: none"),
            element("script", "var y;"),
            comment("z"),
            element("span", "w", style="visibility: hidden"),
            "b",
        )
        assert inner_text(body) == "ab"

    def test_preformatted_text_is_kept(self):
        assert inner_text(element("body", element("pre", "a  b"))) == "a  b"

    def test_space_before_br_collapses(self):
        body = element("body", "1 ", element("br"), "2")
        assert inner_text(body) == "1\n2"

    def test_space_before_br_kept_when_layout_says_so(self):
        body = element("body", "1 ", element("br"), "2")
        assert inner_text(body, trailing_space_before_br_collapses=False) == "1 \n2"

    def test_space_before_br_kept_by_option(self):
        body = element("body", "1 ", element("br"), "2")
        options = CharacterOptions(collapse_space_before_line_break=False)
        assert inner_text(body, options) == "1 \n2"

    def test_trailing_br_is_dropped(self):
        body = element("body", element("p", "a", element("br")), element("p", "b"))
        assert inner_text(body) == "a\nb"

    def test_pre_line(self):
        body = element("body", element("div", "a \nb", style="white-space: pre-line"))
        assert inner_text(body) == "a\nb"

    def test_pre_line_space_kept_when_layout_says_so(self):
        body = element("body", element("div", "a \nb", style="white-space: pre-line"))
        assert inner_text(body, trailing_space_before_br_collapses=False) == "a \nb"

    @pytest.mark.parametrize("markup_text", ["", "   ", "\n\t"])
    def test_blank(self, markup_text):
        assert inner_text(element("body", markup_text)) == ""
