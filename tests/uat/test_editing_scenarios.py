"""
UAT: Editing Scenarios

Validates the engine against what a user sees and does on a rendered page:
the visible text matches the layout, caret movement by words lands on word
ends, and character offsets round-trip through selections.

Acceptance criteria:
- hidden content (head, script, display:none) never shows up in text
- blocks and list items are separated by exactly one line break
- select_characters(i, j) then to_character_range() gives back (i, j)
"""

from textrange.config import Config
from textrange.dom import find_all
from textrange.engine import TextEngine
from textrange.parser import parse_html
from textrange.ranges import CharacterRange

ARTICLE = (
    "<html><head><title>Not shown</title></head><body>"
    "<h1>Title</h1>"
    "<p>First <b>bold</b> para.</p>"
    "<script>var hidden = 1;</script>"
    "<p style=\"display:none\">hidden</p>"
    "<ul><li>one</li><li>two</li></ul>"
    "</body></html>"
)

ARTICLE_TEXT = "Title\nFirst bold para.\none\ntwo"


def load(markup=ARTICLE):
    root = parse_html(markup)
    return root, find_all(root, "body")[0], TextEngine(config=Config())


def test_visible_text_matches_layout():
    """Hidden nodes are skipped and blocks become single line breaks."""
    root, body, engine = load()
    assert engine.inner_text(body) == ARTICLE_TEXT
    assert root.children


def test_prefix_selections_match_visible_text():
    """Selecting the first k characters yields the first k visible characters."""
    root, body, engine = load()
    selection = engine.create_selection()
    for k in range(len(ARTICLE_TEXT) + 1):
        selection.select_characters(body, 0, k)
        assert selection.text() == ARTICLE_TEXT[:k], f"prefix of length {k}"
    assert root.children


def test_character_ranges_round_trip():
    """Every (i, j) selection converts back to the same offsets."""
    root, body, engine = load()
    rng = engine.create_range(body)
    length = len(ARTICLE_TEXT)
    for start in range(0, length + 1, 3):
        for end in range(start, length + 1, 4):
            rng.select_characters(body, start, end)
            assert rng.to_character_range(body) == CharacterRange(start, end), f"({start}, {end})"
            assert rng.text() == ARTICLE_TEXT[start:end]
    assert root.children


def test_caret_moves_word_by_word():
    """Ctrl+Right style movement stops at the end of each word."""
    root, body, engine = load()
    rng = engine.create_range(body)
    rng.select_node_contents(body)
    rng.collapse()

    ends = []
    while rng.move("word", 1) == 1:
        ends.append(rng.to_character_range(body).end)

    assert ends == [5, 11, 16, 21, 26, 30]
    assert root.children


def test_search_every_word():
    """Each word of the visible text is found at its own offsets."""
    root, body, engine = load()
    for word, expected in [("Title", (0, 5)), ("bold", (12, 16)), ("two", (27, 30))]:
        rng = engine.create_range(body)
        assert rng.find_text(word, whole_words_only=True), word
        assert rng.to_character_range(body) == CharacterRange(*expected)
    assert root.children
