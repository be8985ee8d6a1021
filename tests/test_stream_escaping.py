"""
Escape region tests - single-line and paired escapes

Escape regions suspend indentation analysis: their content, including
newlines and leading whitespace, passes through without markers.
"""

import pytest

from indentdedent.lib.escapes import EscapeTracker
from indentdedent.lib.stream import IndentDedentStream, transform
from indentdedent.models.stream import EscapeRule


class TestEscapeTracker:
    """EscapeTracker.character_observe() in isolation"""

    def test_no_rules(self):
        """Without rules nothing is ever escaped"""
        tracker = EscapeTracker()
        assert not tracker.character_observe("(")
        assert tracker.active is None

    def test_open_and_close_are_inside(self):
        """Both delimiters belong to the region"""
        tracker = EscapeTracker()
        tracker.rule_add(EscapeRule("(", ")"))
        assert [tracker.character_observe(c) for c in "a(b)c"] == [
            False, True, True, True, False,
        ]
        assert tracker.active is None

    def test_same_open_and_close(self):
        """A quote-style rule closes on its second occurrence"""
        tracker = EscapeTracker()
        tracker.rule_add(EscapeRule('"', '"'))
        assert [tracker.character_observe(c) for c in '"x"y'] == [True, True, True, False]

    def test_no_nesting(self):
        """Other rules' open characters are plain text inside a region"""
        tracker = EscapeTracker()
        tracker.rule_add(EscapeRule("(", ")"))
        tracker.rule_add(EscapeRule("[", "]"))
        for char in "([":
            tracker.character_observe(char)
        assert tracker.active == EscapeRule("(", ")")
        # "]" does not close "(", ")" does
        assert tracker.character_observe("]")
        assert tracker.active == EscapeRule("(", ")")
        assert tracker.character_observe(")")
        assert tracker.active is None

    def test_rule_must_use_single_characters(self):
        """Multi-character delimiters are rejected"""
        with pytest.raises(ValueError):
            EscapeRule("/*", "*/")


class TestSingleLineEscape:
    """Comment-like escapes running to the end of the line"""

    def test_other_empty_line_char(self):
        """A comment line is skipped like an empty line"""
        text = "Hello\n World\n  How\n    \n  # comment\n   are\n    you?"
        expect = "Hello\n>World\n>How\n    \n  # comment\n>are\n>you?<<<<"
        stream = IndentDedentStream(text)
        stream.escape_addSingleLine("#")
        assert stream.read() == expect

    def test_unindented_comment_inside_block(self):
        """A comment at column zero does not close the block"""
        assert transform("a\n  b\n# note\n  c", single_line_escapes="#") == "a\n>b\n# note\nc<"

    def test_comment_after_content(self):
        """A trailing comment closes at its newline; the next line is analysed"""
        text = "a # x\n  b\nc"
        assert transform(text, single_line_escapes="#") == "a # x\n>b\n<c"

    def test_closing_newline_then_shallower_line(self):
        """The line after a closing newline is analysed and dedents"""
        text = "a\n  b\n    c # x\nd"
        assert transform(text, single_line_escapes="#") == "a\n>b\n>c # x\n<<d"

    def test_close_uses_newline_at_registration(self):
        """The close character is the newline configured when registering"""
        stream = IndentDedentStream("a;  # x; b;  c")
        stream.newline_char = ";"
        stream.escape_addSingleLine("#")
        assert stream.escapes == (EscapeRule("#", ";"),)
        assert stream.read() == "a;  # x;>b;>c<<"


class TestPairedEscape:
    """Regions spanning several lines"""

    def test_parenthesis_across_lines(self):
        """Lines inside parentheses are not analysed"""
        text = "f(a,\n      b)\n  g\n"
        assert transform(text, paired_escapes=["()"]) == "f(a,\n      b)\n>g\n<"

    def test_parboiled_with_escape(self):
        """Single-line and paired escapes together"""
        text = (
            "level 1\n"
            "    level 2\n"
            "    still level 2\n"
            "      level 3\n"
            "      also 3\n"
            "  ( hello\n world\n         bla)\n"
            "     \n"
            "  # blaaaa blubb\n"
            "    2 again\n"
            "        another 3\n"
            "and back to 1\n"
            " another level 2 again\n"
            "  "
        )
        expect = (
            "level 1\n"
            ">level 2\n"
            "still level 2\n"
            ">level 3\n"
            "also 3\n"
            "  ( hello\n world\n         bla)\n"
            "     \n"
            "  # blaaaa blubb\n"
            "<2 again\n"
            ">another 3\n"
            "<<and back to 1\n"
            ">another level 2 again\n"
            "  <"
        )
        stream = IndentDedentStream(text)
        stream.escape_addSingleLine("#")
        stream.escape_addPaired("(", ")")
        assert stream.read() == expect

    def test_close_right_after_escaped_newline(self):
        """A closing character opening a line is still escape content"""
        text = "a\n  b(\n)\n  c"
        assert transform(text, paired_escapes=["()"]) == "a\n>b(\n)\nc<"

    def test_indented_close_after_escaped_newline(self):
        """Whitespace before the close is not an indentation run"""
        text = "a\n  b(\n  )\n  c"
        assert transform(text, paired_escapes=["()"]) == "a\n>b(\n  )\nc<"

    def test_escape_state_is_visible(self):
        """escape_active reports the open region"""
        stream = IndentDedentStream("x(\n  y")
        stream.escape_addPaired("(", ")")
        assert stream.read(2) == "x("
        assert stream.escape_active == EscapeRule("(", ")")

    def test_unterminated_escape_still_flushes(self):
        """Open levels are closed at end of input even inside an escape"""
        text = "a\n  b (\n    c\n"
        assert transform(text, paired_escapes=[("(", ")")]) == "a\n>b (\n    c\n<"

    def test_escape_rule_object(self):
        """escape_add() accepts a prepared EscapeRule"""
        stream = IndentDedentStream("a\n  [x\ny]\n  b")
        stream.escape_add(EscapeRule("[", "]"))
        assert stream.read() == "a\n  [x\ny]\n>b<"
