"""
Indentation matching tests - prefix chains and malformed indentation

Covers the level resolver on its own and the errors the stream raises
when a line's whitespace aligns with no open level.
"""

import pytest

from indentdedent.lib.indentation import IndentationStack
from indentdedent.lib.stream import IndentDedentStream, transform
from indentdedent.lib.errors import IndentDedentError, IndentationMismatchError
from indentdedent.models.stream import IndentLevel, LevelChange


class TestLevelResolve:
    """IndentationStack.level_resolve() in isolation"""

    def stack_make(self, *levels: str) -> IndentationStack:
        stack = IndentationStack()
        for level in levels:
            stack.push(level)
        return stack

    def test_empty_stack_empty_run(self):
        """No levels and no whitespace is the same level"""
        resolution = IndentationStack().level_resolve("")
        assert resolution.matched == 0
        assert resolution.remainder == ""
        assert resolution.change is LevelChange.SAME

    def test_empty_stack_indent(self):
        """Any whitespace on an empty stack is an indent"""
        resolution = IndentationStack().level_resolve("\t ")
        assert resolution.change is LevelChange.INDENT
        assert resolution.remainder == "\t "

    def test_same_level(self):
        """Run equal to the concatenated levels"""
        resolution = self.stack_make("  ", "\t").level_resolve("  \t")
        assert resolution.matched == 2
        assert resolution.change is LevelChange.SAME

    def test_deeper_level_remainder_only(self):
        """Only the new whitespace becomes the pushed level"""
        resolution = self.stack_make("  ").level_resolve("    ")
        assert resolution.change is LevelChange.INDENT
        assert resolution.remainder == "  "

    def test_dedent_count(self):
        """Aligning with the outermost level closes the others"""
        resolution = self.stack_make(" ", " ", " ").level_resolve(" ")
        assert resolution.matched == 1
        assert resolution.dedents == 2
        assert resolution.change is LevelChange.DEDENT

    def test_dedent_to_zero(self):
        """No whitespace closes every level"""
        resolution = self.stack_make("    ", "  ").level_resolve("")
        assert resolution.matched == 0
        assert resolution.dedents == 2
        assert resolution.change is LevelChange.DEDENT

    def test_malformed(self):
        """Leftover whitespace after a partial match"""
        resolution = self.stack_make("  ").level_resolve(" ")
        assert resolution.matched == 0
        assert resolution.remainder == " "
        assert resolution.change is LevelChange.MALFORMED

    def test_tab_is_not_spaces(self):
        """Characters are compared literally, never by width"""
        resolution = self.stack_make("\t").level_resolve("    ")
        assert resolution.change is LevelChange.MALFORMED

    def test_stack_push_pop(self):
        """push() and pop() work on IndentLevel values"""
        stack = IndentationStack()
        level = stack.push("  ")
        assert level == IndentLevel("  ")
        assert stack.view() == (IndentLevel("  "),)
        assert stack.pop() == level
        assert stack.depth == 0

    def test_indent_level_must_not_be_empty(self):
        """Zero-width levels cannot exist"""
        with pytest.raises(ValueError):
            IndentLevel("")

    def test_indent_level_prefix(self):
        """prefix_is() is a literal startswith"""
        assert IndentLevel(" \t").prefix_is(" \t  ")
        assert not IndentLevel(" \t").prefix_is("\t ")


class TestMixedIndents:
    """Tabs and spaces mixed consistently and inconsistently"""

    def test_correct_mixed_indents(self):
        """Each line extends the previous run literally"""
        text = "Hello\n World\n \tHow\n \t are\n \t \tyou?"
        assert transform(text) == "Hello\n>World\n>How\n>are\n>you?<<<<"

    def test_wrong_mixed_indents(self):
        """Same width but a different character order is an error"""
        text = "Hello\n World\n \tHow\n  \tare\n \t \tyou?"
        with pytest.raises(IndentationMismatchError):
            transform(text)


class TestMalformedIndentation:
    """Whitespace that aligns with no ancestor level"""

    def test_wrong_dedent(self):
        """One space aligns with neither zero nor two spaces"""
        with pytest.raises(IndentationMismatchError):
            transform("a\n  c\n b")

    def test_error_before_offending_line(self):
        """Everything up to the bad line is delivered first"""
        stream = IndentDedentStream("a\n  c\n b")
        assert stream.read(5) == "a\n>c\n"
        with pytest.raises(IndentationMismatchError):
            stream.read_one()

    def test_error_location(self):
        """The error reports line, column and the offending run"""
        stream = IndentDedentStream("a\n  c\n    d\n   b", name="demo.txt")
        with pytest.raises(IndentationMismatchError) as excinfo:
            stream.read()
        error = excinfo.value
        assert error.lineno == 4
        assert error.offset == 4
        assert error.text == "   "
        assert error.filename == "demo.txt"
        assert error.depth == 2
        assert error.remainder == " "

    def test_error_is_indentation_error(self):
        """Compiler-style handlers catch it"""
        with pytest.raises(SyntaxError):
            transform("a\n  c\n b")
        with pytest.raises(IndentationError):
            transform("a\n  c\n b")
        with pytest.raises(IndentDedentError):
            transform("a\n  c\n b")

    def test_error_message(self):
        """The message names the problem and the line"""
        with pytest.raises(IndentationMismatchError, match="does not match any outer"):
            transform("a\n  c\n b")
        try:
            transform("a\n  c\n b")
        except IndentationMismatchError as e:
            assert "line 3" in str(e)


class TestBalance:
    """Marker count minus dedent count equals the stack depth"""

    @pytest.mark.parametrize(
        "text",
        [
            "a\n b\n  c\n d\ne",
            "x\n\ty\n\t\tz\n\t\t\tw\nv\n",
            "p\n  q\n\n  r\n    s\n  \n    t",
        ],
    )
    def test_running_balance(self, text):
        """The balance holds after every unit and ends at zero"""
        stream = IndentDedentStream(text)
        balance = 0
        for unit in stream:
            if unit == ">":
                balance += 1
            elif unit == "<":
                balance -= 1
            else:
                assert balance == stream.depth
        assert balance == 0
        assert stream.depth == 0
        assert stream.indents_emitted == stream.dedents_emitted
