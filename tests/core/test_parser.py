"""
Tests for the reference word parser.
"""

import pytest

from minquote.core.errors import ShellSyntaxError
from minquote.core.parser import get_checker, unquote, unquote_bashlex


class TestUnquote:
    """Quote removal on a single word."""

    def test_plain_word(self):
        assert unquote(b"hello") == b"hello"

    def test_single_quotes(self):
        assert unquote(b"'a b $c'") == b"a b $c"

    def test_empty_quotes(self):
        """'' is the empty word."""
        assert unquote(b"''") == b""
        assert unquote(b'""') == b""

    def test_backslash_escape(self):
        assert unquote(b"a\\ b") == b"a b"
        assert unquote(b"10\\$") == b"10$"
        assert unquote(b"\\'") == b"'"

    def test_line_continuation(self):
        assert unquote(b"a\\\nb") == b"ab"

    def test_double_quote_escapes(self):
        assert unquote(b'"\\$\\`\\"\\\\"') == b'$`"\\'

    def test_double_quote_literal_backslash(self):
        """A backslash before an ordinary byte stays."""
        assert unquote(b'"a\\b"') == b"a\\b"
        assert unquote(b"\"'\\ \"") == b"'\\ "

    def test_double_quote_newline(self):
        assert unquote(b'"a\nb"') == b"a\nb"
        assert unquote(b'"a\\\nb"') == b"ab"

    def test_concatenated_segments(self):
        assert unquote(b"a'b c'\"d\"\\ e") == b"ab cd e"

    def test_leading_tilde_and_hash_need_quoting(self):
        with pytest.raises(ShellSyntaxError):
            unquote(b"~")
        with pytest.raises(ShellSyntaxError):
            unquote(b"#x")
        assert unquote(b"a~#") == b"a~#"
        assert unquote(b"\\~") == b"~"

    @pytest.mark.parametrize("text", [b"a=~", b"PATH=a:~/bin"])
    def test_tilde_after_equals_or_colon_needs_quoting(self, text):
        with pytest.raises(ShellSyntaxError):
            unquote(text)

    def test_escaped_tilde_after_equals(self):
        assert unquote(b"a=\\~") == b"a=~"
        assert unquote(b"a='~'") == b"a=~"

    @pytest.mark.parametrize("text", [b"a b", b"$x", b"a*", b"{a,b}", b"a;b", b"!", b"a\nb"])
    def test_unquoted_meta_rejected(self, text):
        with pytest.raises(ShellSyntaxError):
            unquote(text)

    @pytest.mark.parametrize("text", [b'"$x"', b'"`x`"'])
    def test_expansion_in_double_quotes_rejected(self, text):
        with pytest.raises(ShellSyntaxError):
            unquote(text)

    @pytest.mark.parametrize("text", [b"'abc", b'"abc', b"abc\\", b'"abc\\"'])
    def test_unterminated(self, text):
        with pytest.raises(ShellSyntaxError):
            unquote(text)

    def test_empty_text(self):
        with pytest.raises(ShellSyntaxError):
            unquote(b"")

    def test_continuation_alone_is_not_a_word(self):
        with pytest.raises(ShellSyntaxError):
            unquote(b"\\\n")

    def test_error_offset(self):
        with pytest.raises(ShellSyntaxError) as exc:
            unquote(b"ab cd")
        assert exc.value.offset == 2


class TestUnquoteBashlex:
    """The bashlex backend agrees on plain and quoted words."""

    def test_plain_word(self):
        assert unquote_bashlex(b"hello") == b"hello"

    def test_single_quotes(self):
        assert unquote_bashlex(b"'a b c'") == b"a b c"

    def test_double_quotes(self):
        assert unquote_bashlex(b"\"it's a b\"") == b"it's a b"

    def test_backslash_inside_double_quotes(self):
        assert unquote_bashlex(b'"\\\'"') == b"\\'"

    def test_escaped_quote_before_single_quotes(self):
        assert unquote_bashlex(b"\\'' $'") == b"' $"

    def test_escaped_quote_after_single_quotes(self):
        assert unquote_bashlex(b"' \"'\\'") == b" \"'"

    def test_quoted_tilde_after_equals(self):
        assert unquote_bashlex(b"a=\\~") == b"a=~"

    def test_two_words_rejected(self):
        with pytest.raises(ShellSyntaxError):
            unquote_bashlex(b"a b")

    def test_parameter_rejected(self):
        with pytest.raises(ShellSyntaxError):
            unquote_bashlex(b"$HOME")

    def test_empty_text(self):
        with pytest.raises(ShellSyntaxError):
            unquote_bashlex(b"")


class TestGetChecker:
    def test_known(self):
        assert get_checker("builtin") is unquote
        assert get_checker("bashlex") is unquote_bashlex

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown checker"):
            get_checker("zsh")
