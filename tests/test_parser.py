"""Tests for command line parsing."""

import pytest

from shelfsteam.errors import CommandParseError, ErrorCategory
from shelfsteam.parser import ParsedCommand, parse_command_line, tokenize


class TestTokenize:
    """Test whitespace splitting."""

    def test_splits_on_spaces_and_tabs(self):
        assert tokenize("a b\tc") == ["a", "b", "c"]

    def test_collapses_runs_of_whitespace(self):
        assert tokenize("  a \t\t b   ") == ["a", "b"]

    def test_empty_line(self):
        assert tokenize("") == []

    def test_no_quoting(self):
        """Quotes and globs are literal."""
        assert tokenize('say "hello world" *.txt') == ["say", '"hello', 'world"', "*.txt"]


class TestParseCommandLine:
    """Test parse_command_line."""

    def test_empty_line_yields_nothing(self):
        assert parse_command_line("") is None

    def test_whitespace_only_yields_nothing(self):
        assert parse_command_line(" \t  ") is None

    def test_single_command(self):
        command = parse_command_line("ls")
        assert command == ParsedCommand(args=["ls"], input_file=None)
        assert command.name == "ls"
        assert command.arguments == []

    def test_arguments_kept_in_order(self):
        command = parse_command_line("chess --level 3 fast")
        assert command.args == ["chess", "--level", "3", "fast"]
        assert command.arguments == ["--level", "3", "fast"]

    def test_redirection(self):
        command = parse_command_line("chess < moves.txt")
        assert command.args == ["chess"]
        assert command.input_file == "moves.txt"

    def test_redirection_after_arguments(self):
        command = parse_command_line("chess --fast\t<\tmoves.txt  ")
        assert command.args == ["chess", "--fast"]
        assert command.input_file == "moves.txt"

    def test_no_file_after_redirection(self):
        with pytest.raises(CommandParseError, match="no file after redirection"):
            parse_command_line("chess <")

    def test_token_after_redirected_file(self):
        with pytest.raises(CommandParseError, match="multiple arguments after redirection"):
            parse_command_line("chess < moves.txt extra")

    def test_second_redirection_operator(self):
        with pytest.raises(CommandParseError, match="multiple redirection operators"):
            parse_command_line("chess < < moves.txt")

    def test_redirection_operator_after_file(self):
        with pytest.raises(CommandParseError):
            parse_command_line("chess < moves.txt < other.txt")

    def test_redirection_without_command(self):
        with pytest.raises(CommandParseError, match="missing command"):
            parse_command_line("< moves.txt")

    def test_operator_must_be_its_own_token(self):
        """``<file`` is an ordinary argument."""
        command = parse_command_line("chess <moves.txt")
        assert command.args == ["chess", "<moves.txt"]
        assert command.input_file is None

    def test_parse_error_category(self):
        with pytest.raises(CommandParseError) as excinfo:
            parse_command_line("chess <")
        assert excinfo.value.category == ErrorCategory.PARSE
        assert excinfo.value.line == "chess <"

    def test_long_lines_are_not_capped(self):
        args = [f"arg{i}" for i in range(1000)]
        command = parse_command_line("game " + " ".join(args))
        assert command.arguments == args
