# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the calccheck command.
#
# Test coverage includes:
#   - Help and version output
#   - Checking files and standard input
#   - Exit codes for valid programs, check errors and bad arguments
#   - Quiet, token dump, grammar report and verbose modes
# =============================================================================

import pytest


@pytest.fixture
def program(tmp_path):
    """Write a calculator program to a temporary file."""
    def write(text: str, name: str = "prog.calc"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return write


# =============================================================================
# Basic Invocation Tests
# =============================================================================

class TestCalccheckCLI:
    """Tests for the calccheck CLI tool."""

    def test_cli_help(self):
        """Test CLI help output."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Check the syntax of a calculator language program" in result.output
        assert "--tokens" in result.output

    def test_cli_version(self):
        """Test CLI version output."""
        from click.testing import CliRunner
        from calc_checker import __version__
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "calccheck" in result.output
        assert __version__ in result.output

    def test_cli_valid_file(self, program):
        """A valid program prints its trace and exits 0."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("int x := 3\nwrite x\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "predict program --> stmt_list $$"
        assert "predict stmt --> int ident ':=' expr" in lines
        assert lines[-1] == "matched END"

    def test_cli_stdin(self):
        """Without a file argument the program is read from stdin."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, [], input="   \n\n")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "predict program --> stmt_list $$",
            "predict stmt_list --> epsilon",
            "matched END",
        ]

    def test_cli_dash_is_stdin(self):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, ["-"], input="write 1\n")

        assert result.exit_code == 0
        assert "matched I_LIT: 1" in result.output


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestCalccheckErrors:
    """Tests for diagnostics and exit codes."""

    def test_cli_syntax_error(self, program):
        """A syntax error keeps the partial trace and exits 1."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("if x fi\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == 1
        assert "matched IDENT: x" in result.output
        assert "syntax error on line 1" in result.output
        assert "matched END" not in result.output

    def test_cli_lexical_error(self, program):
        """A lexical error names the operator and the character found."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("x : y\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == 1
        assert "lexical error on line 1: expected '=' after ':', got ' ' (0x20)" in result.output

    def test_cli_error_line_number(self, program):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("read a\nwrite a\ndo\nwrite 1 1\nod\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == 1
        assert "syntax error on line 4" in result.output

    def test_cli_verbose_context(self, program):
        """Verbose mode shows the source line and a caret."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write 1\nwrite #\n")

        runner = CliRunner()
        result = runner.invoke(main, ["-v", str(path)])

        assert result.exit_code == 1
        assert "lexical error on line 2: unexpected character '#' (0x23)" in result.output
        assert "    write #\n          ^" in result.output

    def test_cli_missing_file(self, tmp_path):
        """A missing input file is a usage error."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.calc")])

        assert result.exit_code == 2

    def test_cli_directory_rejected(self, tmp_path):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path)])

        assert result.exit_code == 2

    def test_cli_undecodable_input(self, tmp_path):
        """Input that is not valid in the chosen encoding exits 2."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = tmp_path / "latin.calc"
        path.write_bytes("write café\n".encode("latin-1"))

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == 2
        assert "cannot decode input" in result.output

    def test_cli_unknown_encoding(self, program):
        """An unknown codec name is an invalid argument, not an internal error."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write 1\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--encoding", "bogus", str(path)])

        assert result.exit_code == 2
        assert "unknown encoding: bogus" in result.output
        assert "Internal error" not in result.output

    def test_cli_unknown_encoding_from_environment(self, program):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write 1\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)], env={"CALCCHECK_ENCODING": "bogus"})

        assert result.exit_code == 2
        assert "unknown encoding: bogus" in result.output

    def test_cli_encoding_option(self, tmp_path):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = tmp_path / "latin.calc"
        path.write_bytes("write café\n".encode("latin-1"))

        runner = CliRunner()
        result = runner.invoke(main, ["--encoding", "latin-1", str(path)])

        assert result.exit_code == 0
        assert "matched IDENT: café" in result.output


# =============================================================================
# Mode Option Tests
# =============================================================================

class TestCalccheckModes:
    """Tests for quiet, token and grammar modes."""

    def test_cli_quiet_valid(self, program):
        """Quiet mode prints nothing for a valid program."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write 1\n")

        runner = CliRunner()
        result = runner.invoke(main, ["-q", str(path)])

        assert result.exit_code == 0
        assert result.output == ""

    def test_cli_quiet_error(self, program):
        """Quiet mode still reports the error."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--quiet", str(path)])

        assert result.exit_code == 1
        assert result.output.strip() == "syntax error on line 2"

    def test_cli_quiet_from_environment(self, program):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("write 1\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(path)], env={"CALCCHECK_QUIET": "1"})

        assert result.exit_code == 0
        assert result.output == ""

    def test_cli_tokens(self, program):
        """--tokens prints one token per line, ending with END."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("x := 42\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--tokens", str(path)])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Token(IDENT, 'x', 1:0)",
            "Token(GETS, ':=', 1:2)",
            "Token(I_LIT, '42', 1:5)",
            "Token(END, 2:0)",
        ]

    def test_cli_tokens_lexical_error(self, program):
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        path = program("x $\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--tokens", str(path)])

        assert result.exit_code == 1
        assert "Token(IDENT, 'x', 1:0)" in result.output
        assert "unexpected character '$'" in result.output

    def test_cli_grammar(self):
        """--grammar prints the productions and FIRST/FOLLOW sets."""
        from click.testing import CliRunner
        from calc_checker.cli.calccheck import main

        runner = CliRunner()
        result = runner.invoke(main, ["--grammar"])

        assert result.exit_code == 0
        assert "Productions:" in result.output
        assert "FOLLOW:" in result.output
        assert "Grammar is LL(1)" in result.output
