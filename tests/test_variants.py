"""
Tests for the Command Classifier — subcommand + tail -> variant

Script sources for py/node, passthrough tails, and the failures that must
happen before anything is printed or spawned.
"""

import io
from pathlib import Path

import pytest

from shnote.core.variants import (
    NodeFile, NodeInline, NodeStdin, NpxPassthrough, PipPassthrough, PueuePassthrough,
    PyFile, PyInline, PyStdin, Shell, STDIN_ENCODING, STDIN_ERRORS,
    classify, read_stdin_script,
)
from shnote.errors import (
    EXIT_NOINPUT, FileNotFound, ScriptSourceRequired, UnknownCommand, UsageError,
)


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "script.py"
    path.write_text("print('hi')\n")
    return path


class TestRun:

    def test_args_kept(self):
        assert classify("run", ["ls", "-la", "--color"]) == Shell(("ls", "-la", "--color"))

    def test_leading_double_dash_dropped(self):
        assert classify("run", ["--", "ls", "--"]) == Shell(("ls", "--"))

    def test_single_script_argument(self):
        assert classify("run", ["ls | wc -l"]) == Shell(("ls | wc -l",))

    @pytest.mark.parametrize("tail", [[], ["--"]])
    def test_empty_is_usage_error(self, tail):
        with pytest.raises(UsageError):
            classify("run", tail)


class TestScriptSources:
    """py/node take exactly one of -c, -f, --stdin."""

    def test_inline_with_args(self):
        assert classify("py", ["-c", "print(1)", "a", "b"]) == PyInline("print(1)", ("a", "b"))

    def test_inline_long_form(self):
        assert classify("node", ["--code=console.log(1)"]) == NodeInline("console.log(1)")

    def test_file_with_args_after_separator(self, script):
        variant = classify("py", ["-f", str(script), "--", "-v", "x"])
        assert variant == PyFile(Path(str(script)), ("-v", "x"))

    def test_node_file(self, tmp_path):
        path = tmp_path / "app.js"
        path.write_text("1")
        assert classify("node", [f"--file={path}"]) == NodeFile(path)

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.py"
        with pytest.raises(FileNotFound) as exc:
            classify("py", ["-f", str(missing)])
        assert exc.value.exit_code == EXIT_NOINPUT
        assert exc.value.path == str(missing)

    def test_directory_is_not_a_script(self, tmp_path):
        with pytest.raises(FileNotFound):
            classify("node", ["-f", str(tmp_path)])

    @pytest.mark.parametrize("tail", [
        [],
        ["a", "b"],
        ["-c", "1", "-f", "x.py"],
        ["--stdin", "-c", "1"],
    ])
    def test_not_exactly_one_source(self, tail):
        with pytest.raises(ScriptSourceRequired):
            classify("py", tail)

    def test_flag_without_value(self):
        with pytest.raises(UsageError):
            classify("py", ["-c"])

    def test_options_after_first_argument_belong_to_script(self):
        variant = classify("py", ["-c", "pass", "arg", "-c", "x"])
        assert variant == PyInline("pass", ("arg", "-c", "x"))


class TestStdin:

    def test_py_stdin(self):
        stdin = io.BytesIO(b"print('hi')\n")
        assert classify("py", ["--stdin", "x"], stdin=stdin) == PyStdin("print('hi')\n", ("x",))

    def test_captured_text_is_program_body(self):
        variant = classify("py", ["--stdin"], stdin=io.BytesIO(b"print(1+1)"))
        assert variant == PyStdin("print(1+1)")

    def test_node_stdin(self):
        assert classify("node", ["--stdin"], stdin=io.BytesIO(b"1")) == NodeStdin("1")

    def test_undecodable_bytes_round_trip(self):
        raw = b"# \xff\xfe\nprint(1)\n"
        script = read_stdin_script(io.BytesIO(raw))
        assert script.encode(STDIN_ENCODING, STDIN_ERRORS) == raw

    def test_text_stream_accepted(self):
        assert read_stdin_script(io.StringIO("abc")) == "abc"


class TestPassthrough:

    def test_pip_tail_verbatim(self):
        assert classify("pip", ["install", "-q", "--", "x"]) == PipPassthrough(("install", "-q", "--", "x"))

    def test_npx_empty(self):
        assert classify("npx", []) == NpxPassthrough()

    def test_pueue(self):
        assert classify("pueue", ["status"]) == PueuePassthrough(("status",))

    def test_management_command_is_not_execution(self):
        with pytest.raises(UnknownCommand):
            classify("config", ["list"])
