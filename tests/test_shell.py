import os
import signal
from unittest.mock import patch

import pytest

from babashell.builtins import ShellExit
from babashell.environment import Environment, ShellState
from babashell.parser import Command
from babashell.shell import Shell, has_unclosed_quote, main, redirect_syntax_error

_SIGNALS = (signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)


@pytest.fixture(autouse=True)
def _restore_signals():
    saved = {signum: signal.getsignal(signum) for signum in _SIGNALS}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


def reader_for(lines):
    remaining = iter(lines)
    return lambda prompt: next(remaining, None)


def test_unclosed_quotes_detected():
    assert has_unclosed_quote("echo 'a") is True
    assert has_unclosed_quote('echo "abc') is True


def test_closed_quotes_accepted():
    assert has_unclosed_quote("echo \"a\" 'b'") is False
    assert has_unclosed_quote("echo \"it's\"") is False
    assert has_unclosed_quote("plain") is False


def test_redirect_at_end_is_syntax_error(capsys):
    state = ShellState(Environment())
    assert redirect_syntax_error([Command(["echo", ">"])], state) == 2
    assert state.exit_code == 2
    assert "syntax error near unexpected token" in capsys.readouterr().err


def test_double_redirect_is_syntax_error():
    state = ShellState(Environment())
    assert redirect_syntax_error([Command(["echo", ">", ">", "x"])], state) == 2


def test_valid_redirect_is_not_error():
    state = ShellState(Environment())
    assert redirect_syntax_error([Command(["echo", "a", ">", "f"])], state) == 0
    assert state.exit_code == 0


def test_run_line_redirects_output(tmp_path):
    target = tmp_path / "out"
    shell = Shell({"PATH": str(tmp_path)})
    assert shell.run_line(f"echo hello > {target}") == 0
    assert target.read_text() == "hello\n"


def test_run_line_exported_variable_expands(tmp_path):
    target = tmp_path / "out"
    shell = Shell({})
    shell.run_line("export FOO=bar")
    shell.run_line(f"echo $FOO > {target}")
    assert target.read_text() == "bar\n"


def test_run_line_last_status_expands(tmp_path):
    target = tmp_path / "out"
    shell = Shell({"PATH": str(tmp_path)})
    assert shell.run_line("nosuchcmd") == 127
    shell.run_line(f"echo $? > {target}")
    assert target.read_text() == "127\n"


def test_run_line_unclosed_quote(capsys):
    shell = Shell({})
    assert shell.run_line("echo 'abc") == 0
    assert "Error: Unmatched quotation mark detected" in capsys.readouterr().out


def test_run_line_exit_raises():
    shell = Shell({})
    with pytest.raises(ShellExit) as info:
        shell.run_line("exit 3")
    assert info.value.code == 3


def test_run_line_heredoc(tmp_path):
    target = tmp_path / "out"
    shell = Shell(dict(os.environ))
    with patch("builtins.input", side_effect=["line one", "END"]):
        status = shell.run_line(f"cat << END > {target}")
    assert status == 0
    assert target.read_text() == "line one\n"


def test_repl_returns_exit_code():
    shell = Shell({})
    assert shell.repl(reader_for(["export A=1", "exit 4"])) == 4
    assert shell.state.env.get("A") == "1"


def test_repl_end_of_input_returns_zero(tmp_path):
    target = tmp_path / "out"
    shell = Shell({"PATH": str(tmp_path)})
    assert shell.repl(reader_for([f"echo hi > {target}", "nosuchcmd"])) == 0
    assert target.read_text() == "hi\n"
    assert shell.state.exit_code == 127


def test_main_with_arguments_returns_immediately():
    assert main(["unexpected"]) == 0