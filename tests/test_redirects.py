import pytest

from babashell.redirects import (
    RedirectError,
    apply_redirections,
    has_redirect,
    is_redirect,
    read_heredoc,
    redirection_type,
    strip_redirections,
)


def _reader(lines):
    feed = iter(lines)
    return lambda prompt: next(feed, None)


@pytest.mark.parametrize("arg", [">", ">>", "<", "<<", ">x", "<<<"])
def test_is_redirect_true(arg):
    assert is_redirect(arg) is True


@pytest.mark.parametrize("arg", ["", None, "a>", "ls"])
def test_is_redirect_false(arg):
    assert is_redirect(arg) is False


@pytest.mark.parametrize(
    "arg, kind", [("<", 1), ("<<", 2), (">", 3), (">>", 4), ("ls", 0)]
)
def test_redirection_type(arg, kind):
    assert redirection_type(arg) == kind


def test_has_redirect():
    assert has_redirect(["cat", "<", "in"]) is True
    assert has_redirect(["cat", "in"]) is False


def test_strip_redirections():
    assert strip_redirections(["cat", "<", "in", "-n", ">", "out"]) == ["cat", "-n"]


def test_strip_without_redirections_is_identity():
    args = ["echo", "a", "b"]
    assert strip_redirections(args) == args


def test_read_heredoc_stops_at_delimiter():
    assert read_heredoc("EOF", _reader(["a", "b", "EOF", "c"])) == "a\nb\n"


def test_read_heredoc_stops_at_end_of_input():
    assert read_heredoc("EOF", _reader(["only"])) == "only\n"


def test_no_redirections_gives_empty():
    with apply_redirections(["ls"]) as redirs:
        assert redirs.stdin is None and redirs.stdout is None


def test_output_truncates(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old content")
    with apply_redirections(["echo", ">", str(target)]) as redirs:
        redirs.stdout.write("new")
    assert target.read_text() == "new"


def test_output_appends(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("one")
    with apply_redirections(["echo", ">>", str(target)]) as redirs:
        redirs.stdout.write("two")
    assert target.read_text() == "onetwo"


def test_last_output_wins_but_all_created(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    with apply_redirections([">", str(first), ">", str(second)]) as redirs:
        redirs.stdout.write("data")
    assert first.exists()
    assert first.read_text() == ""
    assert second.read_text() == "data"


def test_input_file(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"payload")
    with apply_redirections(["cat", "<", str(source)]) as redirs:
        assert redirs.stdin.read() == b"payload"


def test_heredoc_becomes_stdin():
    with apply_redirections(["cat", "<<", "END"], _reader(["x", "END"])) as redirs:
        assert redirs.stdin.read() == b"x\n"


def test_missing_input_raises(tmp_path):
    missing = str(tmp_path / "missing")
    with pytest.raises(RedirectError) as info:
        apply_redirections(["cat", "<", missing])
    assert info.value.filename == missing
    assert info.value.reason == "No such file or directory"
    assert info.value.code == 1


def test_unopenable_output_raises(tmp_path):
    target = str(tmp_path / "no_dir" / "file")
    with pytest.raises(RedirectError) as info:
        apply_redirections(["echo", ">", target])
    assert info.value.reason == "File could not be opened"


def test_close_releases_streams(tmp_path):
    target = tmp_path / "out"
    redirs = apply_redirections([">", str(target)])
    stream = redirs.stdout
    redirs.close()
    assert stream.closed
    assert redirs.stdout is None