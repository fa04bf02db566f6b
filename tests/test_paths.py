from babashell.environment import Environment, ShellState
from babashell.paths import (
    candidate_paths,
    is_absolute,
    is_relative_executable,
    split_path,
)


def make_state(*entries):
    return ShellState(env=Environment(entries), cwd="/")


def test_relative_executable():
    assert is_relative_executable("./a.out")
    assert not is_relative_executable("./")
    assert not is_relative_executable("a.out")


def test_absolute():
    assert is_absolute("/bin/ls")
    assert not is_absolute("/b")
    assert not is_absolute("bin/ls")


def test_split_path_drops_empty_parts():
    assert split_path("::a::b:") == ["a", "b"]
    assert split_path("") == []


def test_candidates_from_path():
    state = make_state("HOME=/h", "PATH=/bin:/usr/bin/")
    assert candidate_paths(state, "ls") == ["/bin/ls", "/usr/bin/ls"]


def test_candidates_without_path():
    assert candidate_paths(make_state("HOME=/h"), "ls") is None


def test_explicit_paths_kept():
    state = make_state("PATH=/bin")
    assert candidate_paths(state, "./run") == ["./run"]
    assert candidate_paths(state, "/bin/ls") == ["/bin/ls"]


def test_valueless_path_gives_no_candidates():
    assert candidate_paths(make_state("PATH"), "ls") == []


def test_every_candidate_ends_with_command():
    state = make_state("PATH=/a:/b/:/c")
    result = candidate_paths(state, "tool")
    assert len(result) == 3
    assert all(path.endswith("/tool") for path in result)