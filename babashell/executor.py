"""Running parsed commands: builtins in the shell, programs as child processes."""

from __future__ import annotations

import copy
import os
import subprocess
import sys
from collections.abc import Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import IO, Any

from .builtins import ShellExit, run_builtin
from .environment import ShellState, entry_name, entry_value
from .errors import report
from .parser import Command
from .paths import candidate_paths
from .redirects import (
    RedirectError,
    apply_redirections,
    redirection_type,
    strip_redirections,
)
from .signals import SignalMode, install_handlers

_SIGNALED = 130
_HEREDOC = 2


def exit_status(returncode: int) -> int:
    """Map a child's return code to the shell status: 130 when killed by a signal."""
    return _SIGNALED if returncode < 0 else returncode


def _spawn(
    argv: list[str], state: ShellState, stdin: IO[Any] | None, stdout: IO[Any] | None
) -> int:
    for stream in (sys.stdout, stdout):
        if stream is not None:
            stream.flush()
    env = {entry_name(entry): entry_value(entry) for entry in state.env.envp()}
    try:
        completed = subprocess.run(
            argv, stdin=stdin, stdout=stdout, env=env, check=False
        )
    except OSError as err:
        return (err.errno or 1) % 256
    return exit_status(completed.returncode)


def _execute(
    args: list[str], state: ShellState, stdin: IO[Any] | None, stdout: IO[Any] | None
) -> int:
    cmd = args[0]
    paths = candidate_paths(state, cmd)
    if paths is None:
        return report(None, cmd, "No such file or directory", 127)
    if cmd:
        for path in paths:
            if os.access(path, os.X_OK):
                return _spawn([path, *args[1:]], state, stdin, stdout)
    return report(None, cmd, "command not found", 127)


def run_single(
    command: Command,
    state: ShellState,
    stdin: IO[Any] | None = None,
    stdout: IO[Any] | None = None,
) -> int:
    """Run one command whose redirections are already resolved; return its status.

    ``exit`` raises ShellExit.
    """
    args = list(command.args)
    status = run_builtin(args, state, stdout)
    if status is not None:
        return status
    return _execute(args, state, stdin, stdout)


def _close_all(*streams: IO[Any] | None) -> None:
    for stream in streams:
        if stream is None:
            continue
        try:
            stream.close()
        except OSError:
            pass


def _run_stage(
    args: list[str], state: ShellState, stdin: IO[Any] | None, stdout: IO[Any] | None
) -> int:
    try:
        return run_single(Command(args), state, stdin, stdout)
    except ShellExit as exc:
        return exc.code
    except BrokenPipeError:
        return _SIGNALED
    finally:
        _close_all(stdin, stdout)


def _finished(status: int) -> Future[int]:
    done: Future[int] = Future()
    done.set_result(status)
    return done


def _launch(
    pool: ThreadPoolExecutor,
    command: Command,
    state: ShellState,
    pipe_in: IO[Any] | None,
    pipe_out: IO[Any] | None,
) -> Future[int]:
    try:
        redirections = apply_redirections(command.args)
    except RedirectError as err:
        _close_all(pipe_in, pipe_out)
        return _finished(report(None, err.filename, err.reason, err.code))
    stdin: IO[Any] | None = pipe_in
    stdout: IO[Any] | None = pipe_out
    if redirections.stdin is not None:
        _close_all(pipe_in)
        stdin = redirections.stdin
    if redirections.stdout is not None:
        _close_all(pipe_out)
        stdout = redirections.stdout
    args = strip_redirections(command.args)
    return pool.submit(_run_stage, args, copy.deepcopy(state), stdin, stdout)


def _has_heredoc(commands: Iterable[Command]) -> bool:
    return any(
        redirection_type(arg) == _HEREDOC for command in commands for arg in command.args
    )


def _restore_cwd(path: str) -> None:
    try:
        if os.getcwd() != path:
            os.chdir(path)
    except OSError:
        pass


def run_pipeline(commands: Sequence[Command], state: ShellState) -> int:
    """Run commands connected by pipes; return the status of the last one.

    Every stage works on its own copy of the shell state, so builtins in a
    pipeline leave the session unchanged.
    """
    stages = list(commands)
    if not stages:
        return 0
    install_handlers(SignalMode.HEREDOC if _has_heredoc(stages) else SignalMode.CHILD)
    saved_cwd = os.getcwd()
    last = len(stages) - 1
    results: list[Future[int]] = []
    upstream: IO[Any] | None = None
    try:
        with ThreadPoolExecutor(max_workers=len(stages)) as pool:
            for position, command in enumerate(stages):
                pipe_in, upstream = upstream, None
                pipe_out: IO[Any] | None = None
                if position != last:
                    read_fd, write_fd = os.pipe()
                    upstream = os.fdopen(read_fd, "rb")
                    pipe_out = os.fdopen(write_fd, "w", encoding="utf-8")
                results.append(_launch(pool, command, state, pipe_in, pipe_out))
            install_handlers(SignalMode.CHILD)
            statuses = [result.result() for result in results]
    finally:
        _restore_cwd(saved_cwd)
    return statuses[-1]


def run_commands(commands: Sequence[Command], state: ShellState) -> int:
    """Run a parsed command line and record its status in ``state``."""
    stages = list(commands)
    if not stages:
        return state.exit_code
    if len(stages) > 1:
        if any(not command.args for command in stages):
            state.exit_code = report(
                "minishell", None, "syntax error near unexpected token", 2
            )
        else:
            state.exit_code = run_pipeline(stages, state)
        return state.exit_code
    command = stages[0]
    if not command.args:
        return state.exit_code
    if _has_heredoc(stages):
        install_handlers(SignalMode.HEREDOC)
    try:
        redirections = apply_redirections(command.args)
    except RedirectError as err:
        state.exit_code = report(None, err.filename, err.reason, err.code)
        return state.exit_code
    install_handlers(SignalMode.CHILD)
    with redirections:
        state.exit_code = run_single(
            Command(strip_redirections(command.args)),
            state,
            redirections.stdin,
            redirections.stdout,
        )
    return state.exit_code