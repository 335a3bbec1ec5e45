"""
Shell command helpers — the single place subprocesses are started.

Two shapes of execution:

    run_command  → run to completion, optionally piping ``input`` on stdin
    race         → start several commands at once; the first to exit
                   wins and every other one is killed

Output is not captured unless asked for, so the control-plane tool's
own progress messages reach the operator's terminal.
"""

from __future__ import annotations

import logging
import queue
import shlex
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(
    argv: Sequence[str],
    input: str | None = None,
    capture: bool = False,
) -> CommandResult:
    """Run a command to completion.

    Args:
        argv: Command and arguments (never run through a shell).
        input: Text piped to stdin. When None, stdin is closed.
        capture: Capture stdout/stderr instead of inheriting them.

    Returns:
        CommandResult. A non-zero exit is NOT raised; callers decide.
    """
    argv = list(argv)
    logger.debug("Executing: %s", shlex.join(argv))

    result = subprocess.run(
        argv,
        input=input,
        stdin=None if input is not None else subprocess.DEVNULL,
        capture_output=capture,
        text=True,
    )
    return CommandResult(
        argv=argv,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def spawn(argv: Sequence[str]) -> subprocess.Popen:
    """Start a command in the background, stdin closed, output inherited."""
    argv = list(argv)
    logger.debug("Spawning: %s", shlex.join(argv))
    return subprocess.Popen(argv, stdin=subprocess.DEVNULL)


def terminate(procs: Sequence[subprocess.Popen]) -> None:
    """Kill every process that is still running and reap all of them."""
    for proc in procs:
        if proc.poll() is None:
            logger.debug("Killing pid %s", proc.pid)
            proc.kill()
    for proc in procs:
        proc.wait()


def first_settled(procs: Sequence[subprocess.Popen]) -> tuple[int, int]:
    """Block until any of ``procs`` exits, then kill the others.

    Each process gets a watcher thread that reports ``(index,
    returncode)`` on a shared queue; the first report settles the
    race. On return (or on any exception, including
    KeyboardInterrupt) no process from ``procs`` is left running.

    Returns:
        (index of the winning process, its return code)
    """
    settled: queue.Queue[tuple[int, int]] = queue.Queue()

    def _watch(index: int, proc: subprocess.Popen) -> None:
        settled.put((index, proc.wait()))

    watchers = [
        threading.Thread(target=_watch, args=(i, proc), daemon=True)
        for i, proc in enumerate(procs)
    ]
    for t in watchers:
        t.start()

    try:
        return settled.get()
    finally:
        terminate(procs)
        for t in watchers:
            t.join()


def race(commands: Sequence[Sequence[str]]) -> tuple[int, int]:
    """Spawn every command concurrently and return the first to exit.

    See ``first_settled`` for the cleanup guarantee. If spawning one of
    the commands fails, the ones already started are killed before the
    error propagates.
    """
    procs: list[subprocess.Popen] = []
    try:
        for argv in commands:
            procs.append(spawn(argv))
    except BaseException:
        terminate(procs)
        raise
    return first_settled(procs)
