"""Command strategy: render by piping content through an external tool."""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import time
from dataclasses import dataclass

from markupkit.errors import CommandNotFound, NonZeroExit, RenderingError, RenderTimeout
from markupkit.registry.models import CommandSpec, RendererDescriptor

logger = logging.getLogger(__name__)

# Seconds to wait for pipes to close after the process group is killed
_DRAIN_TIMEOUT = 5.0


@dataclass
class ProcessExecution:
    """Outcome of one child process run."""

    argv: list[str]
    stdout: str
    stderr: str
    exit_code: int
    elapsed: float


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill the child and anything it spawned, then reap it."""
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()
    try:
        proc.communicate(timeout=_DRAIN_TIMEOUT)
    except subprocess.TimeoutExpired:
        # A detached descendant still holds the pipes open
        logger.warning("pid %d: output pipes still open after kill, not draining", proc.pid)
        for pipe in (proc.stdout, proc.stderr):
            if pipe is not None:
                pipe.close()
        proc.wait()


class CommandRenderer:
    """Runs an external executable with the markup on stdin, HTML on stdout.

    Arguments are passed as a pre-split vector and content only travels
    through stdin, so nothing the caller supplies is ever parsed by a shell.
    ``communicate`` drains stdout and stderr together, which avoids the
    full-pipe deadlock of reading one stream while the child blocks on the
    other.  The pipes are binary, so output is decoded as UTF-8 with no
    newline translation.  On timeout the child's whole process group is killed.
    """

    def __init__(self, descriptor: RendererDescriptor, default_timeout: float | None = None) -> None:
        if descriptor.command is None:
            raise ValueError(f"{descriptor.name} is not a command renderer")
        self.name = descriptor.name
        self._spec: CommandSpec = descriptor.command
        self._timeout = self._spec.timeout if self._spec.timeout is not None else default_timeout

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def available(self) -> bool:
        return shutil.which(self._spec.executable) is not None

    def render(self, content: str) -> str:
        """Render ``content`` to HTML by running the configured command."""
        execution = self.run(content)
        if execution.exit_code != 0:
            raise NonZeroExit(self._spec.executable, execution.exit_code, execution.stderr)
        return execution.stdout

    def run(self, content: str) -> ProcessExecution:
        """Spawn the command once and capture everything it produced."""
        executable = shutil.which(self._spec.executable)
        if executable is None:
            raise CommandNotFound(self._spec.executable)
        argv = [executable, *self._spec.argv[1:]]

        started = time.monotonic()
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError:
            raise CommandNotFound(self._spec.executable) from None
        except OSError as e:
            raise RenderingError(self.name, f"could not start {self._spec.executable}: {e}") from e

        try:
            stdout, stderr = proc.communicate(input=content.encode("utf-8"), timeout=self._timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            logger.warning(
                "%s killed after %ss (%s)", self._spec.executable, self._timeout, self.name
            )
            raise RenderTimeout(self._spec.executable, self._timeout or 0.0) from None

        execution = ProcessExecution(
            argv=argv,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=proc.returncode,
            elapsed=time.monotonic() - started,
        )
        logger.debug(
            "%s exited %d in %.3fs (%s)",
            self._spec.executable,
            execution.exit_code,
            execution.elapsed,
            self.name,
        )
        return execution
