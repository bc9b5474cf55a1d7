from __future__ import annotations
import os
import select
import shutil
import signal
import subprocess
import threading
import time
from dataclasses import dataclass, field
from typing import IO, Optional

DEFAULT_TIMEOUT = 20.0
OUTPUT_LIMIT = 8192
_CHUNK = 4096
_POLL = os.name != "nt"
_POLL_INTERVAL = 0.1
_DRAIN_GRACE = 1.0


@dataclass
class ProcessRequest:
    command: str
    args: list[str] = field(default_factory=list)
    cwd: Optional[str] = None
    env: Optional[dict[str, str]] = None
    shell: bool = True

    def display(self) -> str:
        return " ".join([self.command, *self.args]).strip()


@dataclass
class ProcessResult:
    exit_code: Optional[int]
    stdout: str = ""
    stderr: str = ""
    stdout_truncated: bool = False
    stderr_truncated: bool = False
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and not self.timed_out and self.exit_code == 0


class _CappedReader(threading.Thread):
    """Drain a pipe, keeping at most ``limit`` bytes.

    On POSIX the pipe is polled so ``stop`` can end the thread even while a
    detached grandchild still holds the write end open.
    """

    def __init__(self, stream: IO[bytes], limit: int):
        super().__init__(daemon=True)
        self.stream = stream
        self.limit = limit
        self.buf = bytearray()
        self._halt = threading.Event()

    def run(self) -> None:
        fd = self.stream.fileno()
        try:
            while not self._halt.is_set():
                if _POLL and not select.select([fd], [], [], _POLL_INTERVAL)[0]:
                    continue
                chunk = os.read(fd, _CHUNK)
                if not chunk:
                    break
                room = self.limit - len(self.buf)
                if room > 0:
                    self.buf.extend(chunk[:room])
        except (OSError, ValueError):
            # pipe closed underneath us after a kill
            pass
        finally:
            try:
                self.stream.close()
            except OSError:
                pass

    def stop(self) -> None:
        self._halt.set()

    @property
    def truncated(self) -> bool:
        return len(self.buf) >= self.limit

    def text(self) -> str:
        # U+FFFD is three bytes, so re-trim after decoding to stay within the cap.
        decoded = bytes(self.buf).decode("utf-8", errors="replace")
        return decoded.encode("utf-8")[: self.limit].decode("utf-8", errors="ignore")


def _shell_argv(line: str) -> list[str]:
    if os.name == "nt":
        # Windows: let cmd.exe parse builtins and operators
        return ["cmd.exe", "/c", line]
    # POSIX: prefer bash, fallback to sh
    shell = "bash" if shutil.which("bash") else "sh"
    return [shell, "-c", line]


def _kill(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    try:
        if os.name != "nt":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except (ProcessLookupError, PermissionError):
        # already gone; the exit won the race
        pass


def run_process(
    req: ProcessRequest,
    timeout: float = DEFAULT_TIMEOUT,
    output_limit: int = OUTPUT_LIMIT,
) -> ProcessResult:
    """Run a command with a wall-clock deadline and capped stdout/stderr capture."""
    argv = _shell_argv(req.display()) if req.shell else [req.command, *req.args]
    env = {**os.environ, **req.env} if req.env else None
    try:
        proc = subprocess.Popen(
            argv,
            cwd=req.cwd,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=(os.name != "nt"),
        )
    except OSError as e:
        return ProcessResult(exit_code=None, error=e.strerror or str(e))

    out = _CappedReader(proc.stdout, output_limit)
    err = _CappedReader(proc.stderr, output_limit)
    out.start()
    err.start()

    timed_out = False
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        timed_out = True
        _kill(proc)
        proc.wait()

    # Grandchildren may still hold the pipes open; don't wait on them forever.
    deadline = time.monotonic() + _DRAIN_GRACE
    for reader in (out, err):
        reader.join(timeout=max(0.0, deadline - time.monotonic()))
    for reader in (out, err):
        reader.stop()
    for reader in (out, err):
        reader.join(timeout=_DRAIN_GRACE)
        # A reader blocked without polling (Windows) still owns its stream.
        if not reader.is_alive():
            reader.stream.close()

    return ProcessResult(
        exit_code=proc.returncode,
        stdout=out.text(),
        stderr=err.text(),
        stdout_truncated=out.truncated,
        stderr_truncated=err.truncated,
        timed_out=timed_out,
        error=f"Process killed after timeout of {timeout:g}s" if timed_out else None,
    )
