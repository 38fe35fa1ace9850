"""Process control helpers for blocking command execution and interrupt cleanup."""

import platform
import subprocess
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Set

from ..infra.logger import echo_output, log_command


IS_WINDOWS = platform.system() == "Windows"

_active_processes: Set[subprocess.Popen] = set()
_active_processes_lock = threading.Lock()


class CommandError(Exception):
    """An external command could not be spawned or exited non-zero."""

    def __init__(self, operation: str, returncode: Optional[int], stdout: str = "", stderr: str = ""):
        self.operation = operation
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.returncode is None:
            detail = f"`{self.operation}` could not be started"
        else:
            detail = f"`{self.operation}` exited with status {self.returncode}"
        stderr = (self.stderr or "").strip()
        if stderr:
            detail += f": {stderr[:500]}"
        return detail


def background_subprocess_kwargs() -> Dict[str, Any]:
    """Return subprocess kwargs that hide console windows on Windows."""
    if not IS_WINDOWS:
        return {}

    startupinfo = subprocess.STARTUPINFO()
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
    startupinfo.wShowWindow = subprocess.SW_HIDE
    return {
        "startupinfo": startupinfo,
        "creationflags": subprocess.CREATE_NO_WINDOW,
    }


def start_tracked_process(command, **kwargs) -> subprocess.Popen:
    """Start a subprocess and track it for interrupt cleanup."""
    popen_kwargs = dict(kwargs)
    for key, value in background_subprocess_kwargs().items():
        popen_kwargs.setdefault(key, value)

    process = subprocess.Popen(command, **popen_kwargs)
    with _active_processes_lock:
        _active_processes.add(process)
    return process


def untrack_process(process: subprocess.Popen) -> None:
    """Remove process from tracked set."""
    with _active_processes_lock:
        _active_processes.discard(process)


def terminate_process(process: subprocess.Popen, timeout: float = 2.0) -> None:
    """Terminate a process (and children on Windows) best-effort."""
    if process.poll() is not None:
        return

    try:
        if IS_WINDOWS:
            subprocess.run(
                ["taskkill", "/F", "/T", "/PID", str(process.pid)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
                **background_subprocess_kwargs(),
            )
        else:
            process.terminate()
    except OSError:
        pass

    try:
        process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()


def terminate_all_tracked_processes() -> None:
    """Terminate all tracked subprocesses best-effort."""
    with _active_processes_lock:
        processes = list(_active_processes)

    for process in processes:
        terminate_process(process)
        untrack_process(process)


def run_command(command: Sequence[str], cwd: Path) -> str:
    """Run ``command`` in ``cwd`` to completion and return its stdout.

    The command line is logged first and the captured output is echoed
    afterwards. There is no timeout: a hung command blocks the caller.

    Raises:
        CommandError: the command could not be started or exited non-zero.
    """
    command = [str(part) for part in command]
    operation = " ".join(command)
    log_command(command, cwd)

    try:
        process = start_tracked_process(
            command,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        raise CommandError(operation, None, "", str(exc)) from exc

    try:
        stdout, stderr = process.communicate()
    finally:
        untrack_process(process)

    echo_output(stdout, stderr)
    if process.returncode != 0:
        raise CommandError(operation, process.returncode, stdout, stderr)
    return stdout
