# Console logging module: uniform log output for the whole tool
#
# Main functions:
#   - log_info() / log_success() / log_warning() / log_error()
#   - log_command(): announce an external command before it runs
#   - echo_output(): replay a command's captured stdout/stderr
#
# Features:
#   - timestamped lines
#   - colored level tags through colorama when the terminal supports it

import sys
from datetime import datetime
from typing import Sequence

import colorama

colorama.just_fix_windows_console()

COLOR_RESET = colorama.Style.RESET_ALL
COLOR_INFO = colorama.Fore.CYAN
COLOR_SUCCESS = colorama.Fore.GREEN
COLOR_ERROR = colorama.Fore.RED
COLOR_WARNING = colorama.Fore.YELLOW
COLOR_COMMAND = colorama.Fore.MAGENTA


def _get_timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _format_message(level: str, color: str, message: str, stream=None) -> str:
    """Format a log line, coloring the level tag only on terminals."""
    stream = stream or sys.stdout
    timestamp = _get_timestamp()
    if stream.isatty():
        return f"{color}[{level}]{COLOR_RESET} [{timestamp}] {message}"
    return f"[{level}] [{timestamp}] {message}"


def log_info(message: str) -> None:
    print(_format_message("INFO", COLOR_INFO, message))


def log_success(message: str) -> None:
    print(_format_message("SUCCESS", COLOR_SUCCESS, message))


def log_warning(message: str) -> None:
    print(_format_message("WARNING", COLOR_WARNING, message))


def log_error(message: str) -> None:
    """Error lines go to stderr."""
    print(_format_message("ERROR", COLOR_ERROR, message, sys.stderr), file=sys.stderr)


def log_command(command: Sequence[str], cwd=None) -> None:
    rendered = " ".join(str(part) for part in command)
    if cwd is not None:
        rendered = f"{rendered}  (in {cwd})"
    print(_format_message("@", COLOR_COMMAND, rendered))


def echo_output(stdout: str, stderr: str) -> None:
    if stdout:
        sys.stdout.write(stdout if stdout.endswith("\n") else stdout + "\n")
    if stderr:
        sys.stderr.write(stderr if stderr.endswith("\n") else stderr + "\n")
