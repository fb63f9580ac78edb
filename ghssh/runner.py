"""Child-process runner. Every external tool call goes through run_command."""

import os
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Optional

from .logging import format_argv, get_logger
from .models import CommandResult

log = get_logger("runner")

# Signature shared by run_command and the fakes tests inject
Runner = Callable[..., CommandResult]

# Exit codes used when the process never produced one
NOT_FOUND = 127
TIMED_OUT = 124


def run_command(
    args: list[str],
    *,
    env: Optional[Mapping[str, str]] = None,
    cwd: str | Path | None = None,
    timeout: float | None = None,
    input: str | None = None,
) -> CommandResult:
    """
    Run a command and capture its output.

    A missing executable or a timeout does not raise; it comes back as a failed
    CommandResult so callers can treat "no transport" like any other failure.
    `env` entries are merged over the current environment.
    """
    merged_env = None
    if env:
        merged_env = {**os.environ, **env}
    log.debug("run: %s", format_argv(args))
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            env=merged_env,
            cwd=cwd,
            timeout=timeout,
            input=input,
        )
    except FileNotFoundError:
        log.debug("not found: %s", args[0])
        return CommandResult(args=list(args), returncode=NOT_FOUND, stderr=f"{args[0]}: command not found")
    except subprocess.TimeoutExpired:
        log.debug("timed out after %ss: %s", timeout, format_argv(args))
        return CommandResult(args=list(args), returncode=TIMED_OUT, stderr=f"{args[0]}: timed out after {timeout}s")
    log.debug("exit %d: %s", proc.returncode, args[0])
    return CommandResult(
        args=list(args),
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
