"""Version-control client — remote reachability and push rehearsal via git."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from ..logging import get_logger
from ..models import CommandResult
from ..runner import Runner, run_command

log = get_logger("git")

# Never prompt: a probe that would need a password or passphrase just fails
PROBE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_SSH_COMMAND": "ssh -o BatchMode=yes -o StrictHostKeyChecking=accept-new",
}

# Scratch commit: local identity, signing and hooks off. It never leaves the machine.
_SCRATCH_CONFIG = [
    "-c", "user.name=ghssh",
    "-c", "user.email=ghssh@localhost",
    "-c", "commit.gpgsign=false",
    "-c", "core.hooksPath=/dev/null",
]


class GitClient:
    """
    Runs the two probes the access check needs.

    `push --dry-run` needs a local repository with a commit to offer, so the
    client builds a throw-away scratch repo on first use and removes it on
    close(). Use it as a context manager.
    """

    def __init__(self, runner: Runner = run_command, timeout: float | None = None):
        self.runner = runner
        self.timeout = timeout
        self._scratch: Path | None = None
        self._scratch_error: CommandResult | None = None

    def __enter__(self) -> "GitClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._scratch is not None:
            shutil.rmtree(self._scratch, ignore_errors=True)
            self._scratch = None

    def _run(self, args: list[str], cwd: Path | None = None) -> CommandResult:
        return self.runner(args, env=PROBE_ENV, cwd=cwd, timeout=self.timeout)

    def ls_remote_head(self, url: str) -> CommandResult:
        """Look up HEAD on the remote; transfers refs only, never objects."""
        return self._run(["git", "ls-remote", url, "HEAD"])

    def _scratch_repo(self) -> Path | CommandResult:
        """Path of the scratch repo, or the failed result that prevented building it."""
        if self._scratch is not None:
            return self._scratch
        if self._scratch_error is not None:
            return self._scratch_error
        path = Path(tempfile.mkdtemp(prefix="ghssh-probe-"))
        for args in (
            ["git", "init", "-q", str(path)],
            ["git", *_SCRATCH_CONFIG, "-C", str(path), "commit", "-q", "--allow-empty", "-m", "ghssh access probe"],
        ):
            result = self.runner(args)
            if not result.ok:
                shutil.rmtree(path, ignore_errors=True)
                self._scratch_error = result
                log.debug("could not build scratch repo: %s", result.output.strip())
                return result
        self._scratch = path
        return path

    def push_dry_run(self, url: str, branch: str) -> CommandResult:
        """Rehearse pushing a new branch; the remote is contacted but nothing is sent or updated."""
        repo = self._scratch_repo()
        if isinstance(repo, CommandResult):
            return repo
        return self._run(
            ["git", "push", "--dry-run", url, f"HEAD:refs/heads/{branch}"],
            cwd=repo,
        )
