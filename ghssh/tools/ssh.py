"""Remote-access transport client — `ssh -T` against GitHub."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..logging import get_logger
from ..models import CommandResult
from ..runner import Runner, run_command

log = get_logger("ssh")

# GitHub greets with "Hi <user>! You've successfully authenticated, but ..."
SUCCESS_MARKER = "successfully authenticated"
GREETING_MARKERS = ("Hi", "Permission denied")


@dataclass
class ConnectionCheck:
    """Outcome of one `ssh -T`."""

    target: str
    ok: bool
    greeting: str
    result: CommandResult


def greeting_lines(output: str) -> list[str]:
    """Lines that say who we authenticated as, or that we were refused."""
    return [ln.strip() for ln in output.splitlines() if any(m in ln for m in GREETING_MARKERS)]


class SshClient:
    """Opens test sessions; GitHub never grants a shell so exit status alone is not enough."""

    def __init__(self, runner: Runner = run_command, timeout: float | None = None):
        self.runner = runner
        self.timeout = timeout

    def _check(self, target: str, args: list[str]) -> ConnectionCheck:
        result = self.runner(args, timeout=self.timeout)
        output = result.output
        ok = SUCCESS_MARKER in output
        lines = greeting_lines(output)
        greeting = "\n".join(lines) if lines else output.strip()
        log.debug("ssh -T %s: %s", target, "ok" if ok else "failed")
        return ConnectionCheck(target=target, ok=ok, greeting=greeting, result=result)

    def test_alias(self, alias: str) -> ConnectionCheck:
        """`ssh -T <alias>`: uses the alias's Host block, so its IdentityFile."""
        return self._check(alias, ["ssh", "-T", alias])

    def test_key(self, key_path: Path, host: str = "github.com") -> ConnectionCheck:
        """Authenticate with exactly one key file, bypassing the config aliases."""
        return self._check(
            str(key_path),
            [
                "ssh", "-i", str(key_path),
                "-o", "IdentitiesOnly=yes",
                "-o", "StrictHostKeyChecking=no",
                "-T", f"git@{host}",
            ],
        )
