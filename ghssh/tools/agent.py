"""Credential-agent session — ssh-agent discovery/start plus ssh-add."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

from ..errors import ToolError
from ..logging import get_logger
from ..models import CommandResult
from ..runner import Runner, run_command

log = get_logger("agent")

AGENT_VARS = ("SSH_AUTH_SOCK", "SSH_AGENT_PID")

# SSH_AUTH_SOCK=/tmp/ssh-XXXX/agent.123; export SSH_AUTH_SOCK;
_AGENT_ENV_RE = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;\s]+)")


def parse_agent_env(output: str) -> dict[str, str]:
    """Variables from `ssh-agent -s` output."""
    return dict(_AGENT_ENV_RE.findall(output))


class AgentSession:
    """
    Handle on one ssh-agent.

    Reuses the agent named by SSH_AUTH_SOCK in `environ` when there is one and
    starts a new agent otherwise. The session's variables are passed to every
    ssh-add call explicitly instead of mutating the process environment.
    """

    def __init__(self, runner: Runner = run_command, environ: Mapping[str, str] | None = None):
        self.runner = runner
        source = os.environ if environ is None else environ
        self.env: dict[str, str] = {k: source[k] for k in AGENT_VARS if source.get(k)}
        self.started = False

    @property
    def active(self) -> bool:
        return bool(self.env.get("SSH_AUTH_SOCK"))

    def ensure_started(self) -> None:
        """Start an agent if none is reachable; raise ToolError if that fails."""
        if self.active:
            return
        result = self.runner(["ssh-agent", "-s"])
        env = parse_agent_env(result.stdout)
        if not result.ok or "SSH_AUTH_SOCK" not in env:
            raise ToolError("Could not start ssh-agent", result)
        self.env.update(env)
        self.started = True
        log.info("started ssh-agent (pid %s)", env.get("SSH_AGENT_PID", "?"))

    def add(self, key_path: Path) -> CommandResult:
        """Register a private key with the agent."""
        self.ensure_started()
        result = self.runner(["ssh-add", str(key_path)], env=self.env)
        if not result.ok:
            raise ToolError(f"ssh-add failed for {key_path}", result)
        log.info("added %s to ssh-agent", key_path)
        return result

    def drop_all(self) -> bool:
        """Remove every identity from the agent. Best effort: False if it did not work."""
        if not self.active:
            log.debug("no ssh-agent to clear")
            return False
        result = self.runner(["ssh-add", "-D"], env=self.env)
        if not result.ok:
            log.debug("ssh-add -D failed: %s", result.output.strip())
        return result.ok
