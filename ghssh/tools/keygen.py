"""Key-pair generator — thin wrapper over ssh-keygen."""

from pathlib import Path

from ..errors import ToolError
from ..logging import get_logger
from ..models import CommandResult
from ..runner import Runner, run_command

log = get_logger("keygen")


class KeyGenerator:
    """Creates key pairs. Callers decide whether a key should be (re)generated."""

    def __init__(self, runner: Runner = run_command, key_type: str = "ed25519"):
        self.runner = runner
        self.key_type = key_type

    def generate(self, key_path: Path, comment: str = "") -> CommandResult:
        """Write key_path and key_path.pub with an empty passphrase; raise ToolError on failure."""
        result = self.runner(
            ["ssh-keygen", "-t", self.key_type, "-C", comment, "-f", str(key_path), "-N", ""],
        )
        if not result.ok:
            raise ToolError(f"ssh-keygen failed for {key_path}", result)
        log.info("generated %s key %s", self.key_type, key_path)
        return result
