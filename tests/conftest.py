"""Shared fakes: nothing in the test suite runs ssh, ssh-keygen or git for real."""

from pathlib import Path

import pytest

from ghssh.models import CommandResult
from ghssh.settings import Settings


class FakeRunner:
    """
    Stands in for ghssh.runner.run_command.

    `responses` maps an argv prefix (tuple) to a CommandResult or to a callable
    taking argv and returning one. First matching prefix wins; anything
    unmatched succeeds with no output.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((list(args), kwargs))
        for prefix, resp in self.responses.items():
            if tuple(args[: len(prefix)]) == tuple(prefix):
                return resp(list(args)) if callable(resp) else resp
        return CommandResult(args=list(args), returncode=0)

    def argv(self, program=None):
        return [a for a, _ in self.calls if program is None or a[0] == program]


def fake_keygen(args):
    """Write the key pair ssh-keygen would have written."""
    path = Path(args[args.index("-f") + 1])
    comment = args[args.index("-C") + 1]
    path.write_text("PRIVATE KEY PLACEHOLDER\n")
    Path(str(path) + ".pub").write_text(f"ssh-ed25519 AAAAC3NzaFAKE {comment}\n")
    return CommandResult(args=args, returncode=0)


@pytest.fixture
def settings(tmp_path):
    return Settings(ssh_dir=tmp_path / ".ssh")


@pytest.fixture
def runner():
    return FakeRunner({("ssh-keygen",): fake_keygen})
