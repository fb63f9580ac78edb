"""CLI tests: commands and the interactive menu, with external tools faked."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from ghssh.cli import app
from ghssh.models import CommandResult

from conftest import FakeRunner, fake_keygen

PROFILES_CONFIG = """\
Host github-work
  HostName github.com
  User git
  IdentityFile ~/.ssh/id_ed25519_work
  IdentitiesOnly yes

Host github-personal
  HostName github.com
  User git
  IdentityFile ~/.ssh/id_ed25519_personal
  IdentitiesOnly yes
"""


def _fake_git(args):
    """work can push, personal can only pull."""
    if args[1] == "ls-remote":
        return CommandResult(args=args, returncode=0, stdout="abc123\tHEAD\n")
    if args[1] == "push":
        url = args[3]
        if "github-work" in url:
            return CommandResult(args=args, returncode=0, stderr=f"To {url}\n * [new branch]      HEAD -> x\n")
        return CommandResult(args=args, returncode=128, stderr="ERROR: Permission to org/project.git denied to me.\n")
    return CommandResult(args=args, returncode=0)


@pytest.fixture
def cli(tmp_path):
    """Invoke the app against a temp ssh dir with a fake runner."""
    ssh_dir = tmp_path / ".ssh"
    cfg = tmp_path / "ghssh.yaml"
    cfg.write_text(f"ssh_dir: {ssh_dir}\n")
    fake = FakeRunner({("ssh-keygen",): fake_keygen, ("git",): _fake_git})
    runner = CliRunner()

    def invoke(*args, input=None):
        env = {"SSH_AUTH_SOCK": "/tmp/test-agent.sock"}
        with patch("ghssh.cli.run_command", fake):
            return runner.invoke(app, ["--config", str(cfg), *args], input=input, env=env)

    invoke.ssh_dir = ssh_dir
    invoke.fake = fake
    return invoke


def _write_config(cli, text=PROFILES_CONFIG):
    cli.ssh_dir.mkdir(exist_ok=True)
    (cli.ssh_dir / "config").write_text(text)


def test_perms_report(cli):
    """perms prints one Pull/Push line per profile and a recommendation."""
    _write_config(cli)
    result = cli("perms", "https://github.com/org/project")
    assert result.exit_code == 0, result.output
    assert "github-work: ✓ Pull ✓ Push" in result.output
    assert "github-personal: ✓ Pull ✗ Push" in result.output
    assert "Recommended: git clone git@github-work:org/project.git" in result.output


def test_clone_check_alias(cli):
    """clone-check is kept as an alias of perms."""
    _write_config(cli)
    result = cli("clone-check", "org/project")
    assert result.exit_code == 0
    assert "Recommended: git clone git@github-work:org/project.git" in result.output


def test_perms_json(cli):
    """--json lists profiles in config order with their access flags."""
    _write_config(cli)
    result = cli("perms", "org/project", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [p["alias"] for p in data["profiles"]] == ["github-work", "github-personal"]
    assert data["profiles"][1]["can_write"] is False


def test_perms_invalid_reference(cli):
    """A malformed reference is a usage error and contacts no remote."""
    _write_config(cli)
    result = cli("perms", "not-a-repo")
    assert result.exit_code == 2
    assert "Traceback" not in result.output
    assert "not-a-repo" in result.output
    assert cli.fake.argv("git") == []


def test_perms_no_profiles(cli):
    """A config without GitHub aliases is a usage error and contacts no remote."""
    _write_config(cli, "Host example.com\n  User admin\n")
    result = cli("perms", "org/project")
    assert result.exit_code == 2
    assert "No GitHub profiles configured" in result.output
    assert cli.fake.argv("git") == []


def test_add_then_list(cli):
    """add prints the public key and writes the Host alias; list shows the files."""
    result = cli("add", "me@work.example", "work")
    assert result.exit_code == 0, result.output
    assert "Public key to add to GitHub (work):" in result.output
    assert "ssh-ed25519 AAAAC3NzaFAKE me@work.example" in result.output
    assert "Test with: ssh -T github-work" in result.output
    assert "Host github-work" in (cli.ssh_dir / "config").read_text()

    listed = cli("list")
    assert "id_ed25519_work" in listed.output
    assert json.loads(cli("list", "--json").output) == ["id_ed25519_work", "id_ed25519_work.pub"]


def test_add_invalid_profile(cli):
    """Unsafe profile names fail before any tool runs."""
    result = cli("add", "me@x", "bad name")
    assert result.exit_code != 0
    assert cli.fake.calls == []


def test_remove(cli):
    """remove reports both the key files and the config entry."""
    cli("add", "me@x", "work")
    result = cli("remove", "work")
    assert result.exit_code == 0
    assert "Removed local key files for work." in result.output
    assert "Removed SSH config entry for github-work." in result.output


def test_check_exit_codes(cli):
    """check exits 0 on the GitHub greeting and 1 otherwise."""
    cli.fake.responses[("ssh", "-T", "github-work")] = CommandResult(
        args=["ssh"], returncode=1,
        stderr="Hi me! You've successfully authenticated, but GitHub does not provide shell access.\n",
    )
    ok = cli("check", "github-work")
    assert ok.exit_code == 0
    assert "Hi me!" in ok.output
    assert cli("check", "github-nowhere").exit_code == 1


def test_delete_all_confirmation(cli):
    """delete-all asks first unless --yes is given."""
    cli("add", "me@x", "work")
    aborted = cli("delete-all", input="n\n")
    assert "Aborted." in aborted.output
    assert (cli.ssh_dir / "id_ed25519_work").exists()

    done = cli("delete-all", "--yes")
    assert done.exit_code == 0
    assert "All keys and related SSH config entries deleted" in done.output
    assert not (cli.ssh_dir / "id_ed25519_work").exists()


def test_unknown_command_fails(cli):
    """Unknown subcommands fail."""
    assert cli("frobnicate").exit_code != 0


def test_menu_list_and_exit(cli):
    """No subcommand opens the menu; 3 lists keys, 0 exits."""
    result = cli(input="3\n0\n")
    assert result.exit_code == 0
    assert "GitHub SSH Key Manager" in result.output
    assert "Local SSH keys in" in result.output
    assert "Exiting..." in result.output


def test_menu_invalid_option_then_eof(cli):
    """Unknown choices are reported and end of input exits."""
    result = cli(input="9\n")
    assert result.exit_code == 0
    assert "Invalid option." in result.output
    assert "Exiting..." in result.output


def test_menu_end_of_input_exits_cleanly(cli):
    """Ctrl-D at the menu prompt leaves the menu with exit 0, not Aborted."""
    result = cli(input="")
    assert result.exit_code == 0
    assert "Exiting..." in result.output
    assert "Aborted" not in result.output


def test_bad_settings_file_is_short_error(tmp_path):
    """Unreadable settings YAML gives a usage error, not a traceback."""
    cfg = tmp_path / "ghssh.yaml"
    cfg.write_text("ssh_dir: [unclosed\n")
    result = CliRunner().invoke(app, ["--config", str(cfg), "list"])
    assert result.exit_code == 2
    assert "Could not parse config file" in result.output


def test_menu_error_keeps_session(cli):
    """An action error is shown and the menu keeps running."""
    _write_config(cli)
    result = cli(input="7\nnot-a-repo\n7\norg/project\n0\n")
    assert result.exit_code == 0
    assert "Invalid repository reference" in result.output
    assert "github-work: ✓ Pull ✓ Push" in result.output


def test_version():
    """--version prints the package version."""
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("ghssh ")
