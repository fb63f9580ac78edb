"""CLI entry point — profile commands, repository access check, interactive menu."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from . import __version__
from .errors import GhsshError, NoProfilesConfigured
from .format import (
    format_add_outcome,
    format_delete_all,
    format_key_list,
    format_linked,
    format_probe_json,
    format_probe_report,
    format_remove_outcome,
)
from .logging import configure_logging
from .menu import MenuItem, Prompt, run_menu
from .models import ProbeReport
from .probe import probe_access
from .profiles import (
    add_profile,
    check_alias,
    delete_all,
    known_aliases,
    list_keys,
    list_linked,
    remove_profile,
)
from .runner import Runner, run_command
from .settings import Settings, load_settings
from .sshconfig import ConfigStore
from .tools import AgentSession, GitClient, KeyGenerator, SshClient

CONFIRM_DELETE_ALL = "Are you sure you want to delete ALL SSH keys? This cannot be undone! (y/n)"


def _err(msg: str) -> None:
    """Fail the command with Click's error box."""
    raise typer.BadParameter(msg)


@dataclass
class Services:
    """Explicit handles every command works through."""

    settings: Settings
    store: ConfigStore
    agent: AgentSession
    keygen: KeyGenerator
    ssh: SshClient
    runner: Runner


def build_services(settings: Settings) -> Services:
    runner = run_command
    return Services(
        settings=settings,
        store=ConfigStore(settings.config_file),
        agent=AgentSession(runner),
        keygen=KeyGenerator(runner, key_type=settings.key_type),
        ssh=SshClient(runner, timeout=settings.timeout),
        runner=runner,
    )


app = typer.Typer(help="Manage several GitHub SSH identities on one machine.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ghssh {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path = typer.Option(None, "--config", "-c", help="Settings YAML (default: $GHSSH_CONFIG or ~/.config/ghssh/config.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
) -> None:
    """With no command, open the interactive menu."""
    if verbose:
        configure_logging(logging.DEBUG)
    try:
        settings = load_settings(config)
    except GhsshError as e:
        _err(str(e))
    ctx.obj = build_services(settings)
    if ctx.invoked_subcommand is None:
        run_menu(_menu_items(ctx.obj))


# Shared by the commands and the menu


def _do_add(svc: Services, email: str, profile: str) -> None:
    outcome = add_profile(email, profile, svc.settings, svc.store, svc.agent, svc.keygen)
    typer.echo(format_add_outcome(outcome))


def _do_remove(svc: Services, profile: str) -> None:
    outcome = remove_profile(profile, svc.settings, svc.store, svc.agent)
    typer.echo(format_remove_outcome(outcome))


def _do_list(svc: Services) -> None:
    typer.echo(format_key_list(svc.settings.ssh_dir, list_keys(svc.settings)))


def _do_linked(svc: Services) -> None:
    typer.echo(format_linked(list_linked(svc.settings, svc.ssh)))


def _do_check(svc: Services, alias: str) -> bool:
    typer.echo(f"Testing SSH connection for {alias}...")
    result = check_alias(alias, svc.ssh)
    if result.greeting:
        typer.echo(result.greeting)
    return result.ok


def _do_delete_all(svc: Services) -> None:
    typer.echo(format_delete_all(delete_all(svc.settings, svc.store, svc.agent)))


def _probe(svc: Services, repo: str) -> ProbeReport:
    """Run the access check with the aliases from the SSH config."""
    settings = svc.settings
    aliases = known_aliases(settings, svc.store)
    with GitClient(svc.runner, timeout=settings.timeout) as git:
        try:
            return probe_access(
                repo,
                aliases,
                git,
                alias_prefix=settings.alias_prefix,
                probe_branch=settings.probe_branch,
            )
        except NoProfilesConfigured as e:
            raise NoProfilesConfigured(str(settings.config_file)) from e


def _menu_items(svc: Services) -> list[MenuItem]:
    def add(prompt: Prompt) -> None:
        email = prompt("Email")
        profile = prompt("Profile name (e.g., personal, work)")
        _do_add(svc, email, profile)

    def remove(prompt: Prompt) -> None:
        _do_remove(svc, prompt("Profile name to remove"))

    def delete(prompt: Prompt) -> None:
        if prompt(CONFIRM_DELETE_ALL).strip() == "y":
            _do_delete_all(svc)
        else:
            typer.echo("Aborted.")

    def check(prompt: Prompt) -> None:
        _do_check(svc, prompt("Alias to test (e.g., github-work)"))

    def perms(prompt: Prompt) -> None:
        typer.echo(format_probe_report(_probe(svc, prompt("Repository (owner/name or URL)"))))

    return [
        MenuItem("1", "Add new SSH key", add),
        MenuItem("2", "Remove a key", remove),
        MenuItem("3", "List local keys", lambda prompt: _do_list(svc)),
        MenuItem("4", "Check which keys authenticate (linked)", lambda prompt: _do_linked(svc)),
        MenuItem("5", "Delete all keys", delete),
        MenuItem("6", "Test a key by alias", check),
        MenuItem("7", "Check repository access (clone/push)", perms),
    ]


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Email used as the key comment"),
    profile: str = typer.Argument(..., help="Profile name, e.g. personal or work"),
) -> None:
    """Generate a key for a profile, load it into ssh-agent, add its Host alias."""
    try:
        _do_add(ctx.obj, email, profile)
    except GhsshError as e:
        _err(str(e))


@app.command("remove")
def remove_cmd(
    ctx: typer.Context,
    profile: str = typer.Argument(..., help="Profile name to remove"),
) -> None:
    """Delete a profile's key pair and Host alias."""
    try:
        _do_remove(ctx.obj, profile)
    except GhsshError as e:
        _err(str(e))


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List local SSH key files."""
    svc: Services = ctx.obj
    if json_out:
        typer.echo(json.dumps([p.name for p in list_keys(svc.settings)], indent=2))
        return
    _do_list(svc)


@app.command("linked")
def linked_cmd(ctx: typer.Context) -> None:
    """Check which local keys authenticate with GitHub."""
    _do_linked(ctx.obj)


@app.command("check")
def check_cmd(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Host alias, e.g. github-work"),
) -> None:
    """Test the SSH connection through one alias (exit 1 if it does not authenticate)."""
    if not _do_check(ctx.obj, alias):
        raise typer.Exit(1)


@app.command("delete-all")
def delete_all_cmd(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every profile key and Host alias."""
    if not yes:
        answer = typer.prompt(CONFIRM_DELETE_ALL, default="n", show_default=False)
        if answer.strip() != "y":
            typer.echo("Aborted.")
            return
    _do_delete_all(ctx.obj)


@app.command("perms")
def perms_cmd(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="owner/name, https://github.com/owner/name or git@github.com:owner/name.git"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON (includes raw git output)"),
    raw: bool = typer.Option(False, "--raw", help="Show raw git output under each profile"),
) -> None:
    """Which profiles can pull from / push to a repository, and how to clone it."""
    try:
        report = _probe(ctx.obj, repo)
    except GhsshError as e:
        _err(str(e))
    if json_out:
        typer.echo(format_probe_json(report))
    else:
        typer.echo(format_probe_report(report, raw=raw))


app.command("clone-check", hidden=True)(perms_cmd)


def _main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    _main()
