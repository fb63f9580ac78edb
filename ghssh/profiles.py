"""Profile operations — add, remove, list, linked, check, delete-all."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .logging import get_logger
from .models import Profile
from .settings import Settings
from .sshconfig import ConfigStore, profile_block
from .tools import AgentSession, KeyGenerator, SshClient
from .tools.ssh import ConnectionCheck, greeting_lines

log = get_logger("profiles")

SSH_DIR_MODE = 0o700


@dataclass
class AddOutcome:
    """What add_profile did."""

    profile: Profile
    key_generated: bool
    config_added: bool
    public_key: str


@dataclass
class RemoveOutcome:
    """What remove_profile did."""

    profile: Profile
    key_removed: bool
    config_removed: bool
    agent_cleared: bool


@dataclass
class DeleteAllOutcome:
    removed_files: list[Path] = field(default_factory=list)
    removed_aliases: list[str] = field(default_factory=list)
    agent_cleared: bool = False


@dataclass
class LinkedKey:
    """One local key and what GitHub said when we tried it."""

    key_path: Path
    lines: list[str]
    check: ConnectionCheck


def ensure_ssh_dir(settings: Settings) -> Path:
    """Create the ssh dir if needed and keep it private."""
    settings.ssh_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(settings.ssh_dir, SSH_DIR_MODE)
    return settings.ssh_dir


def add_profile(
    email: str,
    name: str,
    settings: Settings,
    store: ConfigStore,
    agent: AgentSession,
    keygen: KeyGenerator,
) -> AddOutcome:
    """
    Create (or reuse) a profile's key, load it into the agent, and route its alias.

    An existing private key is never regenerated; an existing Host block for the
    alias is left as is.
    """
    profile = settings.profile(name, email=email)
    ensure_ssh_dir(settings)

    key_generated = False
    if profile.key_path.exists():
        log.info("key already exists at %s", profile.key_path)
    else:
        keygen.generate(profile.key_path, comment=email)
        key_generated = True

    agent.add(profile.key_path)

    store.ensure_exists()
    config_added = store.add_block(profile_block(profile, settings.github_host))

    public_key = ""
    if profile.public_key_path.exists():
        public_key = profile.public_key_path.read_text().strip()
    return AddOutcome(
        profile=profile,
        key_generated=key_generated,
        config_added=config_added,
        public_key=public_key,
    )


def remove_profile(name: str, settings: Settings, store: ConfigStore, agent: AgentSession) -> RemoveOutcome:
    """Delete a profile's key pair and Host block, then clear the agent."""
    profile = settings.profile(name)
    key_removed = False
    if profile.key_path.exists():
        profile.key_path.unlink()
        profile.public_key_path.unlink(missing_ok=True)
        key_removed = True
        log.info("removed key files for %s", name)
    config_removed = store.remove_alias(profile.alias)
    agent_cleared = agent.drop_all()
    return RemoveOutcome(
        profile=profile,
        key_removed=key_removed,
        config_removed=config_removed,
        agent_cleared=agent_cleared,
    )


def list_keys(settings: Settings) -> list[Path]:
    """Key files (private and public) in the ssh dir that share the key stem, sorted by name."""
    if not settings.ssh_dir.is_dir():
        return []
    return sorted(
        p for p in settings.ssh_dir.iterdir()
        if p.is_file() and p.name.startswith(settings.key_stem)
    )


def private_keys(settings: Settings) -> list[Path]:
    return [p for p in list_keys(settings) if p.suffix != ".pub"]


def managed_keys(settings: Settings) -> list[Path]:
    """Key files created for profiles (id_ed25519_<name>[.pub]); the default id_ed25519 is not one."""
    return [p for p in list_keys(settings) if p.name.startswith(settings.key_prefix)]


def list_linked(settings: Settings, ssh: SshClient) -> list[LinkedKey]:
    """Try every local private key against GitHub directly and keep what it answered."""
    linked = []
    for key in private_keys(settings):
        check = ssh.test_key(key, host=settings.github_host)
        linked.append(LinkedKey(key_path=key, lines=greeting_lines(check.result.output), check=check))
    return linked


def check_alias(alias: str, ssh: SshClient) -> ConnectionCheck:
    """Connectivity smoke test through a configured alias."""
    return ssh.test_alias(alias)


def delete_all(settings: Settings, store: ConfigStore, agent: AgentSession) -> DeleteAllOutcome:
    """Delete every profile key and Host block, then clear the agent. Confirmation is the caller's job."""
    outcome = DeleteAllOutcome()
    for path in managed_keys(settings):
        path.unlink(missing_ok=True)
        outcome.removed_files.append(path)
    outcome.removed_aliases = store.remove_prefix(settings.alias_prefix)
    outcome.agent_cleared = agent.drop_all()
    log.info(
        "deleted %d key file(s) and %d Host block(s)",
        len(outcome.removed_files), len(outcome.removed_aliases),
    )
    return outcome


def known_aliases(settings: Settings, store: ConfigStore) -> list[str]:
    """Profile aliases present in the SSH config, in document order."""
    return store.aliases(settings.alias_prefix)
