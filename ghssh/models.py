"""Structured records for profiles, config blocks, and probe outcomes."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class Profile:
    """One GitHub identity: key pair + host alias, derived from its label."""

    name: str
    key_path: Path
    alias: str
    email: Optional[str] = None  # key comment only, never validated

    @property
    def public_key_path(self) -> Path:
        return self.key_path.with_name(self.key_path.name + ".pub")


@dataclass
class HostBlock:
    """A `Host` block from the SSH config (or the preamble before the first one)."""

    keyword: str = "Host"  # "Host" or "Match"; "" for the preamble
    patterns: list[str] = field(default_factory=list)
    options: list[tuple[str, str]] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)  # verbatim text, blank separators excluded

    @property
    def alias(self) -> str | None:
        if self.keyword.lower() != "host" or not self.patterns:
            return None
        return self.patterns[0]

    def get(self, key: str) -> str | None:
        """First value for an option, keys compared case-insensitively like ssh does."""
        lower = key.lower()
        for k, v in self.options:
            if k.lower() == lower:
                return v
        return None


@dataclass(frozen=True)
class RepoRef:
    """A GitHub repository normalized to owner/name."""

    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def ssh_url(self, host: str) -> str:
        """SSH remote through a host alias, e.g. git@github-work:org/project.git."""
        return f"git@{host}:{self.slug}.git"

    def clone_command(self, host: str) -> str:
        return f"git clone {self.ssh_url(host)}"


@dataclass
class CommandResult:
    """Outcome of one child process."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        if self.stdout and self.stderr:
            return self.stdout.rstrip("\n") + "\n" + self.stderr
        return self.stdout or self.stderr


@dataclass
class AccessResult:
    """Read/write access of one profile to one repository."""

    profile: str
    alias: str
    can_read: bool = False
    can_write: bool = False
    signal: Optional[str] = None  # write-evidence marker that matched, if any
    read_result: Optional[CommandResult] = None
    write_result: Optional[CommandResult] = None


@dataclass
class ProbeReport:
    """Per-profile access to a repository, in config order."""

    repo: RepoRef
    results: list[AccessResult] = field(default_factory=list)
    recommended: Optional[AccessResult] = None  # first profile with read access

    @property
    def recommended_command(self) -> str | None:
        if self.recommended is None:
            return None
        return self.repo.clone_command(self.recommended.alias)
