"""Access prober — which local profiles can pull from / push to a repository."""

from __future__ import annotations

import re
from typing import Protocol, Sequence

from .errors import InvalidReference, NoProfilesConfigured
from .logging import get_logger
from .models import AccessResult, CommandResult, ProbeReport, RepoRef

log = get_logger("probe")

DEFAULT_PROBE_BRANCH = "ghssh-access-probe"

_PREFIXES = ("https://github.com/", "git@github.com:")
_SEGMENT = r"[A-Za-z0-9._-]+"
_SLUG_RE = re.compile(rf"^({_SEGMENT})/({_SEGMENT})$")

# Write-access evidence in `git push --dry-run` output. Each one means the server
# authorized the push and evaluated it instead of refusing it outright. Best-effort:
# this is git's human-readable wording and can change between git versions.
WRITE_SIGNALS = (
    "[new branch]",            # would create the branch upstream
    "[deleted]",               # would delete a ref
    "Everything up-to-date",   # nothing to send, but we got that far
)
_REMOTE_LINE_RE = re.compile(r"^remote:", re.MULTILINE)


class ProbeTransport(Protocol):
    """What the prober needs from a git client (GitClient, or a fake in tests)."""

    def ls_remote_head(self, url: str) -> CommandResult: ...

    def push_dry_run(self, url: str, branch: str) -> CommandResult: ...


def normalize_reference(reference: str) -> RepoRef:
    """
    Accept https://github.com/o/r[.git], git@github.com:o/r[.git] or o/r.

    Raises InvalidReference for anything else.
    """
    text = (reference or "").strip()
    for prefix in _PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
            if prefix.startswith("https://"):
                text = text.rstrip("/")
            break
    if text.endswith(".git"):
        text = text[: -len(".git")]
    m = _SLUG_RE.match(text)
    if not m or m.group(2) in (".", ".."):
        raise InvalidReference(reference)
    return RepoRef(owner=m.group(1), name=m.group(2))


def write_signal(output: str) -> str | None:
    """The first write-access marker in dry-run push output, or None."""
    for marker in WRITE_SIGNALS:
        if marker in output:
            return marker
    if _REMOTE_LINE_RE.search(output):
        return "remote:"
    return None


def _failed(args: list[str], exc: Exception) -> CommandResult:
    return CommandResult(args=args, returncode=-1, stderr=str(exc))


def probe_profile(
    repo: RepoRef,
    alias: str,
    git: ProbeTransport,
    profile: str | None = None,
    probe_branch: str = DEFAULT_PROBE_BRANCH,
) -> AccessResult:
    """Read and write probes for one alias. Failures mean "no access", never an exception."""
    url = repo.ssh_url(alias)
    access = AccessResult(profile=profile or alias, alias=alias)

    try:
        access.read_result = git.ls_remote_head(url)
    except OSError as e:
        access.read_result = _failed(["git", "ls-remote", url, "HEAD"], e)
    access.can_read = access.read_result.ok

    try:
        access.write_result = git.push_dry_run(url, probe_branch)
    except OSError as e:
        access.write_result = _failed(["git", "push", "--dry-run", url], e)
    access.signal = write_signal(access.write_result.output)
    access.can_write = access.signal is not None

    log.debug(
        "%s: read=%s (exit %d) write=%s (signal %r)",
        alias, access.can_read, access.read_result.returncode, access.can_write, access.signal,
    )
    return access


def probe_access(
    reference: str,
    aliases: Sequence[str],
    git: ProbeTransport,
    alias_prefix: str = "",
    probe_branch: str = DEFAULT_PROBE_BRANCH,
) -> ProbeReport:
    """
    Probe every alias, in order, against one repository.

    Validation happens before any network call: a bad reference raises
    InvalidReference and an empty alias list raises NoProfilesConfigured.
    The recommendation is the first alias (config order) with read access.
    """
    repo = normalize_reference(reference)
    if not aliases:
        raise NoProfilesConfigured()

    report = ProbeReport(repo=repo)
    log.info("probing %s with %d profile(s)", repo.slug, len(aliases))
    for alias in aliases:
        profile = alias[len(alias_prefix):] if alias_prefix and alias.startswith(alias_prefix) else alias
        access = probe_profile(repo, alias, git, profile=profile, probe_branch=probe_branch)
        report.results.append(access)
        if access.can_read and report.recommended is None:
            report.recommended = access
    if report.recommended is None:
        log.info("no profile can read %s", repo.slug)
    return report
