"""Terminal output — probe reports, key listings, outcomes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import click

from .models import AccessResult, CommandResult, ProbeReport
from .profiles import AddOutcome, DeleteAllOutcome, LinkedKey, RemoveOutcome

CHECK = "✓"
CROSS = "✗"
RULE = "-" * 38

NO_ACCESS_LINE = "No profiles have access to this repository."


def _mark(flag: bool) -> str:
    return CHECK if flag else CROSS


def access_line(r: AccessResult) -> str:
    """`github-work: ✓ Pull ✗ Push`."""
    return f"{r.alias}: {_mark(r.can_read)} Pull {_mark(r.can_write)} Push"


def _raw_lines(label: str, result: CommandResult | None) -> List[str]:
    if result is None:
        return []
    lines = [f"    {label} (exit {result.returncode}):"]
    body = result.output.strip()
    for ln in (body.splitlines() if body else ["(no output)"]):
        lines.append(f"      {ln}")
    return lines


def format_probe_report(report: ProbeReport, raw: bool = False) -> str:
    """Human report: one line per profile, clone hints, then the recommendation."""
    lines = [f"Checking access to {report.repo.slug} with {len(report.results)} profile(s)..."]
    for r in report.results:
        color = "green" if r.can_read else "red"
        lines.append(click.style(access_line(r), fg=color))
        if r.can_read:
            lines.append(click.style(f"  {report.repo.clone_command(r.alias)}", dim=True))
        if raw:
            lines.extend(_raw_lines("ls-remote", r.read_result))
            lines.extend(_raw_lines(f"push --dry-run (signal: {r.signal or 'none'})", r.write_result))
    lines.append("")
    if report.recommended_command:
        lines.append(click.style(f"Recommended: {report.recommended_command}", fg="green", bold=True))
    else:
        lines.append(click.style(NO_ACCESS_LINE, fg="yellow"))
    return "\n".join(lines)


def _result_dict(result: CommandResult | None) -> dict | None:
    if result is None:
        return None
    return {
        "args": result.args,
        "returncode": result.returncode,
        "stdout": result.stdout,
        "stderr": result.stderr,
    }


def format_probe_json(report: ProbeReport) -> str:
    """JSON for scripts; includes raw transport outcomes."""
    output = {
        "repository": report.repo.slug,
        "profiles": [
            {
                "profile": r.profile,
                "alias": r.alias,
                "can_read": r.can_read,
                "can_write": r.can_write,
                "write_signal": r.signal,
                "clone_command": report.repo.clone_command(r.alias) if r.can_read else None,
                "read_probe": _result_dict(r.read_result),
                "write_probe": _result_dict(r.write_result),
            }
            for r in report.results
        ],
        "recommended": report.recommended_command,
    }
    return json.dumps(output, indent=2, ensure_ascii=False)


def format_key_list(ssh_dir: Path, keys: List[Path]) -> str:
    lines = [f"Local SSH keys in {ssh_dir}:", "-" * 27]
    if not keys:
        lines.append("No keys found")
    lines.extend(p.name for p in keys)
    return "\n".join(lines)


def format_add_outcome(outcome: AddOutcome) -> str:
    p = outcome.profile
    lines = []
    if outcome.key_generated:
        lines.append(f"Generated SSH key for profile '{p.name}' at {p.key_path}")
    else:
        lines.append(f"Key already exists at {p.key_path}")
    if outcome.config_added:
        lines.append(f"SSH config entry added for {p.alias}.")
    lines += [
        "",
        f"Public key to add to GitHub ({p.name}):",
        RULE,
        outcome.public_key or f"(missing {p.public_key_path})",
        RULE,
        f"Test with: ssh -T {p.alias}",
    ]
    return "\n".join(lines)


def format_remove_outcome(outcome: RemoveOutcome) -> str:
    p = outcome.profile
    lines = []
    if outcome.key_removed:
        lines.append(f"Removed local key files for {p.name}.")
    else:
        lines.append(f"No key found for profile '{p.name}'")
    if outcome.config_removed:
        lines.append(f"Removed SSH config entry for {p.alias}.")
    return "\n".join(lines)


def format_delete_all(outcome: DeleteAllOutcome) -> str:
    return (
        f"All keys and related SSH config entries deleted "
        f"({len(outcome.removed_files)} file(s), {len(outcome.removed_aliases)} entr{'y' if len(outcome.removed_aliases) == 1 else 'ies'})."
    )


def format_linked(linked: List[LinkedKey]) -> str:
    lines = ["Checking which local keys authenticate with GitHub...", "-" * 52]
    if not linked:
        lines.append("No keys found")
    for item in linked:
        if not item.lines:
            lines.append(click.style(f"{item.key_path}: (no answer) {item.check.greeting}".rstrip(), dim=True))
            continue
        for ln in item.lines:
            color = "green" if item.check.ok else "red"
            lines.append(click.style(f"{item.key_path}: {ln}", fg=color))
    return "\n".join(lines)
