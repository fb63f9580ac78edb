"""Error taxonomy. The CLI turns any GhsshError into a styled error."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import CommandResult


class GhsshError(Exception):
    """Base for every error ghssh reports to the user."""


class InvalidReference(GhsshError):
    """Repository reference is not a URL or owner/name shorthand we accept."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(
            f"Invalid repository reference: {reference!r}\n"
            "Use owner/name, https://github.com/owner/name or git@github.com:owner/name.git"
        )


class NoProfilesConfigured(GhsshError):
    """No host-alias blocks in the SSH config."""

    def __init__(self, config_file: str = ""):
        where = f" in {config_file}" if config_file else ""
        super().__init__(f"No GitHub profiles configured{where}. Add one with: ghssh add EMAIL PROFILE")


class InvalidProfileName(GhsshError):
    """Profile label is not safe for a file name or host alias."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid profile name: {name!r}\n"
            "Use letters, digits, '.', '_' or '-', starting with a letter or digit."
        )


class ToolError(GhsshError):
    """An external tool that had to succeed did not."""

    def __init__(self, message: str, result: "CommandResult | None" = None):
        self.result = result
        detail = ""
        if result is not None and result.output.strip():
            detail = "\n" + result.output.strip()
        super().__init__(message + detail)
