"""SSH config store — parse into ordered blocks, filter, serialize back."""

from __future__ import annotations

import os
import re
from pathlib import Path

from .logging import get_logger
from .models import HostBlock, Profile

log = get_logger("sshconfig")

BLOCK_KEYWORDS = {"host", "match"}
CONFIG_MODE = 0o600
CONFIG_ENCODING = "utf-8"

# "Key value", "Key=value", "Key = value"
_OPTION_RE = re.compile(r"^\s*([A-Za-z][A-Za-z0-9]*)\s*(?:=|\s)\s*(.*?)\s*$")


def _is_comment(line: str) -> bool:
    return line.strip().startswith("#")


def _split_option(line: str) -> tuple[str, str] | None:
    if not line.strip() or _is_comment(line):
        return None
    m = _OPTION_RE.match(line)
    if not m:
        return None
    return m.group(1), m.group(2)


def _trim_blank_tail(lines: list[str]) -> list[str]:
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def parse_config(text: str) -> list[HostBlock]:
    """
    Parse SSH config text into blocks in document order.

    The first block is always the preamble (keyword "") holding whatever precedes
    the first Host/Match line; it may be empty. Comment lines directly above a
    Host line belong to that Host's block. Blank lines between blocks are dropped
    and re-inserted as a single separator by serialize_config().
    """
    blocks = [HostBlock(keyword="")]
    for raw in text.splitlines():
        line = raw.rstrip("\r")
        opt = _split_option(line)
        if opt and opt[0].lower() in BLOCK_KEYWORDS:
            current = blocks[-1]
            carried: list[str] = []
            while current.lines and _is_comment(current.lines[-1]):
                carried.insert(0, current.lines.pop())
            _trim_blank_tail(current.lines)
            blocks.append(HostBlock(keyword=opt[0], patterns=opt[1].split(), lines=carried + [line]))
            continue
        current = blocks[-1]
        if opt:
            current.options.append(opt)
        current.lines.append(line)
    for b in blocks:
        _trim_blank_tail(b.lines)
    # Leading blank lines in the preamble carry no meaning
    while blocks[0].lines and not blocks[0].lines[0].strip():
        blocks[0].lines.pop(0)
    return blocks


def serialize_config(blocks: list[HostBlock]) -> str:
    """Blocks back to text, one blank line between blocks."""
    chunks = ["\n".join(b.lines) for b in blocks if b.lines]
    if not chunks:
        return ""
    return "\n\n".join(chunks) + "\n"


def profile_block(profile: Profile, github_host: str = "github.com") -> HostBlock:
    """Host block routing a profile's alias to GitHub with only its own key."""
    options = [
        ("HostName", github_host),
        ("User", "git"),
        ("IdentityFile", str(profile.key_path)),
        ("IdentitiesOnly", "yes"),
    ]
    lines = [f"Host {profile.alias}"] + [f"  {k} {v}" for k, v in options]
    return HostBlock(keyword="Host", patterns=[profile.alias], options=options, lines=lines)


class ConfigStore:
    """Handle on one SSH config file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"ConfigStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def ensure_exists(self) -> None:
        """Create the file (and its directory) if missing; keep it private either way."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        os.chmod(self.path, CONFIG_MODE)

    def load(self) -> list[HostBlock]:
        """Parsed blocks; a missing file reads as an empty config."""
        if not self.exists():
            return [HostBlock(keyword="")]
        return parse_config(self.path.read_text(encoding=CONFIG_ENCODING, errors="surrogateescape"))

    def save(self, blocks: list[HostBlock]) -> None:
        self.ensure_exists()
        self.path.write_text(serialize_config(blocks), encoding=CONFIG_ENCODING, errors="surrogateescape")
        os.chmod(self.path, CONFIG_MODE)

    def aliases(self, prefix: str = "") -> list[str]:
        """Host aliases in document order, optionally only those starting with prefix."""
        out = []
        for b in self.load():
            alias = b.alias
            if alias and alias.startswith(prefix) and alias not in out:
                out.append(alias)
        return out

    def has_alias(self, alias: str) -> bool:
        return any(b.alias == alias for b in self.load())

    def add_block(self, block: HostBlock) -> bool:
        """Append a block unless its alias is already present. True if written."""
        blocks = self.load()
        if block.alias and any(b.alias == block.alias for b in blocks):
            log.debug("%s already has Host %s", self.path, block.alias)
            return False
        blocks.append(block)
        self.save(blocks)
        log.info("added Host %s to %s", block.alias, self.path)
        return True

    def remove_alias(self, alias: str) -> bool:
        """Drop every block whose alias is `alias`. True if anything was removed."""
        return bool(self._remove(lambda a: a == alias))

    def remove_prefix(self, prefix: str) -> list[str]:
        """Drop every block whose alias starts with prefix; returns removed aliases."""
        return self._remove(lambda a: a.startswith(prefix))

    def _remove(self, match) -> list[str]:
        if not self.exists():
            return []
        blocks = self.load()
        kept: list[HostBlock] = []
        removed: list[str] = []
        for b in blocks:
            if b.alias is not None and match(b.alias):
                removed.append(b.alias)
            else:
                kept.append(b)
        if removed:
            self.save(kept)
            log.info("removed Host %s from %s", ", ".join(removed), self.path)
        return removed
