"""Settings — defaults, optional YAML file, environment overrides."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import GhsshError, InvalidProfileName
from .logging import get_logger
from .models import Profile

log = get_logger("settings")

# ~/.config/ghssh/config.yaml
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ghssh" / "config.yaml"
CONFIG_ENV = "GHSSH_CONFIG"
SSH_DIR_ENV = "GHSSH_SSH_DIR"

# Settings where a YAML null means "use the derived default"
NULLABLE_SETTINGS = ("config_file", "timeout")

PROFILE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass
class Settings:
    """Where keys and config live, and how profiles map to files and aliases."""

    ssh_dir: Path = Path.home() / ".ssh"
    config_file: Path | None = None  # None -> <ssh_dir>/config
    key_type: str = "ed25519"
    key_prefix: str = "id_ed25519_"
    alias_prefix: str = "github-"
    github_host: str = "github.com"
    probe_branch: str = "ghssh-access-probe"
    timeout: float | None = None

    def __post_init__(self) -> None:
        self.ssh_dir = Path(self.ssh_dir).expanduser()
        if self.config_file is None:
            self.config_file = self.ssh_dir / "config"
        else:
            self.config_file = Path(self.config_file).expanduser()

    @property
    def key_stem(self) -> str:
        """File-name stem shared by every managed key (id_ed25519_ -> id_ed25519)."""
        return self.key_prefix.rstrip("_-.") or self.key_prefix

    def profile(self, name: str, email: str | None = None) -> Profile:
        """Derive a Profile's key path and alias from its label."""
        if not PROFILE_NAME_RE.match(name or ""):
            raise InvalidProfileName(name)
        return Profile(
            name=name,
            key_path=self.ssh_dir / f"{self.key_prefix}{name}",
            alias=f"{self.alias_prefix}{name}",
            email=email,
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise GhsshError(f"Could not parse config file {path}: {e}") from e
    except OSError as e:
        raise GhsshError(f"Could not read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GhsshError(f"Config file {path} must be a mapping, got {type(data).__name__}")
    return data


def _coerce(data: dict[str, Any]) -> dict[str, Any]:
    """Keep known keys only, with the types Settings expects."""
    known = {f.name for f in fields(Settings)}
    out: dict[str, Any] = {}
    for key, value in data.items():
        key = str(key).replace("-", "_")
        if key not in known:
            log.debug("ignoring unknown setting %r", key)
            continue
        if value is None and key not in NULLABLE_SETTINGS:
            log.debug("ignoring null for setting %r", key)
            continue
        if key in ("ssh_dir", "config_file") and value is not None:
            value = Path(str(value))
        elif key == "timeout" and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise GhsshError(f"timeout must be a number, got {value!r}") from e
        elif value is not None:
            value = str(value)
        out[key] = value
    return out


def load_settings(config_path: Path | None = None, environ: dict[str, str] | None = None) -> Settings:
    """
    Build Settings from defaults, then a YAML file, then the environment.

    File lookup: explicit path, else $GHSSH_CONFIG, else ~/.config/ghssh/config.yaml
    when it exists. An explicit path that does not exist is an error.
    """
    env = os.environ if environ is None else environ
    path = config_path
    if path is None and env.get(CONFIG_ENV):
        path = Path(env[CONFIG_ENV])
    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise GhsshError(f"Config file not found: {path}")
    elif DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH

    values: dict[str, Any] = {}
    if path is not None:
        log.debug("loading settings from %s", path)
        values.update(_coerce(_read_yaml(path)))
    if env.get(SSH_DIR_ENV):
        values["ssh_dir"] = Path(env[SSH_DIR_ENV])
    return Settings(**values)
