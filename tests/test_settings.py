"""Tests for settings layering and profile derivation."""

from pathlib import Path
from unittest.mock import patch

import pytest

from ghssh.errors import GhsshError, InvalidProfileName
from ghssh.settings import Settings, load_settings


def test_defaults(tmp_path):
    """Defaults point at ~/.ssh style paths and ed25519 keys."""
    s = Settings(ssh_dir=tmp_path)
    assert s.config_file == tmp_path / "config"
    assert s.key_type == "ed25519"
    assert s.key_stem == "id_ed25519"
    assert s.timeout is None


def test_profile_derivation(tmp_path):
    """A profile name maps to its key path and Host alias."""
    p = Settings(ssh_dir=tmp_path).profile("work", email="me@work.example")
    assert p.key_path == tmp_path / "id_ed25519_work"
    assert p.public_key_path == tmp_path / "id_ed25519_work.pub"
    assert p.alias == "github-work"
    assert p.email == "me@work.example"


@pytest.mark.parametrize("name", ["", "../etc", "a b", "-x", "work/", "wörk", "x;rm"])
def test_unsafe_profile_names(tmp_path, name):
    """Names that could escape the ssh dir or break config are refused."""
    with pytest.raises(InvalidProfileName):
        Settings(ssh_dir=tmp_path).profile(name)


@pytest.mark.parametrize("name", ["work", "personal", "acme-corp", "me_2", "a.b"])
def test_safe_profile_names(tmp_path, name):
    """Ordinary names are accepted."""
    assert Settings(ssh_dir=tmp_path).profile(name).alias == f"github-{name}"


def test_load_from_yaml(tmp_path):
    """YAML keys override defaults; dashes and unknown keys are tolerated."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        f"ssh_dir: {tmp_path / 'keys'}\n"
        "alias-prefix: gh-\n"
        "timeout: 15\n"
        "something_else: ignored\n"
    )
    s = load_settings(cfg, environ={})
    assert s.ssh_dir == tmp_path / "keys"
    assert s.config_file == tmp_path / "keys" / "config"
    assert s.alias_prefix == "gh-"
    assert s.timeout == 15.0


def test_env_config_and_ssh_dir_override(tmp_path):
    """GHSSH_CONFIG picks the file and GHSSH_SSH_DIR wins over it."""
    cfg = tmp_path / "c.yaml"
    cfg.write_text("key_type: rsa\nssh_dir: /somewhere/else\n")
    s = load_settings(environ={"GHSSH_CONFIG": str(cfg), "GHSSH_SSH_DIR": str(tmp_path / "override")})
    assert s.key_type == "rsa"
    assert s.ssh_dir == tmp_path / "override"


def test_empty_yaml_is_defaults(tmp_path):
    """An empty settings file means defaults."""
    cfg = tmp_path / "c.yaml"
    cfg.write_text("")
    assert load_settings(cfg, environ={}).alias_prefix == "github-"


def test_null_values_keep_defaults(tmp_path):
    """A YAML null only clears settings that have a derived default."""
    cfg = tmp_path / "c.yaml"
    cfg.write_text(f"ssh_dir: {tmp_path}\nalias_prefix: null\nkey_type: ~\nconfig_file: null\ntimeout: null\n")
    s = load_settings(cfg, environ={})
    assert s.alias_prefix == "github-"
    assert s.key_type == "ed25519"
    assert s.config_file == tmp_path / "config"
    assert s.timeout is None


def test_no_config_file_anywhere(tmp_path):
    """No settings file at all means defaults."""
    with patch("ghssh.settings.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml"):
        s = load_settings(environ={})
    assert s.ssh_dir == Path.home() / ".ssh"


def test_explicit_missing_file_is_error(tmp_path):
    """An explicitly named settings file must exist."""
    with pytest.raises(GhsshError, match="not found"):
        load_settings(tmp_path / "nope.yaml", environ={})


@pytest.mark.parametrize("text", ["ssh_dir: [unclosed\n", "- a\n- b\n", "timeout: soon\n"])
def test_bad_yaml_is_error(tmp_path, text):
    """Malformed or mistyped settings are errors."""
    cfg = tmp_path / "c.yaml"
    cfg.write_text(text)
    with pytest.raises(GhsshError):
        load_settings(cfg, environ={})
