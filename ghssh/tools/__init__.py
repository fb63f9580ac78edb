"""Clients for the external tools ghssh drives (ssh-keygen, ssh-agent, ssh, git)."""

from .agent import AgentSession
from .git import GitClient
from .keygen import KeyGenerator
from .ssh import SshClient

__all__ = ["AgentSession", "GitClient", "KeyGenerator", "SshClient"]
