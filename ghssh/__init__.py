"""ghssh — several GitHub SSH identities on one machine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ghssh")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
