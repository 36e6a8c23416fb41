"""Top-level package for save-vault.

Versioned local snapshots of tracked directories.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("save-vault")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
