"""
sparkcli - a command-line client for the Cisco Spark messaging service.

This package provides OAuth login, a persistent TOML configuration and
commands for rooms, messages, people and memberships.
"""

__version__ = "0.6.0"
__license__ = "Apache-2.0"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "sparkcli"
USER_AGENT: Final[str] = f"{PACKAGE_NAME}/{VERSION}"

__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
    "USER_AGENT",
]
