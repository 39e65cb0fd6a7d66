"""
File store for the sparkcli configuration.

Locates ``sparkcli.toml``, loads it into a ``Configuration`` record, applies
defaults and writes the whole record back on request. There is no file
locking: a single writer per config file is expected.
"""

import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional, TextIO
from urllib.parse import urlencode

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import (
    ConfigIOError,
    ConfigParseError,
    MissingAuthCodeError,
    MissingClientIdError,
    MissingClientSecretError,
)
from .settings import Configuration

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "sparkcli.toml"
SYSTEM_CONFIG_DIR = Path("/etc/sparkcli")


def config_search_paths(
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    system_dir: Path = SYSTEM_CONFIG_DIR,
) -> List[Path]:
    """Candidate config file locations, in lookup order."""
    cwd = Path(cwd or Path.cwd())
    home = Path(home or Path.home())
    return [
        cwd / CONFIG_FILE_NAME,
        system_dir / CONFIG_FILE_NAME,
        home / CONFIG_FILE_NAME,
    ]


def find_config_file(
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    system_dir: Path = SYSTEM_CONFIG_DIR,
) -> Path:
    """Find the config file to use for both reading and writing.

    Searches the working directory, then ``/etc/sparkcli``, then the user's
    home directory. When none exists, the file in the working directory is
    returned so that a later save creates it.

    Args:
        cwd: Working directory, defaults to the process cwd
        home: Home directory, defaults to the user's home
        system_dir: System-wide config directory

    Returns:
        Path to the config file
    """
    candidates = config_search_paths(cwd, home, system_dir)
    for path in candidates:
        if path.is_file():
            logger.debug(f"Using configuration at {path}")
            return path

    logger.debug(f"No configuration found, defaulting to {candidates[0]}")
    return candidates[0]


class ConfigStore:
    """
    Owns the configuration record and its backing file.

    The record starts out empty (defaults only), is populated by ``load()``,
    mutated by the login coordinator or the default-room command, and written
    back by ``save()``.
    """

    def __init__(self, path: Optional[Path] = None, config: Optional[Configuration] = None):
        """Initialize the store.

        Args:
            path: Config file path; the standard search is used when omitted
            config: Initial record, an empty one when omitted
        """
        self.path = Path(path) if path else find_config_file()
        self.config = config or Configuration()

    def load(self) -> Configuration:
        """Load the configuration file into the record.

        Returns:
            The loaded record

        Raises:
            ConfigIOError: The file could not be read
            ConfigParseError: The file is not valid TOML or has ill-typed values
        """
        try:
            with open(self.path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigIOError(
                f"Failed to open {self.path}: {e.strerror or e}",
                path=str(self.path),
                original_error=e,
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(
                f"Invalid TOML in {self.path}: {e}",
                path=str(self.path),
                original_error=e,
            ) from e

        try:
            config = Configuration.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigParseError(
                f"Invalid value in {self.path}: {e.errors()[0]['msg']}",
                path=str(self.path),
                original_error=e,
            ) from e

        config.apply_defaults()
        self.config = config
        logger.debug(f"Loaded configuration from {self.path}: {config.to_dict()}")
        return config

    def save(self) -> None:
        """Write the whole record to the config file.

        The file is rewritten in place, so an existing file keeps its mode
        and ownership, and a new one gets the process umask.

        Raises:
            ConfigIOError: The file could not be written
        """
        content = tomli_w.dumps(self.config.to_toml_dict())
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConfigIOError(
                f"Failed to write {self.path}: {e.strerror or e}",
                path=str(self.path),
                original_error=e,
            ) from e

        logger.info(f"Saved configuration to {self.path}")

    def check_client_config(self, stream: Optional[TextIO] = None) -> None:
        """Verify ClientId, ClientSecret and AuthCode are configured.

        When only the AuthCode is missing, the consent URL is printed first
        so the user can obtain one.

        Raises:
            MissingClientIdError, MissingClientSecretError, MissingAuthCodeError
        """
        if not self.config.client_id:
            raise MissingClientIdError()
        if not self.config.client_secret:
            raise MissingClientSecretError()
        if not self.config.auth_code:
            self.print_auth_url(stream)
            raise MissingAuthCodeError(auth_url=self.auth_url())

    def has_client_credentials(self) -> bool:
        return self.config.has_client_credentials()

    def has_access_token(self) -> bool:
        return self.config.has_access_token()

    def auth_url(self) -> str:
        """The OAuth consent URL for the configured client."""
        query = urlencode({
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "response_type": "code",
            "scope": self.config.scope,
        })
        return f"{self.config.base_url}/authorize?{query}"

    def print_auth_url(self, stream: Optional[TextIO] = None) -> None:
        """Write the consent URL to the diagnostic stream."""
        stream = stream or sys.stderr
        print(f"Visit \n{self.auth_url()}", file=stream)
