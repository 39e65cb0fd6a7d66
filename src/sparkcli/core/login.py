"""
OAuth login coordinator.

Exchanges the pasted authorization code, or the stored refresh token, at the
``/access_token`` endpoint and persists the resulting token set. The
configuration is only touched once a token response has been fully parsed.
"""

import logging
import time
from typing import Callable, Dict

from pydantic import BaseModel

from ..config.settings import Configuration
from ..config.store import ConfigStore
from .client import SparkClient
from .errors import HttpError, OAuthExchangeError, ResponseDecodeError, TransportError

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    """Body returned by ``POST /access_token``."""
    access_token: str
    expires_in: float
    refresh_token: str
    refresh_token_expires_in: float

    def apply_to(self, config: Configuration, now: float) -> None:
        """Write the token set into ``config`` with absolute expiries."""
        config.access_token = self.access_token
        config.access_expires = now + self.expires_in
        config.refresh_token = self.refresh_token
        config.refresh_expires = now + self.refresh_token_expires_in


class Login:
    """Obtains a usable access token and saves it to the config file."""

    def __init__(
        self,
        store: ConfigStore,
        client: SparkClient,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.client = client
        self.clock = clock

    @property
    def config(self) -> Configuration:
        return self.store.config

    def authorize(self) -> None:
        """Log in, preferring a silent refresh over the code exchange.

        Raises:
            MissingClientIdError, MissingClientSecretError, MissingAuthCodeError:
                Client configuration incomplete
            OAuthExchangeError: The code exchange was refused
            TransportError: The token endpoint could not be reached
        """
        self.store.check_client_config()

        if self.config.has_access_token():
            try:
                self.refresh()
                return
            except (OAuthExchangeError, TransportError) as e:
                logger.warning(f"Token refresh failed, falling back to authorization code: {e}")

        self.exchange_code()

    def exchange_code(self) -> None:
        """Exchange the configured AuthCode for a token set."""
        logger.info("Exchanging authorization code for tokens")
        self._request_tokens({
            "grant_type": "authorization_code",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": self.config.auth_code,
            "redirect_uri": self.config.redirect_uri,
        })

    def refresh(self) -> None:
        """Exchange the stored refresh token for a new token set."""
        if not self.config.refresh_token:
            raise OAuthExchangeError("No refresh token configured", grant_type="refresh_token")
        if not self.config.refresh_token_usable(self.clock()):
            logger.debug("Refresh token looks expired, trying anyway")

        logger.info("Refreshing access token")
        self._request_tokens({
            "grant_type": "refresh_token",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "refresh_token": self.config.refresh_token,
        })

    def _request_tokens(self, form: Dict[str, str]) -> None:
        grant_type = form["grant_type"]
        request = self.client.new_form_post_request("/access_token", form)
        try:
            _, tokens = self.client.do(request, TokenResponse)
        except HttpError as e:
            raise OAuthExchangeError(
                f"Token request ({grant_type}) rejected",
                status=e.status,
                body=e.body,
                grant_type=grant_type,
                original_error=e,
            ) from e
        except ResponseDecodeError as e:
            raise OAuthExchangeError(
                f"Malformed token response ({grant_type})",
                status=e.status,
                grant_type=grant_type,
                original_error=e,
            ) from e
        if tokens is None:
            raise OAuthExchangeError(f"Empty token response ({grant_type})", grant_type=grant_type)

        tokens.apply_to(self.config, self.clock())
        self.store.save()
        logger.info(f"Access token valid until {time.ctime(self.config.access_expires)}")
