"""
Authenticated HTTP client for the Spark REST API.

Requests are built against the configured ``BaseUrl`` with the bearer token
read from the configuration at construction time, and executed on one shared
``httpx.Client``. Failures are classified into the errors of
``sparkcli.core.errors``.
"""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .. import USER_AGENT
from ..config.store import ConfigStore
from .errors import (
    HttpError,
    NotAuthenticatedError,
    ResponseDecodeError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TIMEOUT = 30.0


class SparkClient:
    """Builds and executes bearer-authenticated requests."""

    def __init__(
        self,
        store: ConfigStore,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.store = store
        self.http = httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    @property
    def config(self):
        return self.store.config

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "SparkClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def url_for(self, path: str) -> str:
        return self.config.base_url + path

    def _auth_headers(self) -> Dict[str, str]:
        token = self.config.access_token
        if not token:
            raise NotAuthenticatedError()
        if not self.config.access_token_usable():
            # No pre-emptive refresh, the server decides.
            logger.debug("Access token looks expired, sending it anyway")
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def new_request(self, method: str, path: str, **kwargs: Any) -> httpx.Request:
        """Build an authenticated request for ``BaseUrl + path``."""
        headers = self._auth_headers()
        headers.update(kwargs.pop("headers", {}))
        return self.http.build_request(method, self.url_for(path), headers=headers, **kwargs)

    def new_get_request(self, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Request:
        return self.new_request("GET", path, params=params)

    def new_post_request(self, path: str, body: Any) -> httpx.Request:
        """Build a POST with a JSON-encoded body."""
        return self.new_request(
            "POST",
            path,
            content=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

    def new_put_request(self, path: str, body: Any) -> httpx.Request:
        return self.new_request(
            "PUT",
            path,
            content=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

    def new_file_post_request(self, path: str, room_id: str, file_path: str) -> httpx.Request:
        """Build a multipart POST carrying a ``roomId`` field and one ``files`` part.

        Args:
            path: Path relative to BaseUrl
            room_id: Value of the ``roomId`` text field
            file_path: Local file to upload; its basename becomes the filename

        Raises:
            NotAuthenticatedError: No access token configured
            ValidationError: The file cannot be read
        """
        headers = self._auth_headers()
        local = Path(file_path)
        try:
            content = local.read_bytes()
        except OSError as e:
            raise ValidationError(
                f"Cannot read file {file_path}: {e.strerror or e}",
                field="file",
                original_error=e,
            ) from e

        content_type = mimetypes.guess_type(local.name)[0] or "application/octet-stream"
        return self.http.build_request(
            "POST",
            self.url_for(path),
            headers=headers,
            data={"roomId": room_id},
            files={"files": (local.name, content, content_type)},
        )

    def new_form_post_request(self, path: str, form: Dict[str, str]) -> httpx.Request:
        """Build a form-encoded POST without a bearer token.

        The token endpoint authenticates with the client credentials in the
        form itself.
        """
        return self.http.build_request(
            "POST",
            self.url_for(path),
            data=form,
            headers={"Accept": "application/json"},
        )

    def new_delete_request(self, path: str) -> httpx.Request:
        return self.new_request("DELETE", path)

    def do(
        self,
        request: httpx.Request,
        model: Optional[Type[ModelT]] = None,
    ) -> Tuple[httpx.Response, Optional[ModelT]]:
        """Execute a request and decode a successful JSON response.

        Args:
            request: A request built by one of the ``new_*_request`` methods
            model: Pydantic model to decode the body into, or None

        Returns:
            The raw response and the decoded model (None when no model was
            given or the body is empty)

        Raises:
            TransportError: The request could not be sent or answered
            HttpError: The server answered with a non-2xx status
            ResponseDecodeError: A 2xx body did not match ``model``
        """
        logger.debug(f"{request.method} {request.url}")
        try:
            response = self.http.send(request)
        except httpx.HTTPError as e:
            raise TransportError(
                f"{request.method} {request.url} failed: {e}",
                url=str(request.url),
                original_error=e,
            ) from e

        if not response.is_success:
            body = response.text
            logger.debug(f"{request.method} {request.url} -> {response.status_code}")
            raise HttpError(
                response.status_code,
                body,
                method=request.method,
                url=str(request.url),
            )

        if model is None or not response.content:
            return response, None

        try:
            return response, model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise ResponseDecodeError(
                f"Unexpected response from {request.method} {request.url}: {e.errors()[0]['msg']}",
                status=response.status_code,
                original_error=e,
            ) from e
