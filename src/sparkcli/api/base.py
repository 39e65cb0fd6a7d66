"""
Uniform resource-service contract.

Every service maps list/get/create/update/delete onto a path under its
resource prefix. Ids are validated before any request is built.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import httpx

from ..config.settings import Configuration
from ..core.client import SparkClient
from ..core.errors import ResponseDecodeError, ValidationError
from .models import ItemList, Resource
from .recipient import Recipient, parse_recipient, resolve_default

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=Resource)


def compact(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty values, keeping explicit False."""
    return {key: value for key, value in fields.items() if value is not None and value != ""}


class ResourceService:
    """Base class for the rooms, messages, people and memberships services."""

    prefix = ""
    name = "resource"

    def __init__(self, client: SparkClient):
        self.client = client

    @property
    def config(self) -> Configuration:
        return self.client.config

    def _require_id(self, id: str, action: str) -> str:
        if not id:
            raise ValidationError(f"id can't be empty when {action} {self.name}", field="id")
        return id

    def _resolve_room(self, room: Union[Recipient, str], allow_email: bool = False) -> Recipient:
        if isinstance(room, str):
            room = parse_recipient(room, allow_email=allow_email)
        return resolve_default(room, self.config)

    def _fetch(self, request: httpx.Request, model: Type[ResourceT]) -> ResourceT:
        """Execute ``request`` and decode a body that must be present."""
        response, result = self.client.do(request, model)
        if result is None:
            raise ResponseDecodeError(
                f"Empty response from {request.method} {request.url}, expected a {self.name}",
                status=response.status_code,
            )
        return result

    def _list(self, model: Type[ResourceT], params: Optional[Dict[str, Any]] = None) -> List[ResourceT]:
        request = self.client.new_get_request(self.prefix, params=compact(params or {}) or None)
        _, result = self.client.do(request, ItemList[model])
        return result.items if result else []

    def _get(self, model: Type[ResourceT], id: str) -> ResourceT:
        self._require_id(id, "getting")
        return self._fetch(self.client.new_get_request(f"{self.prefix}/{id}"), model)

    def _create(self, model: Type[ResourceT], body: Dict[str, Any]) -> ResourceT:
        result = self._fetch(self.client.new_post_request(self.prefix, compact(body)), model)
        logger.info(f"Created {self.name} {result.id}")
        return result

    def _update(self, model: Type[ResourceT], id: str, body: Dict[str, Any]) -> ResourceT:
        self._require_id(id, "updating")
        return self._fetch(self.client.new_put_request(f"{self.prefix}/{id}", compact(body)), model)

    def _delete(self, id: str) -> None:
        self._require_id(id, "deleting")
        request = self.client.new_delete_request(f"{self.prefix}/{id}")
        self.client.do(request)
        logger.info(f"Deleted {self.name} {id}")
