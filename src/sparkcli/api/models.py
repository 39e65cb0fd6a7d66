"""
Resource shapes returned by the Spark REST API.

Only the fields the CLI displays are declared; anything else the service
returns is kept as extra data so JSON output stays complete.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Resource(BaseModel):
    """Base for API objects with camelCase JSON keys."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = ""
    created: Optional[str] = None

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ItemList(BaseModel, Generic[T]):
    """The ``{"items": [...]}`` envelope used by every list endpoint."""
    items: List[T] = Field(default_factory=list)


class Room(Resource):
    title: str = ""
    sip_address: Optional[str] = Field(default=None, alias="sipAddress")


class Message(Resource):
    room_id: Optional[str] = Field(default=None, alias="roomId")
    text: Optional[str] = None
    files: Optional[List[str]] = None
    to_person_id: Optional[str] = Field(default=None, alias="toPersonId")
    to_person_email: Optional[str] = Field(default=None, alias="toPersonEmail")
    person_id: Optional[str] = Field(default=None, alias="personId")
    person_email: Optional[str] = Field(default=None, alias="personEmail")


class Person(Resource):
    emails: List[str] = Field(default_factory=list)
    display_name: str = Field(default="", alias="displayName")
    avatar: Optional[str] = None


class Membership(Resource):
    room_id: Optional[str] = Field(default=None, alias="roomId")
    person_id: Optional[str] = Field(default=None, alias="personId")
    person_email: Optional[str] = Field(default=None, alias="personEmail")
    person_display_name: Optional[str] = Field(default=None, alias="personDisplayName")
    is_moderator: Optional[bool] = Field(default=None, alias="isModerator")
    is_monitor: Optional[bool] = Field(default=None, alias="isMonitor")
