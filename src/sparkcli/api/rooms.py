"""Rooms: list, get, create and delete."""

from typing import List

from ..core.errors import ValidationError
from .base import ResourceService
from .models import Room


class RoomService(ResourceService):
    prefix = "/rooms"
    name = "room"

    def list(self) -> List[Room]:
        return self._list(Room)

    def get(self, id: str) -> Room:
        return self._get(Room, id)

    def create(self, title: str) -> Room:
        if not title:
            raise ValidationError("title can't be empty when creating a room", field="title")
        return self._create(Room, {"title": title})

    def delete(self, id: str) -> None:
        self._delete(id)
