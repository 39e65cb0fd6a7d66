"""Memberships: who is in which room, and with which role."""

from typing import List, Union

from ..core.errors import ValidationError
from .base import ResourceService
from .models import Membership
from .recipient import Recipient, recipient_fields


class MembershipService(ResourceService):
    prefix = "/memberships"
    name = "membership"

    def list(
        self,
        room: Union[Recipient, str, None] = None,
        person_id: str = "",
        person_email: str = "",
    ) -> List[Membership]:
        """List memberships, optionally filtered by room, person id or email."""
        params = {"personId": person_id, "personEmail": person_email}
        if room:
            params.update(recipient_fields(self._resolve_room(room)))
        return self._list(Membership, params)

    def create(
        self,
        room: Union[Recipient, str],
        person_id: str = "",
        person_email: str = "",
    ) -> Membership:
        """Add a person, by id or email, to a room."""
        target = self._resolve_room(room)
        if not person_id and not person_email:
            raise ValidationError("person id or email required when creating a membership", field="personId")
        body = recipient_fields(target)
        body.update({"personId": person_id, "personEmail": person_email})
        return self._create(Membership, body)

    def get(self, id: str) -> Membership:
        return self._get(Membership, id)

    def update(self, id: str, is_moderator: bool) -> Membership:
        """Set or clear the moderator role of a membership."""
        return self._update(Membership, id, {"isModerator": is_moderator})

    def delete(self, id: str) -> None:
        self._delete(id)
