"""
Messages: list a room, post text or a file, get and delete.

The room argument accepts a room id, ``-`` for the default room and, for
text messages, ``email:<address>`` to message a person directly.
"""

from typing import List, Union

from ..core.errors import ValidationError
from .base import ResourceService
from .models import Message
from .recipient import EmailRecipient, Recipient, recipient_fields


class MessageService(ResourceService):
    prefix = "/messages"
    name = "message"

    def list(self, room: Union[Recipient, str]) -> List[Message]:
        target = self._resolve_room(room)
        return self._list(Message, recipient_fields(target))

    def create(self, room: Union[Recipient, str], text: str) -> Message:
        """Post a text message to a room or, with ``email:``, to a person."""
        target = self._resolve_room(room, allow_email=True)
        body = {"text": text}
        body.update(recipient_fields(target))
        return self._create(Message, body)

    def create_file(self, room: Union[Recipient, str], file_path: str) -> Message:
        """Upload a local file as a message attachment."""
        target = self._resolve_room(room, allow_email=True)
        if isinstance(target, EmailRecipient):
            raise ValidationError("files can only be posted to a room", field="roomId")
        if not file_path:
            raise ValidationError("file can't be empty when posting a file", field="file")
        request = self.client.new_file_post_request(self.prefix, target.room_id, file_path)
        return self._fetch(request, Message)

    def get(self, id: str) -> Message:
        return self._get(Message, id)

    def delete(self, id: str) -> None:
        self._delete(id)
