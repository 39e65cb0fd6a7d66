"""
Room-argument parsing.

A room argument on the command line means one of three things: a room id,
``email:<address>`` for a one-to-one message, or ``-`` for the configured
default room. The value is parsed once into one of the variants below and
resolved against the configuration by the services.
"""

from dataclasses import dataclass
from typing import Union

from ..config.settings import Configuration
from ..core.errors import NoDefaultRoomError, ValidationError

DEFAULT_ROOM_SENTINEL = "-"
EMAIL_PREFIX = "email:"


@dataclass(frozen=True)
class RoomRecipient:
    room_id: str


@dataclass(frozen=True)
class EmailRecipient:
    address: str


@dataclass(frozen=True)
class DefaultRecipient:
    pass


Recipient = Union[RoomRecipient, EmailRecipient, DefaultRecipient]


def parse_recipient(value: str, allow_email: bool = False) -> Recipient:
    """Parse a room argument.

    Args:
        value: The raw argument
        allow_email: Recognise ``email:<address>``; otherwise such a value is
            treated as a plain room id

    Raises:
        ValidationError: Empty value, or an ``email:`` prefix without address
    """
    if value == DEFAULT_ROOM_SENTINEL:
        return DefaultRecipient()
    if allow_email and value.startswith(EMAIL_PREFIX):
        address = value[len(EMAIL_PREFIX):]
        if not address:
            raise ValidationError("email: recipient needs an address", field="roomId")
        return EmailRecipient(address)
    if not value:
        raise ValidationError("room id can't be empty", field="roomId")
    return RoomRecipient(value)


def resolve_default(recipient: Recipient, config: Configuration) -> Recipient:
    """Replace ``DefaultRecipient`` with the configured default room.

    Raises:
        NoDefaultRoomError: The default room is requested but not configured
    """
    if isinstance(recipient, DefaultRecipient):
        if not config.default_room_id:
            raise NoDefaultRoomError()
        return RoomRecipient(config.default_room_id)
    return recipient


def recipient_fields(recipient: Recipient) -> dict:
    """JSON fields addressing a resolved recipient."""
    if isinstance(recipient, EmailRecipient):
        return {"toPersonEmail": recipient.address}
    if isinstance(recipient, RoomRecipient):
        return {"roomId": recipient.room_id}
    raise ValueError(f"unresolved recipient: {recipient!r}")
