"""
Resource services for the Spark REST API.

Each service maps its operations onto the authenticated HTTP client for one
resource family: rooms, messages, people and memberships.
"""

from .memberships import MembershipService
from .messages import MessageService
from .people import PeopleService
from .recipient import DefaultRecipient, EmailRecipient, Recipient, RoomRecipient
from .rooms import RoomService

__all__ = [
    "MembershipService",
    "MessageService",
    "PeopleService",
    "RoomService",
    "Recipient",
    "RoomRecipient",
    "EmailRecipient",
    "DefaultRecipient",
]
