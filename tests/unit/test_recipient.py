"""Tests for room-argument parsing."""

import pytest

from sparkcli.api.recipient import (
    DefaultRecipient,
    EmailRecipient,
    RoomRecipient,
    parse_recipient,
    recipient_fields,
    resolve_default,
)
from sparkcli.config.settings import Configuration
from sparkcli.core.errors import NoDefaultRoomError, ValidationError


class TestParseRecipient:
    def test_dash_is_default_room(self) -> None:
        assert parse_recipient("-") == DefaultRecipient()
        assert parse_recipient("-", allow_email=True) == DefaultRecipient()

    def test_room_id(self) -> None:
        assert parse_recipient("Y2lzY29zcGFyazovL3Vz") == RoomRecipient("Y2lzY29zcGFyazovL3Vz")

    def test_email_when_allowed(self) -> None:
        assert parse_recipient("email:bob@example.com", allow_email=True) == EmailRecipient("bob@example.com")

    def test_email_prefix_is_room_id_when_not_allowed(self) -> None:
        assert parse_recipient("email:bob@example.com") == RoomRecipient("email:bob@example.com")

    def test_email_without_address(self) -> None:
        with pytest.raises(ValidationError):
            parse_recipient("email:", allow_email=True)

    def test_empty_value(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_recipient("")
        assert exc_info.value.details["field"] == "roomId"


class TestResolveDefault:
    def test_default_room_resolved(self) -> None:
        config = Configuration(default_room_id="RID")
        assert resolve_default(DefaultRecipient(), config) == RoomRecipient("RID")

    def test_no_default_room(self) -> None:
        with pytest.raises(NoDefaultRoomError):
            resolve_default(DefaultRecipient(), Configuration())

    def test_other_variants_unchanged(self) -> None:
        config = Configuration()
        assert resolve_default(RoomRecipient("R"), config) == RoomRecipient("R")
        assert resolve_default(EmailRecipient("a@b"), config) == EmailRecipient("a@b")


class TestRecipientFields:
    def test_room(self) -> None:
        assert recipient_fields(RoomRecipient("R")) == {"roomId": "R"}

    def test_email(self) -> None:
        assert recipient_fields(EmailRecipient("a@b")) == {"toPersonEmail": "a@b"}

    def test_unresolved_default(self) -> None:
        with pytest.raises(ValueError):
            recipient_fields(DefaultRecipient())
