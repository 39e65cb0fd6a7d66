"""
Output helpers for the sparkcli commands.

Human-readable output goes through a rich console; JSON output prints the
decoded API objects with their original camelCase keys.
"""

from typing import Iterable, List, Sequence, Tuple, Union

from rich.console import Console
from rich.markup import escape

from ..api.models import Membership, Message, Person, Resource, Room

# Rich consoles for output
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def print_json(data: Union[Resource, Sequence[Resource]]) -> None:
    if isinstance(data, Resource):
        payload = data.to_json_dict()
    else:
        payload = [item.to_json_dict() for item in data]
    console.print_json(data=payload)


def print_line(text: str) -> None:
    """Print plain text, never interpreting it as markup."""
    console.print(escape(text))


def print_fields(fields: Iterable[Tuple[str, object]], indent: str = "") -> None:
    rows: List[Tuple[str, object]] = list(fields)
    width = max(len(label) for label, _ in rows) + 2
    for label, value in rows:
        console.print(f"{indent}[bold]{escape(label + ':'):<{width}}[/bold]{escape(_text(value))}")


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def print_rooms(rooms: Sequence[Room]) -> None:
    console.print("[bold]Id" + " " * 76 + "Title[/bold]")
    for room in rooms:
        print_line(f"{room.id}: {room.title}")


def print_room(room: Room) -> None:
    print_fields([
        ("Id", room.id),
        ("Title", room.title),
        ("Sip Address", room.sip_address),
        ("Created", room.created),
    ])


def print_messages(messages: Sequence[Message]) -> None:
    for msg in messages:
        print_line(f"[{_text(msg.created)}] {_text(msg.person_email)}: {_text(msg.text)}")


def print_message(msg: Message) -> None:
    print_fields([
        ("Id", msg.id),
        ("PersonId", msg.person_id),
        ("PersonEmail", msg.person_email),
        ("RoomId", msg.room_id),
        ("Text", msg.text),
        ("ToPersonId", msg.to_person_id),
        ("ToPersonEmail", msg.to_person_email),
        ("Created", msg.created),
    ])


def print_person(person: Person) -> None:
    rows: List[Tuple[str, object]] = [("Id", person.id), ("Name", person.display_name)]
    rows.extend(("Email", email) for email in person.emails)
    rows.extend([("Avatar", person.avatar), ("Created", person.created)])
    print_fields(rows)


def print_people(people: Sequence[Person]) -> None:
    for person in people:
        print_line(f"{person.id}:")
        print_fields([
            ("Name", person.display_name),
            ("Email", ", ".join(person.emails)),
            ("Avatar", person.avatar),
            ("Created", person.created),
        ], indent="   ")


def print_membership(ms: Membership) -> None:
    print_fields([
        ("Id", ms.id),
        ("Name", ms.person_display_name),
        ("Email", ms.person_email),
        ("Room", ms.room_id),
        ("Moderator", ms.is_moderator),
        ("Created", ms.created),
    ])


def print_memberships(memberships: Sequence[Membership]) -> None:
    for ms in memberships:
        print_line(f"{ms.id}:")
        print_fields([
            ("Name", ms.person_display_name),
            ("Email", ms.person_email),
            ("Room", ms.room_id),
            ("Created", ms.created),
        ], indent="   ")
