"""
Main CLI application entry point.

This module contains the Typer application and the command handlers for
sparkcli: login plus the rooms, messages, people and memberships groups.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.logging import RichHandler
from rich.markup import escape

from sparkcli import VERSION
from sparkcli.api import MembershipService, MessageService, PeopleService, RoomService
from sparkcli.api.recipient import parse_recipient, resolve_default
from sparkcli.config.settings import CliSettings, get_settings
from sparkcli.config.store import ConfigStore
from sparkcli.core.client import SparkClient
from sparkcli.core.errors import SparkError, create_user_friendly_message
from sparkcli.core.login import Login

from . import output
from .output import console, err_console

logger = logging.getLogger(__name__)

# Create the main Typer application
app = typer.Typer(
    name="sparkcli",
    help="Command Line Interface for Cisco Spark",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
rooms_app = typer.Typer(help="operations on rooms", no_args_is_help=True)
messages_app = typer.Typer(help="operations on messages", no_args_is_help=True)
messages_create_app = typer.Typer(help="create a new message", no_args_is_help=True)
people_app = typer.Typer(help="operations on people", no_args_is_help=True)
memberships_app = typer.Typer(help="operations on memberships", no_args_is_help=True)


@dataclass
class AppState:
    """Per-invocation state shared by all commands."""
    settings: CliSettings
    json_output: bool = False
    _store: Optional[ConfigStore] = field(default=None, repr=False)
    _client: Optional[SparkClient] = field(default=None, repr=False)

    @property
    def store(self) -> ConfigStore:
        """The config store, loaded on first use."""
        if self._store is None:
            store = ConfigStore(self.settings.config_file)
            store.load()
            self._store = store
        return self._store

    @property
    def client(self) -> SparkClient:
        if self._client is None:
            self._client = SparkClient(self.store, timeout=self.settings.timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def setup_logging(level: str) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report SparkError to stderr and exit non-zero."""
    try:
        yield
    except SparkError as e:
        logger.debug(f"{e.kind}: {e}", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(create_user_friendly_message(e))}")
        raise typer.Exit(1)


def _state(ctx: typer.Context) -> AppState:
    return ctx.obj


def _default_room(state: AppState, value: Optional[str]) -> str:
    """Resolve an optional room argument; omitted or ``-`` means the default room."""
    return resolve_default(parse_recipient(value or "-"), state.store.config).room_id


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"[bold blue]sparkcli[/bold blue] version [green]{VERSION}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="return results as json"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (default: search for sparkcli.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    sparkcli - Command Line Interface for Cisco Spark.

    Credentials and tokens are kept in sparkcli.toml, searched for in the
    current directory, /etc/sparkcli and your home directory.
    """
    if ctx.resilient_parsing:
        return

    try:
        settings = get_settings(
            config_file=config_file,
            log_level="DEBUG" if verbose else None,
        )
    except PydanticValidationError as e:
        err_console.print(f"[red]Error:[/red] Invalid settings: {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging(settings.log_level)

    state = AppState(
        settings=settings,
        json_output=json_output or settings.json_output,
    )
    ctx.obj = state
    ctx.call_on_close(state.close)


@app.command("login")
def login_command(ctx: typer.Context) -> None:
    """login to Cisco Spark"""
    state = _state(ctx)
    err_console.print("[dim]Logging in[/dim]")
    with handle_errors():
        Login(state.store, state.client).authorize()
    err_console.print(f"[green]✓[/green] Logged in, token saved to {escape(str(state.store.path))}")


# Rooms

@rooms_app.command("list")
def rooms_list(ctx: typer.Context) -> None:
    """list all rooms"""
    state = _state(ctx)
    with handle_errors():
        rooms = RoomService(state.client).list()
    if state.json_output:
        output.print_json(rooms)
    else:
        output.print_rooms(rooms)


@rooms_app.command("create")
def rooms_create(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Title of the new room"),
) -> None:
    """create a new room"""
    state = _state(ctx)
    with handle_errors():
        room = RoomService(state.client).create(title)
    if state.json_output:
        output.print_json(room)
    else:
        # Just the id, so it can be assigned to a variable.
        output.print_line(room.id)


@rooms_app.command("get")
def rooms_get(
    ctx: typer.Context,
    room_id: Optional[str] = typer.Argument(None, help="Room id, '-' or omitted for the default room"),
) -> None:
    """get room details"""
    state = _state(ctx)
    with handle_errors():
        room = RoomService(state.client).get(_default_room(state, room_id))
    if state.json_output:
        output.print_json(room)
    else:
        output.print_room(room)


@rooms_app.command("delete")
def rooms_delete(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room id"),
) -> None:
    """delete a room"""
    state = _state(ctx)
    with handle_errors():
        RoomService(state.client).delete(room_id)
    if not state.json_output:
        console.print("Room deleted.")


@rooms_app.command("default")
def rooms_default(
    ctx: typer.Context,
    room_id: Optional[str] = typer.Argument(None, help="Room id to save as default"),
) -> None:
    """save default room in config, or show it"""
    state = _state(ctx)
    with handle_errors():
        store = state.store
        if room_id:
            store.config.default_room_id = room_id
            store.save()
    if room_id:
        logger.info(f"Default room set to {room_id}")
    else:
        output.print_line(store.config.default_room_id)


# Messages

@messages_app.command("list")
def messages_list(
    ctx: typer.Context,
    room: Optional[str] = typer.Argument(None, help="Room id, '-' or omitted for the default room"),
) -> None:
    """list all messages"""
    state = _state(ctx)
    with handle_errors():
        messages = MessageService(state.client).list(room or "-")
    if state.json_output:
        output.print_json(messages)
    else:
        output.print_messages(messages)


@messages_create_app.command("text")
def messages_create_text(
    ctx: typer.Context,
    room: str = typer.Argument(..., help="Room id, '-' for the default room or email:<address>"),
    words: List[str] = typer.Argument(..., help="Message text"),
) -> None:
    """create a new text message"""
    state = _state(ctx)
    with handle_errors():
        msg = MessageService(state.client).create(room, " ".join(words))
    if state.json_output:
        output.print_json(msg)
    else:
        output.print_line(msg.id)


@messages_create_app.command("file")
def messages_create_file(
    ctx: typer.Context,
    room: str = typer.Argument(..., help="Room id or '-' for the default room"),
    file_path: str = typer.Argument(..., help="File to send"),
) -> None:
    """send an attachment"""
    state = _state(ctx)
    with handle_errors():
        msg = MessageService(state.client).create_file(room, file_path)
    if state.json_output:
        output.print_json(msg)
    else:
        output.print_line(msg.id)


@messages_app.command("get")
def messages_get(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="Message id"),
) -> None:
    """get message details"""
    state = _state(ctx)
    with handle_errors():
        msg = MessageService(state.client).get(message_id)
    if state.json_output:
        output.print_json(msg)
    else:
        output.print_message(msg)


@messages_app.command("delete")
def messages_delete(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="Message id"),
) -> None:
    """delete a message"""
    state = _state(ctx)
    with handle_errors():
        MessageService(state.client).delete(message_id)
    if not state.json_output:
        console.print("Message deleted.")


# People

@people_app.command("get")
def people_get(
    ctx: typer.Context,
    person_id: str = typer.Argument("me", help="Person id, yourself when omitted"),
) -> None:
    """get your details, or someone else's"""
    state = _state(ctx)
    with handle_errors():
        person = PeopleService(state.client).get(person_id)
    if state.json_output:
        output.print_json(person)
    else:
        output.print_person(person)


@people_app.command("list")
def people_list(
    ctx: typer.Context,
    email: str = typer.Option("", "--email", "-e", help="email to search for"),
    name: str = typer.Option("", "--name", "-n", help="name to search for (startWith function)"),
) -> None:
    """list people"""
    state = _state(ctx)
    with handle_errors():
        people = PeopleService(state.client).list(email=email, display_name=name)
    if state.json_output:
        output.print_json(people)
    else:
        output.print_people(people)


# Memberships

@memberships_app.command("list")
def memberships_list(
    ctx: typer.Context,
    room: str = typer.Option("", "--room", "-r", help="search by room id, '-' for the default room"),
    person_id: str = typer.Option("", "--personid", "-p", help="filter by person id"),
    email: str = typer.Option("", "--email", "-e", help="filter by email"),
) -> None:
    """list memberships"""
    state = _state(ctx)
    with handle_errors():
        memberships = MembershipService(state.client).list(room or None, person_id, email)
    if state.json_output:
        output.print_json(memberships)
    else:
        output.print_memberships(memberships)


@memberships_app.command("create")
def memberships_create(
    ctx: typer.Context,
    room: str = typer.Option(..., "--room", "-r", help="room to add person to, '-' for the default room"),
    person_id: str = typer.Option("", "--personid", "-p", help="id of person to add"),
    email: str = typer.Option("", "--email", "-e", help="email of person to add"),
) -> None:
    """create memberships"""
    state = _state(ctx)
    with handle_errors():
        ms = MembershipService(state.client).create(room, person_id, email)
    if state.json_output:
        output.print_json(ms)
    else:
        output.print_membership(ms)


@memberships_app.command("get")
def memberships_get(
    ctx: typer.Context,
    membership_id: str = typer.Argument(..., help="Membership id"),
) -> None:
    """get membership details"""
    state = _state(ctx)
    with handle_errors():
        ms = MembershipService(state.client).get(membership_id)
    if state.json_output:
        output.print_json(ms)
    else:
        output.print_membership(ms)


@memberships_app.command("update")
def memberships_update(
    ctx: typer.Context,
    membership_id: str = typer.Argument(..., help="Membership id"),
    moderator: bool = typer.Option(
        False, "--moderator/--no-moderator", "-m", help="set or clear the moderator role"
    ),
) -> None:
    """update membership"""
    state = _state(ctx)
    with handle_errors():
        ms = MembershipService(state.client).update(membership_id, is_moderator=moderator)
    if state.json_output:
        output.print_json(ms)
    else:
        output.print_membership(ms)


@memberships_app.command("delete")
def memberships_delete(
    ctx: typer.Context,
    membership_id: str = typer.Argument(..., help="Membership id"),
) -> None:
    """delete membership"""
    state = _state(ctx)
    with handle_errors():
        MembershipService(state.client).delete(membership_id)
    if not state.json_output:
        console.print("Membership deleted.")


def _alias(group: typer.Typer, name: str, command) -> None:
    group.command(name, hidden=True, help=command.__doc__)(command)


_alias(app, "l", login_command)
for _name, _command in [("l", rooms_list), ("c", rooms_create), ("g", rooms_get), ("d", rooms_delete)]:
    _alias(rooms_app, _name, _command)
for _name, _command in [("l", messages_list), ("g", messages_get), ("d", messages_delete)]:
    _alias(messages_app, _name, _command)
for _name, _command in [("g", people_get), ("l", people_list)]:
    _alias(people_app, _name, _command)
for _name, _command in [
    ("l", memberships_list), ("c", memberships_create), ("g", memberships_get),
    ("u", memberships_update), ("d", memberships_delete),
]:
    _alias(memberships_app, _name, _command)

messages_app.add_typer(messages_create_app, name="create")
messages_app.add_typer(messages_create_app, name="c", hidden=True)
for _name, _group in [
    ("rooms", rooms_app), ("messages", messages_app),
    ("people", people_app), ("memberships", memberships_app),
]:
    app.add_typer(_group, name=_name)
app.add_typer(rooms_app, name="r", hidden=True)
app.add_typer(messages_app, name="m", hidden=True)
app.add_typer(people_app, name="p", hidden=True)
app.add_typer(memberships_app, name="ms", hidden=True)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
