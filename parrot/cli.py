"""
Parrot CLI

Command-line tools for inspecting exported conversations offline.

Usage:
    parrot inspect snapshot.json             # Show newest events and state
    parrot inspect snapshot.json --history   # Page in older events too
    parrot config                            # Show effective settings
"""

import asyncio
import logging
from pathlib import Path

import click
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from parrot.client.memory import InMemoryChatClient
from parrot.config import get_settings
from parrot.conversations.events import (
    ChatMessageEvent,
    ConversationEvent,
    MembershipChangeEvent,
    RenameEvent,
)
from parrot.conversations.store import ConversationStore
from parrot.models.user import User, UserList
from parrot.models.wire import ConversationState, MembershipChangeType, from_timestamp

console = Console()


def configure_cli_logging(verbose: bool) -> None:
    logging.getLogger("parrot").setLevel(logging.DEBUG if verbose else logging.WARNING)


class ConversationSnapshot(BaseModel):
    """Exported conversation plus the users needed to display it."""

    conversation_state: ConversationState
    self_user: User
    users: list[User] = Field(default_factory=list)


def load_snapshot(path: Path) -> ConversationSnapshot:
    try:
        return ConversationSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise click.ClickException(f"Invalid snapshot {path}: {exc.error_count()} error(s)\n{exc}")


def describe_event(event: ConversationEvent) -> str:
    if isinstance(event, ChatMessageEvent):
        text = event.text
        if event.attachments:
            text = f"{text} [{len(event.attachments)} attachment(s)]".strip()
        return text
    if isinstance(event, RenameEvent):
        return f"renamed to {event.new_name!r}"
    if isinstance(event, MembershipChangeEvent):
        verb = "joined" if event.type == MembershipChangeType.JOIN else "left"
        return f"{len(event.participant_ids)} participant(s) {verb}"
    return event.event_type.value.lower()


def render_store(store: ConversationStore, events: list[ConversationEvent]) -> None:
    flags = []
    if store.is_archived:
        flags.append("archived")
    if store.is_quiet:
        flags.append("quiet")
    if store.is_off_the_record:
        flags.append("off the record")
    participants = ", ".join(user.full_name for user in store.users) or "-"
    console.print(
        Panel(
            f"[bold]Participants:[/bold] {participants}\n"
            f"[bold]Flags:[/bold] {', '.join(flags) or 'none'}\n"
            f"[bold]Unread:[/bold] {len(store.unread_events)} of {len(store.events)} cached",
            title=store.name or store.id,
            border_style="cyan",
        )
    )

    unread_ids = {event.id for event in store.unread_events}
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("", width=1)
    table.add_column("Time", style="dim")
    table.add_column("Sender", style="cyan")
    table.add_column("Event")
    for event in events:
        sender = store.get_user(event.user_id)
        table.add_row(
            "*" if event.id in unread_ids else "",
            from_timestamp(event.timestamp).strftime("%Y-%m-%d %H:%M:%S"),
            "You" if sender.is_self else sender.full_name,
            describe_event(event),
        )
    console.print(table)


@click.group()
@click.version_option(version="0.1.0", prog_name="Parrot")
@click.option("--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Parrot - Conversation inspection tools."""
    get_settings()
    configure_cli_logging(verbose)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--limit",
    default=20,
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of newest events to load",
)
@click.option("--history", is_flag=True, help="Load one page of older events")
def inspect(snapshot: Path, limit: int, history: bool):
    """Show a conversation snapshot."""
    data = load_snapshot(snapshot)
    state = data.conversation_state
    settings = get_settings()

    newest = sorted(state.event, key=lambda event: event.timestamp)[-limit:]
    client = InMemoryChatClient(states=[state])
    store = ConversationStore(
        client,
        UserList(data.self_user, data.users),
        state.conversation,
        events=newest,
        settings=settings.conversation,
    )

    events = store.events
    if history and events:
        loaded = asyncio.run(store.get_events(events[0].id))
        if loaded is None:
            console.print("[yellow]Older history unavailable[/yellow]")
        else:
            console.print(f"[dim]Loaded {len(loaded)} older event(s)[/dim]")
        events = store.events

    render_store(store, events)


@cli.command()
def config():
    """Show effective settings."""
    settings = get_settings()
    table = Table(title="Parrot Settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("environment", settings.environment)
    table.add_row("app_name", settings.app_name)
    table.add_row("debug", str(settings.debug))
    for key, value in settings.conversation.model_dump().items():
        table.add_row(f"conversation.{key}", str(value))
    for key, value in settings.logging.model_dump().items():
        table.add_row(f"logging.{key}", str(value))
    console.print(table)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
