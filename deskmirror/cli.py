"""deskmirror CLI - Main entry point."""

import asyncio
import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from .config import settings

app = typer.Typer(
    name="deskmirror",
    help="deskmirror - local Freshdesk mirror with sync and write-through",
    no_args_is_help=True,
)
console = Console()

# Sub-command groups
tickets_app = typer.Typer(help="Mirrored tickets")
contacts_app = typer.Typer(help="Mirrored contacts")

app.add_typer(tickets_app, name="tickets")
app.add_typer(contacts_app, name="contacts")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _output_result(result: Any, json_output: bool = False) -> None:
    """Output result as JSON or formatted."""
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json")
    if json_output:
        console.print_json(json.dumps(result, default=str))
    else:
        console.print(result)


async def _with_client(fn):
    """Run ``fn(db, fd)`` with a session and an open Freshdesk client."""
    from .database import async_session_factory
    from .services.remote_svc import get_freshdesk_client

    async with async_session_factory() as db:
        async with await get_freshdesk_client() as fd:
            return await fn(db, fd)


@app.command("init-db")
def init_db_cmd():
    """Create the mirror tables."""
    from .database import init_db

    asyncio.run(init_db())
    console.print(f"[green]Database ready:[/green] {settings.database_url}")


@app.command("sync")
def sync_cmd(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Pull every entity type from Freshdesk into the mirror."""
    from .services.remote_svc import FreshdeskNotLinkedError
    from .sync.sync_engine import sync_all

    try:
        results = asyncio.run(_with_client(sync_all))
    except FreshdeskNotLinkedError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if json_output:
        _output_result({name: r.model_dump() for name, r in results.items()}, json_output=True)
    else:
        table = Table(title="Sync")
        table.add_column("Type", style="cyan")
        table.add_column("Result")
        table.add_column("Message", style="white")
        for name, r in results.items():
            table.add_row(name, "[green]ok[/green]" if r.success else "[red]failed[/red]", r.message)
        console.print(table)

    if not all(r.success for r in results.values()):
        raise typer.Exit(1)


@tickets_app.command("show")
def tickets_show(
    ticket_id: int = typer.Argument(..., help="Local ticket ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Refetch even if the cached copy is fresh"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show a ticket, refreshing it from Freshdesk when stale."""
    from .services import ticket_svc

    async def _show(db, fd):
        detail = await ticket_svc.show_ticket(db, fd, ticket_id, force=force)
        if detail is None:
            return None, []
        return detail, await ticket_svc.list_conversations(db, ticket_id)

    detail, conversations = asyncio.run(_with_client(_show))
    if detail is None:
        console.print(f"[red]Ticket {ticket_id} not found[/red]")
        raise typer.Exit(1)

    if json_output:
        payload = detail.model_dump(mode="json")
        payload["conversations"] = [c.model_dump(mode="json") for c in conversations]
        _output_result(payload, json_output=True)
        return

    console.print(f"[bold]#{detail.remote_id}[/bold] {detail.subject or ''}")
    console.print(f"status={detail.status} priority={detail.priority} tags={', '.join(detail.tags) or '-'}")
    if detail.description_text:
        console.print(detail.description_text)
    for conv in conversations:
        who = "private" if conv.private else ("incoming" if conv.incoming else "outgoing")
        console.print(f"[dim]{conv.created_at} {who}[/dim] {conv.body_text or ''}")


@tickets_app.command("list")
def tickets_list(
    search: str = typer.Option(None, "--search", "-q", help="Subject or id contains"),
    status: list[int] = typer.Option(None, "--status", help="Status code (repeatable)"),
    tag: list[str] = typer.Option(None, "--tag", help="Tag (repeatable)"),
    page: int = typer.Option(1, "--page", "-p"),
    per_page: int = typer.Option(None, "--per-page"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List mirrored tickets (no remote calls)."""
    from .database import async_session_factory
    from .schemas.ticket import TicketFilters
    from .services import ticket_svc

    filters = TicketFilters(search=search, status=status or [], tags=tag or [])

    async def _list():
        async with async_session_factory() as db:
            return await ticket_svc.list_tickets(db, filters, page=page, per_page=per_page)

    result = asyncio.run(_list())

    if json_output:
        _output_result(result, json_output=True)
        return

    table = Table(title=f"Tickets ({result.meta.total}, page {result.meta.current_page}/{result.meta.total_pages})")
    table.add_column("ID", style="dim")
    table.add_column("Remote", style="dim")
    table.add_column("Subject", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Updated", style="white")
    for t in result.tickets:
        table.add_row(
            str(t.id), str(t.remote_id or "-"), t.subject or "-", str(t.status or "-"), str(t.updated_at or "-"),
        )
    console.print(table)


@tickets_app.command("merge")
def tickets_merge(
    primary_id: int = typer.Argument(..., help="Local ID of the ticket to keep"),
    secondary_ids: list[int] = typer.Argument(..., help="Local IDs of tickets to merge into it"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Merge tickets in Freshdesk and replay the merge locally."""
    from .sync.merge import merge_tickets

    result = asyncio.run(_with_client(lambda db, fd: merge_tickets(db, fd, primary_id, secondary_ids)))
    if result is None:
        console.print(f"[red]Ticket {primary_id} not found[/red]")
        raise typer.Exit(1)
    if json_output:
        _output_result(result, json_output=True)
    else:
        console.print(
            f"[green]Merged[/green] {result.merged_ids} into {result.primary_id} "
            f"({result.conversations_imported} conversations imported)"
        )


@contacts_app.command("merge")
def contacts_merge(
    primary_id: int = typer.Argument(..., help="Local ID of the contact to keep"),
    secondary_ids: list[int] = typer.Argument(..., help="Local IDs of contacts to merge into it"),
    email: str = typer.Option(None, "--email", help="Email for the merged contact"),
    phone: str = typer.Option(None, "--phone", help="Phone for the merged contact"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Merge contacts in Freshdesk and replay the merge locally."""
    from .sync.merge import merge_contacts

    overrides = {k: v for k, v in {"email": email, "phone": phone}.items() if v}
    result = asyncio.run(
        _with_client(lambda db, fd: merge_contacts(db, fd, primary_id, secondary_ids, overrides))
    )
    if result is None:
        console.print(f"[red]Contact {primary_id} not found[/red]")
        raise typer.Exit(1)
    if json_output:
        _output_result(result, json_output=True)
    else:
        console.print(
            f"[green]Merged[/green] {result.merged_ids} into {result.primary_id} "
            f"({result.tickets_repointed} tickets repointed)"
        )


if __name__ == "__main__":
    app()
