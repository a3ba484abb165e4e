"""Saved participant (contact) commands."""

import click

from splitbill.cli.error_handling import handle_domain_error
from splitbill.domain.errors import DomainError
from splitbill.domain.participant import ParticipantService


@click.group()
def contact_group():
    """Manage saved participants."""
    pass


@contact_group.command("add")
@click.argument("name")
@click.option("--email", help="Email address")
@click.pass_context
def add_contact(ctx, name: str, email: str | None):
    """Save a participant for reuse in later bills.

    Saving an existing name and email again only refreshes it.
    """
    service = ParticipantService(ctx.obj["db"])
    try:
        saved = service.remember_participant(name, email)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Saved participant '{saved.name}' (ID: {saved.id})")


@contact_group.command("list")
@click.option("--search", help="Filter by name or email")
@click.pass_context
def list_contacts(ctx, search: str | None):
    """List saved participants, most recently used first."""
    service = ParticipantService(ctx.obj["db"])
    participants = service.search_participants(search or "")

    if not participants:
        click.echo("No saved participants found.")
        return

    click.echo("\nSaved participants:")
    click.echo("-" * 80)
    for participant in participants:
        click.echo(
            f"{participant.id:<38} {participant.name:20s} {participant.email or ''}"
        )


@contact_group.command("delete")
@click.argument("participant_id", metavar="ID")
@click.pass_context
def delete_contact(ctx, participant_id: str):
    """Delete a saved participant."""
    service = ParticipantService(ctx.obj["db"])
    try:
        service.delete_participant(participant_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted saved participant {participant_id}")


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(contact_group, name="contact")
