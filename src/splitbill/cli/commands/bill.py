"""Bill commands: create, itemize, browse and settle bills."""

import click

from splitbill.cli.bill_resolution import resolve_bill_or_exit
from splitbill.cli.entry_parsing import (
    parse_manual_participant,
    parse_menu_item,
    parse_pool_participant,
)
from splitbill.cli.error_handling import fail, handle_domain_error
from splitbill.domain.bill import BillService
from splitbill.domain.entities import Bill, BillHeader
from splitbill.domain.errors import DomainError
from splitbill.domain.participant import ParticipantService
from splitbill.utils.amount_parser import parse_amount
from splitbill.utils.currency import format_amount
from splitbill.utils.date_parser import parse_bill_date, parse_date


def _bill_service(ctx) -> BillService:
    db = ctx.obj["db"]
    return BillService(db, contacts=ParticipantService(db))


def _header_or_exit(ctx, title, currency, location, description, bill_date) -> BillHeader:
    try:
        parsed_date = parse_bill_date(bill_date)
    except ValueError as e:
        fail(ctx, f"Invalid date format: {e}")
    return BillHeader(
        title=title,
        currency=currency,
        location=location,
        description=description,
        date=parsed_date,
    )


def _echo_bill(bill: Bill) -> None:
    click.echo(f"Bill {bill.id}")
    click.echo(f"  Title: {bill.title}")
    click.echo(f"  Date: {bill.date:%Y-%m-%d}")
    click.echo(f"  Total: {format_amount(bill.total_amount, bill.currency)}")
    if bill.location:
        click.echo(f"  Location: {bill.location}")
    if bill.description:
        click.echo(f"  Description: {bill.description}")
    click.echo(f"  Status: {bill.status.value}")
    click.echo(f"  Participants ({bill.settled_participants}/{bill.participant_count} paid):")
    for participant in bill.participants:
        paid = "paid" if participant.has_paid else "unpaid"
        email = f" <{participant.email}>" if participant.email else ""
        click.echo(
            f"    {participant.name}{email}: "
            f"{format_amount(participant.amount_owed, bill.currency)} ({paid})"
        )


_header_options = [
    click.option("--currency", help="ISO 4217 currency code (default: SPLITBILL_DEFAULT_CURRENCY or USD)"),
    click.option("--location", help="Where the bill was incurred"),
    click.option("--description", help="Free-text description"),
    click.option("--date", "bill_date", help="Bill date (YYYY-MM-DD or relative like 'yesterday')"),
]


def header_options(func):
    for option in reversed(_header_options):
        func = option(func)
    return func


@click.group()
def bill_group():
    """Create and manage split bills."""
    pass


@bill_group.command("create")
@click.argument("title")
@click.option("--total", required=True, help="Total bill amount (e.g., 85.50)")
@click.option(
    "--participant",
    "participants",
    multiple=True,
    required=True,
    help="Participant as 'Name:amount[:email]' (amount may be omitted with --equal)",
)
@click.option("--equal", is_flag=True, help="Split the total equally among participants")
@header_options
@click.pass_context
def create_bill(
    ctx,
    title: str,
    total: str,
    participants: tuple[str, ...],
    equal: bool,
    currency: str | None,
    location: str | None,
    description: str | None,
    bill_date: str | None,
):
    """Create a bill by entering each participant's amount.

    The amounts must add up to the total unless --equal is given.

    Examples:
        splitbill bill create "Dinner" --total 85.50 --participant John:28.50 \\
            --participant Jane:28.50 --participant Mike:28.50
        splitbill bill create "Taxi" --total 100 --equal --participant Ann --participant Bob --participant Cy
    """
    service = _bill_service(ctx)
    header = _header_or_exit(ctx, title, currency, location, description, bill_date)

    try:
        total_amount = parse_amount(total)
    except ValueError as e:
        fail(ctx, f"Invalid amount format: {e}")

    entries = [parse_manual_participant(entry) for entry in participants]
    try:
        bill = service.create_manual_bill(header, total_amount, entries, equal_split=equal)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created bill '{bill.title}' (ID: {bill.id})")
    _echo_bill(bill)


@bill_group.command("itemize")
@click.argument("title")
@click.option(
    "--participant",
    "participants",
    multiple=True,
    required=True,
    help="Participant as 'Name[:email]'",
)
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Menu item as 'Title:price:Name*shares,Name' (a bare name holds one share)",
)
@header_options
@click.pass_context
def itemize_bill(
    ctx,
    title: str,
    participants: tuple[str, ...],
    items: tuple[str, ...],
    currency: str | None,
    location: str | None,
    description: str | None,
    bill_date: str | None,
):
    """Create a bill from menu items divided into shares.

    Each item's price is split by the number of shares held, and the bill
    total is the sum of item prices.

    Examples:
        splitbill bill itemize "Lunch" --participant Ann --participant Bob \\
            --item "Pizza:30.00:Ann*2,Bob" --item "Soda:4.50:Bob"
    """
    service = _bill_service(ctx)
    header = _header_or_exit(ctx, title, currency, location, description, bill_date)

    try:
        pool = [parse_pool_participant(entry) for entry in participants]
        menu_items = [parse_menu_item(entry, pool) for entry in items]
    except ValueError as e:
        fail(ctx, str(e))

    try:
        bill = service.create_itemized_bill(header, pool, menu_items)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created bill '{bill.title}' (ID: {bill.id})")
    _echo_bill(bill)


@bill_group.command("list")
@click.option("--search", help="Match title, location, description or participant name")
@click.option("--start-date", help="Only bills on or after this date")
@click.option("--end-date", help="Only bills on or before this date")
@click.pass_context
def list_bills(ctx, search: str | None, start_date: str | None, end_date: str | None):
    """List bills, newest first."""
    service = _bill_service(ctx)

    if search and (start_date or end_date):
        fail(ctx, "--search cannot be combined with --start-date or --end-date.")

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        fail(ctx, f"Invalid date: {e}")

    if search:
        bills = service.search_bills(search)
    else:
        bills = service.list_bills(start_date=start, end_date=end)

    if not bills:
        click.echo("No matching bills found." if search else "No bills found.")
        return

    click.echo(f"\nFound {len(bills)} bill(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<38} {'Date':<12} {'Total':>14} {'Paid':>6}  {'Status':<8} {'Title'}")
    click.echo("-" * 100)
    for bill in bills:
        paid = f"{bill.settled_participants}/{bill.participant_count}"
        click.echo(
            f"{bill.id:<38} {bill.date:%Y-%m-%d}   "
            f"{format_amount(bill.total_amount, bill.currency):>14} {paid:>6}  "
            f"{bill.status.value:<8} {bill.title}"
        )


@bill_group.command("show")
@click.argument("bill_ref", metavar="BILL")
@click.pass_context
def show_bill(ctx, bill_ref: str):
    """Show a bill with its participants.

    BILL is a bill ID or a unique prefix of one.
    """
    service = _bill_service(ctx)
    bill_id = resolve_bill_or_exit(ctx, service, bill_ref)
    _echo_bill(service.require_bill(bill_id))


@bill_group.command("settle")
@click.argument("bill_ref", metavar="BILL")
@click.pass_context
def settle_bill(ctx, bill_ref: str):
    """Mark a bill and every participant as paid."""
    service = _bill_service(ctx)
    bill_id = resolve_bill_or_exit(ctx, service, bill_ref)

    try:
        bill = service.settle_bill(bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Settled bill '{bill.title}'")


@bill_group.command("pay")
@click.argument("bill_ref", metavar="BILL")
@click.argument("participant")
@click.option("--unpaid", is_flag=True, help="Mark the participant as not paid")
@click.pass_context
def pay_participant(ctx, bill_ref: str, participant: str, unpaid: bool):
    """Record that PARTICIPANT (name or ID) has paid their share."""
    service = _bill_service(ctx)
    bill_id = resolve_bill_or_exit(ctx, service, bill_ref)

    try:
        bill = service.mark_participant_paid(bill_id, participant, paid=not unpaid)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    state = "unpaid" if unpaid else "paid"
    click.echo(f"Marked {participant} as {state} ({bill.settled_participants}/{bill.participant_count} paid)")
    if bill.is_settled:
        click.echo(f"Bill '{bill.title}' is settled")


@bill_group.command("delete")
@click.argument("bill_ref", metavar="BILL")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_bill(ctx, bill_ref: str, yes: bool):
    """Delete a bill."""
    service = _bill_service(ctx)
    bill_id = resolve_bill_or_exit(ctx, service, bill_ref)
    bill = service.require_bill(bill_id)

    if not yes and not click.confirm(f"Are you sure you want to delete bill '{bill.title}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_bill(bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted bill '{bill.title}'")


@bill_group.command("stats")
@click.pass_context
def bill_stats(ctx):
    """Show counts of settled and pending bills, with totals per currency."""
    stats = _bill_service(ctx).get_statistics()
    click.echo(f"Bills: {stats.total_bills} ({stats.settled_bills} settled, {stats.pending_bills} pending)")
    for totals in stats.currencies:
        click.echo(
            f"  {totals.currency}: total {format_amount(totals.total_amount, totals.currency)}, "
            f"settled {format_amount(totals.settled_amount, totals.currency)}, "
            f"pending {format_amount(totals.pending_amount, totals.currency)}"
        )


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
