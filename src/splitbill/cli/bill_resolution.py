"""Turn the BILL argument of a command into a stored bill ID."""

import click

from splitbill.cli.error_handling import fail
from splitbill.domain.bill import BillService
from splitbill.utils.bill_resolver import resolve_bill


def resolve_bill_or_exit(ctx: click.Context, bill_service: BillService, reference: str) -> str:
    """Return the ID for a full bill ID or unique prefix, exiting if none matches."""
    try:
        return resolve_bill(bill_service, reference)
    except ValueError as exc:
        fail(ctx, str(exc))
