"""CLI error reporting."""

import logging

import click

from splitbill.domain.errors import ConflictError, DomainError

logger = logging.getLogger(__name__)


def fail(ctx: click.Context, message: str) -> None:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Report a rejected bill or contact operation and exit."""
    logger.debug("%s raised by '%s'", type(error).__name__, ctx.command_path)
    if isinstance(error, ConflictError):
        click.echo(f"Error: {error}", err=True)
        click.echo("Settled bills are final. Create a new bill to record changes.", err=True)
        ctx.exit(1)
    fail(ctx, str(error))
