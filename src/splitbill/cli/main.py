"""Command line interface for splitbill."""

import logging

import click

from splitbill import __version__
from splitbill.cli.commands import bill, contact
from splitbill.config import DB_PATH_ENV, configure_logging
from splitbill.database.factories import create_sqlite_database

logger = logging.getLogger(__name__)


def _open_database(ctx: click.Context, db_path: str | None):
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()
    ctx.call_on_close(db.disconnect)
    logger.debug("Opened bill history at %s", db.database_url)
    return db


@click.group()
@click.version_option(__version__, prog_name="splitbill")
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    envvar=DB_PATH_ENV,
    help=f"Bill history database file (default: ${DB_PATH_ENV} or ~/.splitbill/splitbill.db)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Splitbill - split shared bills among participants.

    Split a total manually or equally, or itemize a receipt and divide each
    item into shares. Bills are kept in a local history until settled.
    """
    configure_logging(verbose=verbose)
    ctx.ensure_object(dict)

    # --help and --version never touch the database
    if ctx.invoked_subcommand is not None:
        ctx.obj["db"] = _open_database(ctx, db_path)


for module in (bill, contact):
    module.register_commands(cli)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
