"""Main CLI entry point."""

import click
from tillbook.database.factories import create_sqlite_database
from tillbook.domain.actions import EntryActions
from tillbook.domain.day_entry import DayEntryService
from tillbook.domain.entities import Role
from tillbook.logging_config import configure_logging
from tillbook.utils.clock import create_business_clock
from tillbook.cli.identity import identity_from_options

# Import and register all commands at module level
from tillbook.cli.commands import (
    admin,
    counter,
    entry,
    init_counters,
    payment,
    sales,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TILLBOOK_DB_PATH environment variable)",
    envvar="TILLBOOK_DB_PATH",
)
@click.option("--user", help="User name of the caller", envvar="TILLBOOK_USER")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    help="Role of the caller",
    envvar="TILLBOOK_ROLE",
)
@click.option(
    "--counter",
    "counter_name",
    help="Counter operated by the caller (counter role)",
    envvar="TILLBOOK_COUNTER",
)
@click.option(
    "--tz",
    "timezone_name",
    help="Business timezone (default Asia/Kolkata)",
    envvar="TILLBOOK_TIMEZONE",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="TILLBOOK_LOG_LEVEL",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    user: str | None,
    role: str | None,
    counter_name: str | None,
    timezone_name: str | None,
    log_level: str,
):
    """Tillbook - Daily cash reconciliation for retail counters.

    Counter operators record opening cash, payments, sales and the closing
    count for their counter; administrators review, confirm and correct
    submitted days.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(level=log_level)

        try:
            clock = create_business_clock(timezone_name)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        identity = identity_from_options(user, role, counter_name)
        entries = DayEntryService(db, clock)
        ctx.obj["db"] = db
        ctx.obj["clock"] = clock
        ctx.obj["identity"] = identity
        ctx.obj["actions"] = EntryActions(entries, lambda: identity)


# Register all commands
counter.register_commands(cli)
init_counters.register_commands(cli)
entry.register_commands(cli)
payment.register_commands(cli)
sales.register_commands(cli)
admin.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
