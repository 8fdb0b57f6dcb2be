"""Main CLI entry point."""

import click
from bankdesk.cli.capabilities import Role, capabilities_for
from bankdesk.database.factories import create_sqlite_database
from bankdesk.domain.ledger import LedgerService
from bankdesk.domain.locking import DEFAULT_LOCK_TIMEOUT, LockCoordinator
from bankdesk.logging_config import setup_logging

# Import and register all commands at module level
from bankdesk.cli.commands import account, history, teller


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BANKDESK_DB_PATH environment variable)",
    envvar="BANKDESK_DB_PATH",
)
@click.option(
    "--role",
    type=click.Choice([role.value for role in Role], case_sensitive=False),
    default=Role.MANAGER.value,
    show_default=True,
    envvar="BANKDESK_ROLE",
    help="Desk role; decides which commands are available",
)
@click.option(
    "--lock-timeout",
    type=click.FloatRange(min=0),
    default=DEFAULT_LOCK_TIMEOUT,
    show_default=True,
    envvar="BANKDESK_LOCK_TIMEOUT",
    help="Seconds to wait for busy accounts before giving up",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BANKDESK_LOG_LEVEL",
    help="Level of the JSON log written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, role: str, lock_timeout: float, log_level: str):
    """Bankdesk - branch banking desk.

    Open and close accounts, post credits and debits, transfer money between
    accounts and browse transaction history.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(log_level)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["ledger"] = LedgerService(db, LockCoordinator(timeout=lock_timeout))
        ctx.obj["capabilities"] = capabilities_for(role.lower())


# Register all commands
account.register_commands(cli)
teller.register_commands(cli)
history.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
