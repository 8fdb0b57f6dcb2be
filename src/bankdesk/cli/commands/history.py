"""Transaction history and reconciliation commands."""

from itertools import islice

import click
from bankdesk.cli.account_resolution import resolve_account_or_exit
from bankdesk.cli.capabilities import require_capability
from bankdesk.cli.error_handling import handle_domain_error
from bankdesk.domain.errors import DomainError
from bankdesk.domain.money import ZERO
from bankdesk.utils.date_parser import end_of_day, parse_date, start_of_day


@click.command("history")
@click.argument("account", metavar="ACCOUNT")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday', '7 days ago')")
@click.option("--end-date", help="End date, inclusive (YYYY-MM-DD)")
@click.option("--limit", type=click.IntRange(min=1), help="Show at most this many transactions")
@click.pass_context
def history(ctx, account: str, start_date: str | None, end_date: str | None, limit: int | None):
    """Show transactions of ACCOUNT (number or ID), newest first."""
    require_capability(ctx, "history")
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger, account)

    since = None
    if start_date:
        try:
            since = start_of_day(parse_date(start_date))
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    until = None
    if end_date:
        try:
            until = end_of_day(parse_date(end_date))
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    try:
        records = list(islice(ledger.list_transactions(account_id, since=since, until=until), limit))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not records:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(records)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<20} {'Type':<13} {'Amount':>14}  {'Description':<40}")
    click.echo("-" * 100)
    for record in records:
        sign = "-" if record.signed_amount < 0 else "+"
        amount_str = f"{sign}${record.amount:,.2f}"
        timestamp = record.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        click.echo(
            f"{record.id:<6} {timestamp:<20} {record.kind.value:<13} {amount_str:>14}  {record.description[:40]:<40}"
        )


@click.command("reconcile")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def reconcile(ctx, account: str):
    """Check that the balance of ACCOUNT matches its transaction log."""
    require_capability(ctx, "reconcile")
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger, account)

    try:
        difference = ledger.reconcile(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if difference == ZERO:
        click.echo(f"Account {account} reconciles with its transaction log.")
        return

    click.echo(f"Error: Account {account} is off by ${difference:,.2f}", err=True)
    ctx.exit(1)


def register_commands(cli):
    """Register history commands with main CLI."""
    cli.add_command(history)
    cli.add_command(reconcile)
