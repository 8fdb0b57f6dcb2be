"""Account management commands."""

import click
from bankdesk.cli.account_resolution import resolve_account_or_exit
from bankdesk.cli.capabilities import require_capability
from bankdesk.cli.error_handling import handle_domain_error
from bankdesk.domain.entities import AccountType
from bankdesk.domain.errors import DomainError
from bankdesk.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("open")
@click.argument("owner_id", type=int, metavar="OWNER_ID")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.SAVINGS.value,
    show_default=True,
    help="Account type",
)
@click.option("--initial-balance", default="0", help="Opening deposit (e.g., 100.00)")
@click.pass_context
def open_account(ctx, owner_id: int, account_type: str, initial_balance: str):
    """Open a new account for a customer.

    A positive opening balance is recorded as an "Initial deposit" credit.

    Examples:
        bankdesk account open 7
        bankdesk account open 7 --type current --initial-balance 250.00
    """
    require_capability(ctx, "account-open")
    ledger = ctx.obj["ledger"]

    try:
        balance = parse_amount(initial_balance)
        account = ledger.open_account(owner_id=owner_id, account_type=account_type, initial_balance=balance)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Opened {account.account_type.value} account {account.account_number} (ID: {account.id})")
    click.echo(f"Balance: ${account.balance:,.2f}")


@account_group.command("show")
@click.argument("owner_id", type=int, metavar="OWNER_ID")
@click.pass_context
def show_account(ctx, owner_id: int):
    """Show the primary account of a customer."""
    require_capability(ctx, "account-show")
    ledger = ctx.obj["ledger"]

    try:
        summary = ledger.get_account_summary(owner_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Account Number: {summary.account_number}")
    click.echo(f"Account Type: {summary.account_type.value}")
    click.echo(f"Balance: ${summary.balance:,.2f}")


@account_group.command("list")
@click.argument("owner_id", type=int, metavar="OWNER_ID")
@click.pass_context
def list_accounts(ctx, owner_id: int):
    """List every account of a customer."""
    require_capability(ctx, "account-list")
    ledger = ctx.obj["ledger"]

    try:
        summaries = ledger.list_account_summaries(owner_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not summaries:
        click.echo("No accounts found.")
        return

    click.echo(f"\nAccounts of owner {owner_id}:")
    click.echo("-" * 50)
    for summary in summaries:
        click.echo(
            f"{summary.account_number:<16} | {summary.account_type.value:<8} | ${summary.balance:>14,.2f}"
        )


@account_group.command("close")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def close_account(ctx, account: str, yes: bool) -> None:
    """Close an account.

    ACCOUNT can be an account number or ID. Only accounts with a zero balance
    can be closed; closed accounts accept no further credits, debits or
    transfers.

    Examples:
        bankdesk account close ACC0123456789
        bankdesk account close 3 --yes
    """
    require_capability(ctx, "account-close")
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger, account)

    if not yes and not click.confirm(f"Are you sure you want to close account {account}?"):
        click.echo("Close cancelled.")
        return

    try:
        closed = ledger.close_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Closed account {closed.account_number}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
