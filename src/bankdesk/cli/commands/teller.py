"""Money movement commands: credit, debit and transfer."""

import click
from bankdesk.cli.account_resolution import resolve_account_or_exit
from bankdesk.cli.capabilities import require_capability
from bankdesk.cli.error_handling import handle_domain_error
from bankdesk.domain.errors import DomainError
from bankdesk.utils.amount_parser import parse_amount


def _echo_balance(ledger, account_id: int) -> None:
    """Show the balance after a committed posting. A failed read only warns."""
    try:
        balance = ledger.get_account(account_id).balance
    except DomainError as e:
        click.echo(f"Warning: Could not read the new balance: {e}", err=True)
        return
    click.echo(f"Balance: ${balance:,.2f}")


def _post(ctx, operation: str, account: str, amount: str, description: str) -> None:
    require_capability(ctx, operation)
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger, account)

    post = ledger.credit if operation == "credit" else ledger.debit
    try:
        record = post(account_id, parse_amount(amount), description)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{record.kind.value} ${record.amount:,.2f} recorded (transaction {record.id})")
    _echo_balance(ledger, account_id)


@click.command("credit")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", default="", help="Transaction description")
@click.pass_context
def credit(ctx, account: str, amount: str, description: str):
    """Deposit AMOUNT into ACCOUNT (number or ID).

    Examples:
        bankdesk credit ACC0123456789 50.00 --description "bonus"
    """
    _post(ctx, "credit", account, amount, description)


@click.command("debit")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", default="", help="Transaction description")
@click.pass_context
def debit(ctx, account: str, amount: str, description: str):
    """Withdraw AMOUNT from ACCOUNT (number or ID).

    Examples:
        bankdesk debit 3 20.00 --description "withdrawal"
    """
    _post(ctx, "debit", account, amount, description)


@click.command("transfer")
@click.argument("account", metavar="ACCOUNT")
@click.argument("recipient", metavar="RECIPIENT_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", default="", help="Transfer description")
@click.pass_context
def transfer(ctx, account: str, recipient: str, amount: str, description: str):
    """Transfer AMOUNT from ACCOUNT to the account numbered RECIPIENT_NUMBER.

    Examples:
        bankdesk transfer ACC0123456789 ACC9876543210 200.00 --description rent
    """
    require_capability(ctx, "transfer")
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger, account)

    try:
        out_record, in_record = ledger.transfer(account_id, recipient, parse_amount(amount), description)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transferred ${out_record.amount:,.2f} to {recipient}")
    click.echo(f"Transactions: {out_record.id} (out), {in_record.id} (in)")
    _echo_balance(ledger, account_id)


def register_commands(cli):
    """Register money movement commands with main CLI."""
    cli.add_command(credit)
    cli.add_command(debit)
    cli.add_command(transfer)
