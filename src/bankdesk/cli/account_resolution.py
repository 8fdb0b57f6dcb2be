"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from bankdesk.cli.error_handling import handle_domain_error
from bankdesk.domain.errors import DomainError
from bankdesk.domain.ledger import LedgerService
from bankdesk.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, ledger: LedgerService, account: str | int) -> int:
    """Resolve account number or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(ledger, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
