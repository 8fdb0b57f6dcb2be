"""Utility for resolving account references to IDs."""

from bankdesk.domain.ledger import LedgerService


def resolve_account(ledger: LedgerService, account: str | int) -> int:
    """Resolve an account number or ID to an account ID.

    Args:
        ledger: LedgerService instance
        account: Account number (e.g. "ACC0123456789") or ID (int or digit string)

    Returns:
        Account ID

    Raises:
        AccountNotFoundError: If account is not found
    """
    if isinstance(account, int):
        return ledger.get_account(account).id

    reference = account.strip()
    if reference.isdigit():
        return ledger.get_account(int(reference)).id

    return ledger.get_account_by_number(reference).id
