"""Ledger error taxonomy and shared error messages."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    retryable = False


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness or concurrency violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvalidAmountError(ValidationError):
    """Amount is non-positive, negative where forbidden, or malformed."""


class AccountNotFoundError(NotFoundError):
    """Account id cannot be resolved or the account is not ACTIVE."""


class RecipientNotFoundError(NotFoundError):
    """Recipient account number cannot be resolved or is not ACTIVE."""


class SelfTransferRejectedError(ValidationError):
    """Transfer recipient resolves to the sending account."""


class InsufficientFundsError(DependencyError):
    """Debit would drive the balance below zero."""


class NonZeroBalanceError(DependencyError):
    """Close attempted on an account that still holds funds."""


class VersionConflictError(ConflictError):
    """Optimistic version check failed on an account row."""


class BusyError(ConflictError):
    """Account locks could not be acquired within the allowed wait."""

    retryable = True


class StorageFailureError(DomainError):
    """A durable write could not complete; state is unchanged."""

    retryable = True


def account_not_found(account_id: int) -> str:
    """Return message for missing or inactive account."""
    return f"Account {account_id} not found"


def account_number_not_found(account_number: str) -> str:
    """Return message for missing account looked up by number."""
    return f"Account '{account_number}' not found"


def owner_has_no_account(owner_id: int) -> str:
    """Return message for an owner without accounts."""
    return f"No account found for owner {owner_id}"


def recipient_not_found(account_number: str) -> str:
    """Return message for unresolvable transfer recipient."""
    return f"Recipient account '{account_number}' not found"


def insufficient_funds(account_id: int, balance: Decimal, amount: Decimal) -> str:
    """Return message for a debit exceeding the balance."""
    return f"Insufficient funds in account {account_id}: balance {balance}, requested {amount}"


def balance_limit_exceeded(account_id: int, balance: Decimal, amount: Decimal) -> str:
    """Return message for a credit that would overflow the balance."""
    return f"Crediting {amount} to account {account_id} would exceed the largest storable balance (balance {balance})"


def non_zero_balance(account_id: int, balance: Decimal) -> str:
    """Return message when closing a funded account."""
    return f"Cannot close account {account_id}: balance is {balance}. Withdraw or transfer the funds first."


def accounts_busy(account_ids: list[int], timeout: float) -> str:
    """Return message for lock wait timeout."""
    ids = ", ".join(str(account_id) for account_id in account_ids)
    return f"Accounts {ids} are busy (waited {timeout:g}s); please retry"
