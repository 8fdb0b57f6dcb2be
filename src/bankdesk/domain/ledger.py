"""Ledger domain service: the only writer of balances and transaction records.

Every mutating operation follows the same pipeline:

1. validate the request against a read snapshot (no locks, no side effects);
2. lock every touched account in canonical order;
3. open a unit of work, re-read the accounts and re-validate, since balances
   and statuses may have changed between the snapshot and the lock;
4. apply balance deltas and append log records;
5. commit, then release the locks.

Any failure in steps 3-4 rolls the unit of work back before the locks are
released, so no caller can observe a partially applied operation.
"""

import logging
import secrets
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional, Union

from bankdesk.database.base import AccountStore, Database
from bankdesk.domain.entities import (
    Account,
    AccountStatus,
    AccountSummary,
    AccountType,
    TransactionKind,
    TransactionRecord,
)
from bankdesk.domain.errors import (
    AccountNotFoundError,
    BusyError,
    ConflictError,
    DomainError,
    InsufficientFundsError,
    InvalidAmountError,
    NonZeroBalanceError,
    RecipientNotFoundError,
    SelfTransferRejectedError,
    StorageFailureError,
    ValidationError,
    VersionConflictError,
    account_not_found,
    account_number_not_found,
    balance_limit_exceeded,
    insufficient_funds,
    non_zero_balance,
    owner_has_no_account,
    recipient_not_found,
)
from bankdesk.domain.locking import LockCoordinator
from bankdesk.domain.money import MAX_AMOUNT, ZERO, AmountLike, to_amount, to_positive_amount

logger = logging.getLogger(__name__)

INITIAL_DEPOSIT_DESCRIPTION = "Initial deposit"
ACCOUNT_NUMBER_PREFIX = "ACC"
MAX_NUMBER_ATTEMPTS = 20


def generate_account_number() -> str:
    """Return a random candidate account number such as 'ACC0123456789'."""
    return f"{ACCOUNT_NUMBER_PREFIX}{secrets.randbelow(10**10):010d}"


def _transfer_description(direction: str, account_number: str, description: str) -> str:
    if description:
        return f"Transfer {direction} {account_number}: {description}"
    return f"Transfer {direction} {account_number}"


def _parse_account_type(account_type: Union[AccountType, str]) -> AccountType:
    if isinstance(account_type, AccountType):
        return account_type
    try:
        return AccountType(str(account_type).strip().upper())
    except ValueError as e:
        choices = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Unknown account type '{account_type}'. Expected one of: {choices}") from e


def _require_active(account: Optional[Account], account_id: int) -> Account:
    if account is None or not account.is_active:
        raise AccountNotFoundError(account_not_found(account_id))
    return account


class TransactionHistory:
    """Lazy, restartable, newest-first view of one account's records.

    Each iteration opens its own read snapshot and pages through the log, so
    the sequence can be walked any number of times and always ends.
    """

    def __init__(
        self,
        db: Database,
        account_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ):
        self.db = db
        self.account_id = account_id
        self.since = since
        self.until = until

    def __iter__(self) -> Iterator[TransactionRecord]:
        with self.db.snapshot() as uow:
            yield from uow.log.list_by_account(
                self.account_id, newest_first=True, since=self.since, until=self.until
            )


class LedgerService:
    """Service for opening, closing and moving money between accounts."""

    def __init__(
        self,
        db: Database,
        locks: Optional[LockCoordinator] = None,
        number_generator: Callable[[], str] = generate_account_number,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            locks: Lock coordinator shared by every LedgerService that writes to db
            number_generator: Source of candidate account numbers
        """
        self.db = db
        self.locks = locks if locks is not None else LockCoordinator()
        self.number_generator = number_generator

    @contextmanager
    def _operation(self, name: str, **fields: Any) -> Iterator[None]:
        """Log the outcome of a ledger operation and surface version conflicts as Busy."""
        extra = {"operation": name, **fields}
        try:
            yield
        except VersionConflictError as e:
            logger.warning("%s lost a concurrent update: %s", name, e, extra=extra)
            raise BusyError(f"{e}; please retry") from e
        except (BusyError, StorageFailureError) as e:
            logger.warning("%s failed: %s", name, e, extra=extra)
            raise
        except DomainError as e:
            logger.debug("%s rejected: %s", name, e, extra=extra)
            raise

    # Account lifecycle
    def open_account(
        self,
        owner_id: int,
        account_type: Union[AccountType, str],
        initial_balance: AmountLike = 0,
    ) -> Account:
        """Open a new account with a fresh, never-used account number.

        Args:
            owner_id: ID of the owning user
            account_type: SAVINGS or CURRENT
            initial_balance: Opening deposit, zero or more

        Returns:
            The new account

        Raises:
            InvalidAmountError: If initial_balance is negative or malformed
            ValidationError: If account_type is unknown
        """
        with self._operation("open_account", owner_id=owner_id):
            account_type = _parse_account_type(account_type)
            balance = to_amount(initial_balance)
            if balance < ZERO:
                raise InvalidAmountError(f"Initial balance cannot be negative, got {balance}")

            # A new account is invisible to everyone else until commit, so no lock is needed
            with self.db.unit_of_work() as uow:
                number = self._allocate_account_number(uow.accounts)
                account = uow.accounts.insert(owner_id, number, account_type, balance)
                record_ids = []
                if balance > ZERO:
                    record = uow.log.append(
                        account.id, TransactionKind.CREDIT, balance, INITIAL_DEPOSIT_DESCRIPTION
                    )
                    record_ids.append(record.id)

        logger.info(
            "Opened account %s",
            account.account_number,
            extra={"operation": "open_account", "account_id": account.id, "record_ids": record_ids},
        )
        return account

    def _allocate_account_number(self, accounts: AccountStore) -> str:
        for _ in range(MAX_NUMBER_ATTEMPTS):
            candidate = self.number_generator()
            if not accounts.number_exists(candidate):
                return candidate
        raise ConflictError("Could not allocate an unused account number; please retry")

    def close_account(self, account_id: int) -> Account:
        """Close an account. Closed accounts reject all further mutation.

        Raises:
            AccountNotFoundError: If the account does not exist or is already closed
            NonZeroBalanceError: If the balance is not exactly zero
        """
        with self._operation("close_account", account_id=account_id):
            with self.db.snapshot() as uow:
                account = _require_active(uow.accounts.get(account_id), account_id)
            if account.balance != ZERO:
                raise NonZeroBalanceError(non_zero_balance(account_id, account.balance))

            with self.locks.acquire_all([account_id]):
                with self.db.unit_of_work() as uow:
                    account = _require_active(uow.accounts.get(account_id), account_id)
                    if account.balance != ZERO:
                        raise NonZeroBalanceError(non_zero_balance(account_id, account.balance))
                    uow.accounts.set_status(account_id, AccountStatus.CLOSED, account.version)
                    closed = uow.accounts.get(account_id)

        logger.info(
            "Closed account %s",
            closed.account_number,
            extra={"operation": "close_account", "account_id": account_id},
        )
        return closed

    # Money movement
    def credit(self, account_id: int, amount: AmountLike, description: str = "") -> TransactionRecord:
        """Add money to an ACTIVE account.

        Raises:
            InvalidAmountError: If amount is not positive, is malformed, or would
                push the balance past the largest storable amount
            AccountNotFoundError: If the account does not exist or is closed
        """
        with self._operation("credit", account_id=account_id):
            amount = to_positive_amount(amount)
            with self.db.snapshot() as uow:
                account = _require_active(uow.accounts.get(account_id), account_id)
            if account.balance + amount > MAX_AMOUNT:
                raise InvalidAmountError(balance_limit_exceeded(account_id, account.balance, amount))
            return self._post(account_id, TransactionKind.CREDIT, amount, description)

    def debit(self, account_id: int, amount: AmountLike, description: str = "") -> TransactionRecord:
        """Withdraw money from an ACTIVE account without overdrawing it.

        Raises:
            InvalidAmountError: If amount is not positive or is malformed
            AccountNotFoundError: If the account does not exist or is closed
            InsufficientFundsError: If amount exceeds the current balance
        """
        with self._operation("debit", account_id=account_id):
            amount = to_positive_amount(amount)
            with self.db.snapshot() as uow:
                account = _require_active(uow.accounts.get(account_id), account_id)
            if amount > account.balance:
                raise InsufficientFundsError(insufficient_funds(account_id, account.balance, amount))
            return self._post(account_id, TransactionKind.DEBIT, amount, description)

    def _post(
        self, account_id: int, kind: TransactionKind, amount: Decimal, description: str
    ) -> TransactionRecord:
        """Apply one single-account movement under lock."""
        with self.locks.acquire_all([account_id]):
            with self.db.unit_of_work() as uow:
                account = _require_active(uow.accounts.get(account_id), account_id)
                balance = uow.accounts.apply_delta(account_id, kind.sign * amount, account.version)
                record = uow.log.append(account_id, kind, amount, description)

        logger.info(
            "%s %s on account %s, balance now %s",
            kind.value,
            amount,
            account_id,
            balance,
            extra={"operation": kind.value.lower(), "account_id": account_id, "record_ids": [record.id]},
        )
        return record

    def transfer(
        self,
        from_account_id: int,
        to_account_number: str,
        amount: AmountLike,
        description: str = "",
    ) -> tuple[TransactionRecord, TransactionRecord]:
        """Move money from one ACTIVE account to another.

        Args:
            from_account_id: Sending account ID
            to_account_number: Public number of the receiving account
            amount: Positive amount to move
            description: Free text appended to both records

        Returns:
            (TRANSFER_OUT record on the sender, TRANSFER_IN record on the recipient)

        Raises:
            InvalidAmountError: If amount is not positive, is malformed, or would
                push the recipient past the largest storable amount
            AccountNotFoundError: If the sender does not exist or is closed
            RecipientNotFoundError: If the number matches no ACTIVE account
            SelfTransferRejectedError: If the number belongs to the sender
            InsufficientFundsError: If amount exceeds the sender's balance
        """
        with self._operation("transfer", account_id=from_account_id, recipient=to_account_number):
            amount = to_positive_amount(amount)
            with self.db.snapshot() as uow:
                sender = _require_active(uow.accounts.get(from_account_id), from_account_id)
                recipient = uow.accounts.get_by_number(to_account_number)
            if recipient is None or not recipient.is_active:
                raise RecipientNotFoundError(recipient_not_found(to_account_number))
            if recipient.id == sender.id:
                raise SelfTransferRejectedError("Cannot transfer to the sending account")
            if amount > sender.balance:
                raise InsufficientFundsError(insufficient_funds(sender.id, sender.balance, amount))
            if recipient.balance + amount > MAX_AMOUNT:
                raise InvalidAmountError(balance_limit_exceeded(recipient.id, recipient.balance, amount))

            with self.locks.acquire_all([sender.id, recipient.id]):
                with self.db.unit_of_work() as uow:
                    sender = _require_active(uow.accounts.get(sender.id), sender.id)
                    recipient = uow.accounts.get(recipient.id)
                    if recipient is None or not recipient.is_active:
                        raise RecipientNotFoundError(recipient_not_found(to_account_number))

                    uow.accounts.apply_delta(sender.id, -amount, sender.version)
                    uow.accounts.apply_delta(recipient.id, amount, recipient.version)
                    out_record = uow.log.append(
                        sender.id,
                        TransactionKind.TRANSFER_OUT,
                        amount,
                        _transfer_description("to", recipient.account_number, description),
                    )
                    in_record = uow.log.append(
                        recipient.id,
                        TransactionKind.TRANSFER_IN,
                        amount,
                        _transfer_description("from", sender.account_number, description),
                    )

        logger.info(
            "Transferred %s from %s to %s",
            amount,
            sender.account_number,
            recipient.account_number,
            extra={
                "operation": "transfer",
                "account_id": sender.id,
                "record_ids": [out_record.id, in_record.id],
            },
        )
        return out_record, in_record

    # Queries
    def get_account(self, account_id: int) -> Account:
        """Get an account by ID, whatever its status."""
        with self.db.snapshot() as uow:
            account = uow.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def get_account_by_number(self, account_number: str) -> Account:
        """Get an account by its public number, whatever its status."""
        with self.db.snapshot() as uow:
            account = uow.accounts.get_by_number(account_number)
        if account is None:
            raise AccountNotFoundError(account_number_not_found(account_number))
        return account

    def get_account_summary(self, owner_id: int) -> AccountSummary:
        """Summarize the owner's primary account."""
        with self.db.snapshot() as uow:
            account = uow.accounts.get_by_owner(owner_id)
        if account is None:
            raise AccountNotFoundError(owner_has_no_account(owner_id))
        return AccountSummary.from_account(account)

    def list_account_summaries(self, owner_id: int) -> list[AccountSummary]:
        """Summarize every account of an owner, oldest first."""
        with self.db.snapshot() as uow:
            accounts = uow.accounts.list_by_owner(owner_id)
        return [AccountSummary.from_account(account) for account in accounts]

    def list_transactions(
        self,
        account_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> TransactionHistory:
        """Return the account's records, newest first.

        Args:
            account_id: Account ID (closed accounts keep their history)
            since: Only records created at or after this instant
            until: Only records created before this instant

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        self.get_account(account_id)
        return TransactionHistory(self.db, account_id, since=since, until=until)

    def reconcile(self, account_id: int) -> Decimal:
        """Return balance minus the signed sum of the log; zero when consistent."""
        with self.db.snapshot() as uow:
            account = uow.accounts.get(account_id)
            if account is None:
                raise AccountNotFoundError(account_not_found(account_id))
            total = uow.log.signed_total(account_id)
        return account.balance - total
