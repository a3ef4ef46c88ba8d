import logging
from typing import Tuple, Union

from errors import (
    AccountLocked,
    AccountNotFound,
    AlreadyDisputed,
    ClientMismatch,
    DuplicateTransaction,
    NotDisputed,
    NotEnoughFunds,
    ParentNotFound,
)
from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    Operation,
    Resolve,
    TransactionRecord,
    Withdrawal,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies operations to ledger state, one at a time, in the order given.
    Every handler validates before it mutates, so a rejected operation
    (raised as a TransactionError) leaves the state exactly as it was.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, operation: Operation) -> None:
        """
        Route an operation to its handler.

        Raises:
            TransactionError: the operation was rejected; nothing changed.
        """
        match operation:
            case Deposit():
                self._handle_deposit(operation)
            case Withdrawal():
                self._handle_withdrawal(operation)
            case Dispute():
                self._handle_dispute(operation)
            case Resolve():
                self._handle_resolve(operation)
            case Chargeback():
                self._handle_chargeback(operation)
            case _:
                raise TypeError(f"Unsupported operation: {operation!r}")

    def _handle_deposit(self, operation: Deposit) -> None:
        existing = self._state.get_account(operation.client_id)
        if existing is not None and existing.locked:
            raise AccountLocked(operation)

        if self._state.get_record(operation.transaction_id) is not None:
            raise DuplicateTransaction(operation)

        account = self._state.get_or_create_account(operation.client_id)
        account.credit(operation.amount)
        self._state.store_record(
            operation.transaction_id,
            TransactionRecord(client_id=operation.client_id, amount=operation.amount),
        )
        logger.debug(f"Deposit tx {operation.transaction_id}: credited {operation.amount} to client {operation.client_id}")

    def _handle_withdrawal(self, operation: Withdrawal) -> None:
        account = self._state.get_account(operation.client_id)
        if account is None:
            raise AccountNotFound(operation, operation.client_id)

        if account.locked:
            raise AccountLocked(operation)

        if self._state.get_record(operation.transaction_id) is not None:
            raise DuplicateTransaction(operation)

        if account.available < operation.amount:
            raise NotEnoughFunds(operation, account.available, operation.amount)

        account.debit(operation.amount)
        self._state.store_record(
            operation.transaction_id,
            TransactionRecord(client_id=operation.client_id, amount=operation.amount),
        )
        logger.debug(f"Withdrawal tx {operation.transaction_id}: debited {operation.amount} from client {operation.client_id}")

    def _handle_dispute(self, operation: Dispute) -> None:
        record, account = self._disputable(operation)

        if record.disputed:
            raise AlreadyDisputed(operation)

        # Held funds come out of available, which must cover the full amount.
        if account.available < record.amount:
            raise NotEnoughFunds(operation, account.available, record.amount)

        account.hold(record.amount)
        record.disputed = True
        logger.debug(f"Dispute for tx {operation.transaction_id}: holding {record.amount}")

    def _handle_resolve(self, operation: Resolve) -> None:
        record, account = self._disputable(operation)

        if not record.disputed:
            raise NotDisputed(operation)

        account.release_hold(record.amount)
        self._state.close_record(operation.transaction_id)
        logger.debug(f"Resolve for tx {operation.transaction_id}: released {record.amount}")

    def _handle_chargeback(self, operation: Chargeback) -> None:
        record, account = self._disputable(operation)

        if not record.disputed:
            raise NotDisputed(operation)

        account.charge_back(record.amount)
        self._state.close_record(operation.transaction_id)
        logger.info(f"Chargeback for tx {operation.transaction_id}: client {account.client_id} locked")

    def _disputable(
        self, operation: Union[Dispute, Resolve, Chargeback]
    ) -> Tuple[TransactionRecord, ClientAccount]:
        """Checks shared by dispute, resolve and chargeback."""
        record = self._state.get_record(operation.transaction_id)
        if record is None:
            raise ParentNotFound(operation)

        account = self._state.get_account(record.client_id)
        if account is None:
            raise AccountNotFound(operation, record.client_id)

        if operation.client_id != record.client_id:
            raise ClientMismatch(operation, record.client_id)

        if account.locked:
            raise AccountLocked(operation)

        return record, account
