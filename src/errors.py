from decimal import Decimal

from models import Operation


class ParseError(ValueError):
    """Raised when an input row cannot be turned into an operation."""


class TransactionError(Exception):
    """
    Base class for operations rejected by the ledger.
    A rejected operation leaves accounts and records untouched.
    """

    def __init__(self, operation: Operation, message: str):
        super().__init__(message)
        self.operation = operation


class AccountLocked(TransactionError):
    def __init__(self, operation: Operation):
        super().__init__(
            operation,
            f"Couldn't process {operation.transaction_type.value} tx {operation.transaction_id}: "
            f"account for client {operation.client_id} is locked",
        )


class AccountNotFound(TransactionError):
    def __init__(self, operation: Operation, client_id: int):
        super().__init__(
            operation,
            f"Account for client {client_id} not found ({operation.transaction_type.value} tx {operation.transaction_id})",
        )
        self.client_id = client_id


class ClientMismatch(TransactionError):
    def __init__(self, operation: Operation, expected: int):
        super().__init__(
            operation,
            f"{operation.transaction_type.value.capitalize()} for tx {operation.transaction_id}: "
            f"client mismatch (expected {expected}, got {operation.client_id})",
        )
        self.expected = expected


class NotEnoughFunds(TransactionError):
    def __init__(self, operation: Operation, available: Decimal, requested: Decimal):
        super().__init__(
            operation,
            f"{operation.transaction_type.value.capitalize()} tx {operation.transaction_id}: "
            f"not enough funds (have {available}, need {requested})",
        )
        self.available = available
        self.requested = requested


class AlreadyDisputed(TransactionError):
    def __init__(self, operation: Operation):
        super().__init__(operation, f"Dispute for tx {operation.transaction_id}: transaction already disputed")


class NotDisputed(TransactionError):
    def __init__(self, operation: Operation):
        super().__init__(
            operation,
            f"{operation.transaction_type.value.capitalize()} for tx {operation.transaction_id}: "
            f"transaction is not disputed",
        )


class ParentNotFound(TransactionError):
    def __init__(self, operation: Operation):
        super().__init__(
            operation,
            f"{operation.transaction_type.value.capitalize()} for tx {operation.transaction_id}: "
            f"transaction not found or already closed",
        )


class DuplicateTransaction(TransactionError):
    def __init__(self, operation: Operation):
        super().__init__(
            operation,
            f"{operation.transaction_type.value.capitalize()} tx {operation.transaction_id}: "
            f"id already belongs to an open transaction",
        )
