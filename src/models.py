from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, getcontext, localcontext
from enum import Enum
from typing import Union

PRECISION = Decimal("0.0001")

# Input amounts stay below 1e309; balances are computed with this many digits.
MAX_AMOUNT_EXPONENT = 308
LEDGER_PRECISION = 320


def ledger_context():
    """Decimal context in which ledger arithmetic stays exact."""
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, LEDGER_PRECISION)
    return localcontext(ctx)


def fitting_context(value: Decimal):
    """Decimal context wide enough for every integer digit plus 4 places."""
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, value.adjusted() + 5)
    return localcontext(ctx)


def truncate(value) -> Decimal:
    """Cut a value to 4 decimal places, rounding toward zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    with fitting_context(value):
        return value.quantize(PRECISION, rounding=ROUND_DOWN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Deposit:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.DEPOSIT


@dataclass(frozen=True)
class Withdrawal:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.WITHDRAWAL


@dataclass(frozen=True)
class Dispute:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.DISPUTE


@dataclass(frozen=True)
class Resolve:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.RESOLVE


@dataclass(frozen=True)
class Chargeback:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.CHARGEBACK


Operation = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        self.available += amount
        self.total += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount
        self.total -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def charge_back(self, amount: Decimal) -> None:
        self.held -= amount
        self.total -= amount
        self.locked = True


@dataclass
class TransactionRecord:
    """A deposit or withdrawal kept around so it can be disputed."""

    client_id: int
    amount: Decimal
    disputed: bool = False


class ProcessingStats:
    """Counters for a single engine run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped_rows = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_skipped_row(self):
        self.skipped_rows += 1
