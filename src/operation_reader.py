import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional

from errors import ParseError
from models import (
    Chargeback,
    Deposit,
    Dispute,
    MAX_AMOUNT_EXPONENT,
    Operation,
    Resolve,
    TransactionType,
    Withdrawal,
    truncate,
)

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
MIN_AMOUNT = Decimal("0.0001")


def read_operations(filepath: str, stats=None) -> Iterator[Operation]:
    """
    Read a CSV file with a `type, client, tx, amount` header and yield
    operations in file order. Rows with missing trailing columns or extra
    columns are accepted; rows that fail to parse are logged and skipped.
    """
    # Undecodable bytes become U+FFFD so only the offending row fails to parse.
    with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield parse_row(row)
            except ParseError as e:
                logger.warning(f"Failed to parse row {reader.line_num}: {e}")
                if stats is not None:
                    stats.record_skipped_row()


def parse_row(row: Dict[Optional[str], object]) -> Operation:
    """Turn one CSV row into a typed operation."""
    # Extra columns land under the None key; short rows carry None values.
    normalized = {
        k.strip(): (v or "").strip()
        for k, v in row.items()
        if k is not None and not isinstance(v, list)
    }

    type_str = _required(normalized, "type").lower()
    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise ParseError(f"unknown transaction type {type_str!r}") from None

    client_id = _parse_unsigned(_required(normalized, "client"), "client", MAX_CLIENT_ID)
    transaction_id = _parse_unsigned(_required(normalized, "tx"), "tx", MAX_TRANSACTION_ID)

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client_id, transaction_id, _parse_amount(normalized.get("amount", "")))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client_id, transaction_id, _parse_amount(normalized.get("amount", "")))
        case TransactionType.DISPUTE:
            return Dispute(client_id, transaction_id)
        case TransactionType.RESOLVE:
            return Resolve(client_id, transaction_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(client_id, transaction_id)


def _required(normalized: Dict[str, str], field: str) -> str:
    value = normalized.get(field, "")
    if not value:
        raise ParseError(f"missing {field!r}")
    return value


def _parse_unsigned(value: str, field: str, maximum: int) -> int:
    if "_" in value:
        raise ParseError(f"invalid {field!r} value {value!r}")
    try:
        number = int(value)
    except ValueError:
        raise ParseError(f"invalid {field!r} value {value!r}") from None
    if not 0 <= number <= maximum:
        raise ParseError(f"{field!r} value {number} out of range")
    return number


def _parse_amount(value: str) -> Decimal:
    if not value:
        raise ParseError("missing 'amount'")
    if "_" in value:
        raise ParseError(f"invalid amount {value!r}")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ParseError(f"invalid amount {value!r}") from None
    if not amount.is_finite() or amount < MIN_AMOUNT or amount.adjusted() > MAX_AMOUNT_EXPONENT:
        raise ParseError(f"invalid amount value {value!r}")
    return truncate(amount)
