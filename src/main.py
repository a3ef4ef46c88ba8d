import csv
import logging
import os
import sys
from decimal import Decimal
from typing import Dict, TextIO

from models import ClientAccount, fitting_context, truncate
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal truncated to 4 decimal places, removing trailing zeros."""
    truncated = truncate(value)
    with fitting_context(truncated):
        normalized = truncated.normalize()
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def log_level_from_env() -> int:
    """PAYMENTS_LOG_LEVEL as a logging level, WARNING if unset or unknown."""
    level = logging.getLevelName(os.environ.get("PAYMENTS_LOG_LEVEL", "WARNING").upper())
    if not isinstance(level, int):
        return logging.WARNING
    return level


def main():
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        sys.exit(1)

    write_accounts(accounts, sys.stdout)


if __name__ == "__main__":
    main()
