import logging
import sys
from typing import Dict, Iterable

from errors import TransactionError
from models import ClientAccount, Operation, ProcessingStats, ledger_context
from operation_reader import read_operations
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays operations against a fresh ledger, strictly in the order received.
    A rejected operation is logged and skipped; it never stops the run.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        accounts = self.process_operations(read_operations(filepath, self._stats))

        print(
            f"Processed: {self._stats.processed}, "
            f"Failed: {self._stats.failed}, "
            f"Skipped rows: {self._stats.skipped_rows}",
            file=sys.stderr,
        )
        return accounts

    def process_operations(self, operations: Iterable[Operation]) -> Dict[int, ClientAccount]:
        with ledger_context():
            for operation in operations:
                try:
                    self._processor.process_transaction(operation)
                except TransactionError as e:
                    self._stats.record_failure()
                    logger.warning(str(e))
                else:
                    self._stats.record_success()

        return self._state.get_all_accounts()
