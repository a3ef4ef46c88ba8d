from typing import Dict, Optional

from models import ClientAccount, TransactionRecord


class StateManager:
    """
    Ledger state for a single run: client accounts and the open
    deposit/withdrawal records that disputes refer to.
    Not thread-safe; one engine owns one StateManager.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._records: Dict[int, TransactionRecord] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the client's account, or None if it was never opened."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_record(self, transaction_id: int, record: TransactionRecord) -> None:
        """Store record for future dispute lookups."""
        self._records[transaction_id] = record

    def get_record(self, transaction_id: int) -> Optional[TransactionRecord]:
        return self._records.get(transaction_id)

    def close_record(self, transaction_id: int) -> None:
        """Drop a record once its dispute has been resolved or charged back."""
        del self._records[transaction_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def get_all_records(self) -> Dict[int, TransactionRecord]:
        return dict(self._records)
