import sys
import os
import copy
from decimal import Decimal

from hypothesis import given, settings, strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import AccountLocked, AlreadyDisputed, TransactionError
from models import Chargeback, Deposit, Dispute, Resolve, Withdrawal
from state_manager import StateManager
from transaction_processor import TransactionProcessor

clients = st.integers(min_value=1, max_value=3)
tx_ids = st.integers(min_value=1, max_value=8)
amounts = st.decimals(min_value=Decimal("0.0001"), max_value=Decimal("1000"), places=4)

operations = st.one_of(
    st.builds(Deposit, clients, tx_ids, amounts),
    st.builds(Withdrawal, clients, tx_ids, amounts),
    st.builds(Dispute, clients, tx_ids),
    st.builds(Resolve, clients, tx_ids),
    st.builds(Chargeback, clients, tx_ids),
)


def snapshot(state):
    return copy.deepcopy((state.get_all_accounts(), state.get_all_records()))


class TestLedgerProperties:
    @settings(max_examples=200)
    @given(st.lists(operations, max_size=60))
    def test_total_is_available_plus_held(self, sequence):
        state = StateManager()
        processor = TransactionProcessor(state)

        for operation in sequence:
            try:
                processor.process_transaction(operation)
            except TransactionError:
                pass
            for account in state.get_all_accounts().values():
                assert account.total == account.available + account.held

    @settings(max_examples=200)
    @given(st.lists(operations, max_size=60))
    def test_rejected_operation_changes_nothing(self, sequence):
        state = StateManager()
        processor = TransactionProcessor(state)

        for operation in sequence:
            before = snapshot(state)
            try:
                processor.process_transaction(operation)
            except TransactionError:
                assert snapshot(state) == before

    @settings(max_examples=200)
    @given(st.lists(operations, max_size=60))
    def test_disputed_flags_match_held_funds(self, sequence):
        state = StateManager()
        processor = TransactionProcessor(state)

        for operation in sequence:
            try:
                processor.process_transaction(operation)
            except TransactionError:
                pass

        for client_id, account in state.get_all_accounts().items():
            disputed = sum(
                (r.amount for r in state.get_all_records().values() if r.client_id == client_id and r.disputed),
                Decimal("0"),
            )
            assert account.held == disputed

    @given(st.lists(operations, max_size=30), amounts)
    def test_second_dispute_rejected(self, prefix, amount):
        state = StateManager()
        processor = TransactionProcessor(state)
        for operation in prefix:
            try:
                processor.process_transaction(operation)
            except TransactionError:
                pass

        processor.process_transaction(Deposit(99, 1000, amount))
        processor.process_transaction(Dispute(99, 1000))
        try:
            processor.process_transaction(Dispute(99, 1000))
        except AlreadyDisputed:
            pass
        else:
            raise AssertionError("second dispute accepted")

    @given(st.lists(operations, max_size=30))
    def test_locked_account_refuses_everything(self, followups):
        state = StateManager()
        processor = TransactionProcessor(state)
        processor.process_transaction(Deposit(1, 100, Decimal("10")))
        processor.process_transaction(Dispute(1, 100))
        processor.process_transaction(Chargeback(1, 100))

        for operation in followups:
            if operation.client_id != 1:
                continue
            try:
                processor.process_transaction(operation)
            except AccountLocked:
                pass
            except TransactionError as e:
                # Only lookups that fail before the lock is consulted are allowed.
                assert type(e).__name__ in ("ParentNotFound", "AccountNotFound", "ClientMismatch")
            else:
                raise AssertionError(f"{operation} accepted on a locked account")
