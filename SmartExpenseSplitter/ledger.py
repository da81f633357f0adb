"""
Ledger Module

This module owns the participants and the expense history of one group.

Features:
    - Register participants by unique name
    - Post expenses atomically (validate everything, then mutate)
    - Keep running balances and an append-only expense history
    - Plan settlements on a consistent balance snapshot
    - Optionally record a settlement plan as paid

Settlement policy:
    plan_settlements() is read-only. Balances change only when the caller
    passes a plan to apply_settlements(), which records the transfers as
    paid and brings the balances involved back toward zero.

Concurrency:
    Every mutating operation and every snapshot runs under the ledger's
    own lock, so one ledger can be shared by several request handlers.
"""

import logging
import threading
from decimal import Decimal

from errors import (
    DuplicateParticipant,
    EmptySplitSet,
    NonPositiveAmount,
    SplitterError,
    UnknownParticipant,
)
from expenses import Expense, ResiduePolicy, generate_expense_id
from participants import Participant, normalize_name
from settlement import Transaction, apply_transactions, optimize_settlements
from splitter import calculate_balances
from utils import ZERO, to_money


logger = logging.getLogger(__name__)


class Ledger:
    """
    Participants, expenses and running balances for one group.

    Attributes:
        residue_policy (ResiduePolicy): How uneven splits are rounded.
    """

    def __init__(self, residue_policy: ResiduePolicy = ResiduePolicy.PAYER):
        self.residue_policy = ResiduePolicy(residue_policy)
        self._participants: dict[str, Participant] = {}
        self._expenses: list[Expense] = []
        self._settled: list[Transaction] = []
        self._lock = threading.Lock()

    def register_participant(self, name: str) -> Participant:
        """
        Add a participant with a zero balance.

        Args:
            name: Participant name; surrounding whitespace is stripped.

        Returns:
            Participant: The new participant.

        Raises:
            ValueError: If the name is empty.
            DuplicateParticipant: If the name is already registered.
        """
        name = normalize_name(name)
        with self._lock:
            if name in self._participants:
                logger.warning("Rejected duplicate participant %r", name)
                raise DuplicateParticipant(name)
            participant = Participant(name)
            self._participants[name] = participant
        logger.info("Added participant %r", name)
        return participant

    def post_expense(self, description: str, amount, payer_name: str, split_names) -> Expense:
        """
        Record an expense and update every involved balance.

        Validation happens before any mutation: either the whole expense
        posts or nothing changes.

        Args:
            description: Free-text description.
            amount: Positive amount; rounded half up to 2 places.
            payer_name: Registered name of who paid.
            split_names: Registered names sharing the cost. Repeated names
                count once. The payer may or may not be included.

        Returns:
            Expense: The posted expense.

        Raises:
            InvalidAmount: If amount is not a finite number that fits to the cent.
            NonPositiveAmount: If amount rounds to zero or below.
            UnknownParticipant: If the payer or a split member is unknown.
            EmptySplitSet: If split_names is empty.
        """
        split_among = tuple(dict.fromkeys(split_names))

        with self._lock:
            try:
                amount = to_money(amount)
                if amount <= 0:
                    raise NonPositiveAmount(amount)
                if payer_name not in self._participants:
                    raise UnknownParticipant(payer_name)
                for name in split_among:
                    if name not in self._participants:
                        raise UnknownParticipant(name)
                if not split_among:
                    raise EmptySplitSet()
            except SplitterError as e:
                logger.warning("Rejected expense %r: %s", description, e)
                raise

            expense = Expense(
                expense_id=generate_expense_id(len(self._expenses) + 1),
                description=description.strip(),
                amount=amount,
                payer=payer_name,
                split_among=split_among
            )
            # Compute every new balance first so an overflow leaves nothing half-posted
            updated = {
                name: to_money(self._participants[name].balance + delta)
                for name, delta in expense.balance_deltas(self.residue_policy).items()
            }
            for name, balance in updated.items():
                self._participants[name].balance = balance
            self._expenses.append(expense)

        logger.info("Added expense %s: %s (share per person %s)",
                    expense.expense_id, expense, expense.share_per_person)
        return expense

    def list_expenses(self) -> list[Expense]:
        """Return the expenses in the order they were posted."""
        with self._lock:
            return list(self._expenses)

    def list_participants(self) -> list[Participant]:
        """Return detached copies of every participant, in registration order."""
        with self._lock:
            return [Participant(p.name, p.balance) for p in self._participants.values()]

    def get_participant(self, name: str) -> Participant:
        """
        Return a detached copy of one participant.

        Raises:
            UnknownParticipant: If the name is not registered.
        """
        with self._lock:
            participant = self._participants.get(name)
            if participant is None:
                raise UnknownParticipant(name)
            return Participant(participant.name, participant.balance)

    def net_balance(self, name: str) -> Decimal:
        """Return the stored balance of one participant (see get_participant)."""
        return self.get_participant(name).balance

    def balances(self) -> dict:
        """Return a snapshot of every balance, in registration order."""
        with self._lock:
            return {name: p.balance for name, p in self._participants.items()}

    def total_balance(self) -> Decimal:
        """Sum of all balances; zero whenever the ledger is consistent."""
        return sum(self.balances().values(), ZERO)

    def recompute_balances(self) -> dict:
        """
        Rebuild balances from the expense history alone.

        Settlements applied with apply_settlements() are folded in after
        the expenses, so the result matches balances() on a healthy ledger.
        """
        with self._lock:
            names = list(self._participants)
            expenses = list(self._expenses)
            settled = list(self._settled)
        balances = calculate_balances(names, expenses, self.residue_policy)
        return apply_transactions(balances, settled)

    def plan_settlements(self) -> list[Transaction]:
        """
        Compute a settlement plan for the current balances.

        Read-only: the ledger's balances are not changed.

        Raises:
            RoundingResidue: If the balances do not net to zero.
        """
        return optimize_settlements(self.balances())

    def apply_settlements(self, transactions) -> dict:
        """
        Record settlement transactions as paid.

        All transactions are checked before any balance changes.

        Args:
            transactions: Iterable of Transaction objects.

        Returns:
            dict: Balance snapshot after applying the transactions.

        Raises:
            UnknownParticipant: If a transaction names an unknown participant.
            NonPositiveAmount: If a transaction amount is zero or negative.
        """
        transactions = list(transactions)
        with self._lock:
            return self._apply(transactions)

    def settle_up(self) -> list[Transaction]:
        """
        Plan a settlement and record it as paid in one step.

        Planning and applying share one lock acquisition, so no expense can
        slip in between.

        Raises:
            RoundingResidue: If the balances do not net to zero; nothing is
                applied in that case.
        """
        with self._lock:
            snapshot = {name: p.balance for name, p in self._participants.items()}
            transactions = optimize_settlements(snapshot)
            self._apply(transactions)
        return transactions

    def _apply(self, transactions: list) -> dict:
        for transaction in transactions:
            for name in (transaction.debtor, transaction.creditor):
                if name not in self._participants:
                    raise UnknownParticipant(name)
            if transaction.amount <= 0:
                raise NonPositiveAmount(transaction.amount)

        for transaction in transactions:
            self._participants[transaction.debtor].add_to_balance(transaction.amount)
            self._participants[transaction.creditor].add_to_balance(-transaction.amount)
        self._settled.extend(transactions)

        logger.info("Applied %d settlement transactions", len(transactions))
        return {name: p.balance for name, p in self._participants.items()}
