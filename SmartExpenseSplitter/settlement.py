"""
Settlement Module

This module turns net balances into a list of point-to-point payments.

Features:
    - Convert net balances into settlement transactions
    - Reduce the number of transactions with a greedy largest-first pass
    - Exact Decimal arithmetic, no epsilon comparisons
    - Detect and report balances that do not net to zero

Data Model:
    Input - balances (dict keyed by participant name):
        - Decimal net balance (positive = owed money, negative = owes money)

    Output - list of Transaction objects:
        - debtor: string (who pays)
        - creditor: string (who receives)
        - amount: Decimal (2 decimal places)

The greedy pass is not guaranteed to find the minimum number of
transactions; finding that minimum is a subset-partition problem. For n
participants with nonzero balances it emits at most n - 1 transactions.

Functions:
    optimize_settlements: Convert balances into settlement transactions.
    apply_transactions: Apply transactions to a copy of the balances.
"""

import logging

from errors import RoundingResidue
from utils import ZERO, format_currency, to_money


logger = logging.getLogger(__name__)


class Transaction:
    """
    One settlement payment.

    Attributes:
        debtor (str): Participant who pays.
        creditor (str): Participant who receives.
        amount (Decimal): Amount paid, positive.
    """

    def __init__(self, debtor: str, creditor: str, amount):
        self.debtor = debtor
        self.creditor = creditor
        self.amount = to_money(amount)

    def to_dict(self) -> dict:
        return {
            "from_participant": self.debtor,
            "to_participant": self.creditor,
            "amount": str(self.amount)
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return (self.debtor, self.creditor, self.amount) == \
               (other.debtor, other.creditor, other.amount)

    def __hash__(self) -> int:
        return hash((self.debtor, self.creditor, self.amount))

    def __repr__(self) -> str:
        return f"Transaction({self.debtor!r} -> {self.creditor!r}, {self.amount})"

    def describe(self, symbol: str = "$") -> str:
        return f"{self.debtor} owes {self.creditor}: {format_currency(self.amount, symbol)}"

    def __str__(self) -> str:
        return self.describe()


def optimize_settlements(balances: dict) -> list[Transaction]:
    """
    Convert net balances into settlement transactions.

    Uses a greedy algorithm:
        1. Separate participants into creditors (balance > 0) and debtors
           (balance < 0); exact zeros are skipped
        2. Sort creditors by largest credit first and debtors by largest
           debt first; equal amounts are ordered by name
        3. Match the current creditor with the current debtor:
           - Settle the minimum of credit and debt
           - Move both working balances toward zero
           - Advance whichever side reached exactly zero (or both)
        4. Stop when either side runs out

    Args:
        balances: Dictionary of net balance keyed by participant name.

    Returns:
        list[Transaction]: Payments in the order they were matched. Empty
        when everyone is already settled.

    Raises:
        RoundingResidue: If balances do not sum to zero, so that one side
            still holds money after the other side is exhausted.

    Notes:
        - Does NOT modify input balances
    """
    creditors = []  # [name, remaining credit]
    debtors = []    # [name, remaining debt], stored as positive amounts

    for name, balance in balances.items():
        net = to_money(balance)
        if net > 0:
            creditors.append([name, net])
        elif net < 0:
            debtors.append([name, -net])

    creditors.sort(key=lambda entry: (-entry[1], entry[0]))
    debtors.sort(key=lambda entry: (-entry[1], entry[0]))

    settlements = []
    creditor_idx = 0
    debtor_idx = 0

    while creditor_idx < len(creditors) and debtor_idx < len(debtors):
        creditor = creditors[creditor_idx]
        debtor = debtors[debtor_idx]

        amount = min(creditor[1], debtor[1])
        settlements.append(Transaction(debtor[0], creditor[0], amount))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] == 0:
            creditor_idx += 1
        if debtor[1] == 0:
            debtor_idx += 1

    leftover = {name: amount for name, amount in creditors[creditor_idx:]}
    leftover.update({name: -amount for name, amount in debtors[debtor_idx:]})
    if leftover:
        logger.warning("Settlement stopped with unmatched balances: %s", leftover)
        raise RoundingResidue(leftover, settlements)

    logger.debug("Settled %d balances with %d transactions",
                 len(creditors) + len(debtors), len(settlements))
    return settlements


def apply_transactions(balances: dict, transactions) -> dict:
    """
    Apply settlement transactions to a copy of the balances.

    Each debtor's balance rises by the amount paid and each creditor's
    balance falls by it.

    Args:
        balances: Dictionary of net balance keyed by participant name.
        transactions: Iterable of Transaction objects.

    Returns:
        dict: New balances; the input is left untouched.

    Raises:
        KeyError: If a transaction names someone missing from balances.
    """
    result = {name: to_money(balance) for name, balance in balances.items()}
    for transaction in transactions:
        if transaction.debtor not in result:
            raise KeyError(transaction.debtor)
        if transaction.creditor not in result:
            raise KeyError(transaction.creditor)
        result[transaction.debtor] += transaction.amount
        result[transaction.creditor] -= transaction.amount
    return result
