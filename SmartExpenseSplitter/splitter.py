"""
Splitter Module

This module derives net balances from an expense history.

Features:
    - Equal splitting among the named members of each expense
    - Per-participant net balance as a fold over expenses
    - Decimal-exact arithmetic, 2 places, round half up

Data Model:
    Input - names: iterable of participant names
    Input - expenses: iterable of Expense objects (see expenses.py)
    Output - balances (dict keyed by participant name):
        - Decimal net balance (positive = owed money, negative = owes money)

Functions:
    calculate_balances: Fold an expense history into net balances.
"""

from expenses import ResiduePolicy
from utils import ZERO


def calculate_balances(names, expenses, policy: ResiduePolicy = ResiduePolicy.PAYER) -> dict:
    """
    Calculate per-participant net balances from expenses.

    For each expense the members other than the payer are debited their
    share and the payer is credited what they owe (see Expense.balance_deltas).

    Args:
        names: Participant names; every one appears in the result, in order.
        expenses: Expense objects, folded in the given order.
        policy: Residue policy used for every expense.

    Returns:
        dict: Decimal net balance keyed by participant name.

    Raises:
        KeyError: If an expense mentions a name not in names.

    Notes:
        - Does NOT mutate the expenses
        - Result sums to exactly zero
    """
    balances = {name: ZERO for name in names}

    for expense in expenses:
        for name, delta in expense.balance_deltas(policy).items():
            balances[name] += delta

    return balances
