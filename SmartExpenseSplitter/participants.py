"""
Participants Module

This module defines the participant record kept by the ledger.

Features:
    - Name-keyed identity (unique, case-sensitive)
    - Running net balance as an exact 2-place Decimal
    - Dict conversion for the web shells

Data Model:
    Participant fields:
        - name: string (trimmed, non-empty)
        - balance: Decimal (positive = owed money, negative = owes money)

Functions:
    normalize_name: Validate and trim a participant name.
"""

from decimal import Decimal

from utils import ZERO, to_money


def normalize_name(value: str, field_name: str = "name") -> str:
    """
    Validate that a name is a non-empty string and return it trimmed.

    Args:
        value: Name to validate.
        field_name: Name of the field for error messages.

    Returns:
        str: The trimmed name.

    Raises:
        ValueError: If the value is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value.strip()


class Participant:
    """
    Represents a participant sharing expenses.

    Attributes:
        name (str): Unique name of the participant, also its key.
        balance (Decimal): Net position; only the ledger mutates it.
    """

    def __init__(self, name: str, balance: Decimal = ZERO):
        self.name = name
        self.balance = to_money(balance)

    def add_to_balance(self, amount: Decimal) -> None:
        self.balance = to_money(self.balance + amount)

    @property
    def status(self) -> str:
        """One of "owed", "owes" or "settled"."""
        if self.balance > 0:
            return "owed"
        if self.balance < 0:
            return "owes"
        return "settled"

    def to_dict(self) -> dict:
        """Convert participant to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "balance": str(self.balance),
            "status": self.status
        }

    def __repr__(self) -> str:
        return f"Participant(name='{self.name}', balance={self.balance})"
