"""
Expenses Module

This module defines the immutable expense record and how an expense turns
into balance changes.

Features:
    - Equal split with a 2-place, round-half-up share per person
    - Payer may or may not be one of the people splitting
    - Two policies for the rounding residue left by uneven splits

Data Model:
    Expense fields:
        - expense_id: string (E001, E002, ... format)
        - description: string (free text)
        - amount: Decimal (must be > 0)
        - payer: string (participant name)
        - split_among: tuple of participant names (non-empty, no repeats)

Residue policies:
    PAYER: Every member other than the payer is debited share_per_person
        and the payer's own share takes whatever the rounding leaves over.
        When the payer is not splitting, or rounded-up shares would add up
        to more than the amount, the members are charged as under
        DISTRIBUTE instead, so the payer is never credited more than paid.
    DISTRIBUTE: The amount is allocated cent by cent across the members in
        listed order; allocations differ by at most one cent and sum to the
        amount. The payer is credited the amount minus their own allocation.

Either way the deltas of one expense sum to exactly zero.

Functions:
    generate_expense_id: Format the sequential expense id.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from utils import CENT, ZERO, divide_money, format_currency


class ResiduePolicy(str, Enum):
    PAYER = "payer"
    DISTRIBUTE = "distribute"


def generate_expense_id(number: int) -> str:
    """Return the id for the number-th expense: 1 -> "E001"."""
    return f"E{number:03d}"


@dataclass(frozen=True)
class Expense:
    """
    A single posted expense.

    Attributes:
        expense_id (str): Sequential identifier in E### format.
        description (str): What the money was spent on.
        amount (Decimal): Total amount paid, positive, 2 places.
        payer (str): Name of the participant who paid.
        split_among (tuple[str, ...]): Names of the participants sharing it.
    """
    expense_id: str
    description: str
    amount: Decimal
    payer: str
    split_among: tuple

    @property
    def share_per_person(self) -> Decimal:
        return divide_money(self.amount, len(self.split_among))

    def allocations(self, policy: ResiduePolicy = ResiduePolicy.PAYER) -> dict:
        """
        Return what each split member is charged for this expense.

        Args:
            policy: How to place the rounding residue.

        Returns:
            dict[str, Decimal]: Charge per member, in split order. The
            values always sum to the expense amount.
        """
        if policy == ResiduePolicy.DISTRIBUTE:
            return self._distribute_cents()

        share = self.share_per_person
        others = [name for name in self.split_among if name != self.payer]
        # Rounded-up shares would overcharge the others, or nobody is left to absorb the residue
        if self.payer not in self.split_among or share * len(others) > self.amount:
            return self._distribute_cents()

        charges = {name: share for name in self.split_among}
        charges[self.payer] = self.amount - share * len(others)
        return charges

    def _distribute_cents(self) -> dict:
        """Allocate the amount cent by cent across members in split order."""
        members = self.split_among
        cents = int(self.amount / CENT)
        base, extra = divmod(cents, len(members))
        return {
            name: (base + (1 if index < extra else 0)) * CENT
            for index, name in enumerate(members)
        }

    def balance_deltas(self, policy: ResiduePolicy = ResiduePolicy.PAYER) -> dict:
        """
        Return the balance change this expense applies to each participant.

        Members other than the payer are debited their charge. The payer is
        credited the sum of the other members' charges: the amount minus
        the payer's own charge, or the whole amount if the payer is not
        splitting.

        Returns:
            dict[str, Decimal]: Delta per participant name; sums to zero.
        """
        charges = self.allocations(policy)
        deltas = {}
        credit = ZERO
        for name, charge in charges.items():
            if name == self.payer:
                continue
            deltas[name] = -charge
            credit += charge
        deltas[self.payer] = credit
        return deltas

    def to_dict(self) -> dict:
        """Convert expense to a JSON-friendly dictionary."""
        return {
            "expense_id": self.expense_id,
            "description": self.description,
            "amount": str(self.amount),
            "payer": self.payer,
            "split_among": list(self.split_among),
            "share_per_person": str(self.share_per_person)
        }

    def __str__(self) -> str:
        return (
            f"{self.description} - {format_currency(self.amount)} "
            f"(paid by {self.payer}, split among {len(self.split_among)} people)"
        )
