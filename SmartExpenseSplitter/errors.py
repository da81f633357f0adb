"""
Errors Module

Typed failures raised by the ledger and settlement engine.

Every error derives from SplitterError, which is a ValueError so the web
shells can keep mapping bad input to HTTP 400 the same way they map any
other ValueError. Each error carries the offending value as an attribute.

Classes:
    SplitterError: Base class for all expected, non-fatal failures.
    DuplicateParticipant: A name is registered twice.
    UnknownParticipant: A payer, split member or queried name is not registered.
    EmptySplitSet: An expense names nobody to split among.
    NonPositiveAmount: An expense amount is zero or negative.
    InvalidAmount: Shell input that does not parse as a decimal amount.
    RoundingResidue: Settlement finished with a nonzero leftover.
"""

from decimal import Decimal


class SplitterError(ValueError):
    """Base class for all ledger and settlement failures."""


class DuplicateParticipant(SplitterError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} already exists!")


class UnknownParticipant(SplitterError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} not found!")


class EmptySplitSet(SplitterError):
    def __init__(self):
        super().__init__("No one to split the expense among!")


class NonPositiveAmount(SplitterError):
    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"amount must be a positive number, got: {amount}")


class InvalidAmount(SplitterError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"amount must be a decimal number, got: {value!r}")


class RoundingResidue(SplitterError):
    """
    Raised when a settlement run exhausts one side with money left on the other.

    This only happens when the balances fed to the engine do not sum to zero.

    Attributes:
        leftover (dict[str, Decimal]): Nonzero working balances left unmatched,
            positive for creditors and negative for debtors.
        transactions (list): Transactions produced before the run stopped.
    """

    def __init__(self, leftover: dict, transactions: list):
        self.leftover = leftover
        self.transactions = transactions
        total = sum(leftover.values(), Decimal("0.00"))
        super().__init__(
            f"settlement left an unmatched residue of {total} "
            f"across {', '.join(sorted(leftover))}"
        )
