from decimal import Decimal

import pytest

from expenses import Expense, ResiduePolicy, generate_expense_id


def make_expense(amount, payer, split_among, description="Dinner"):
    return Expense("E001", description, Decimal(amount), payer, tuple(split_among))


def test_share_rounds_half_up():
    assert make_expense("100.00", "A", "ABC").share_per_person == Decimal("33.33")
    assert make_expense("0.05", "A", "AB").share_per_person == Decimal("0.03")
    assert make_expense("200.00", "A", "ABC").share_per_person == Decimal("66.67")


def test_payer_absorbs_residue():
    expense = make_expense("100.00", "A", "ABC")

    assert expense.allocations() == {"A": Decimal("33.34"), "B": Decimal("33.33"), "C": Decimal("33.33")}
    assert expense.balance_deltas() == {"A": Decimal("66.66"), "B": Decimal("-33.33"), "C": Decimal("-33.33")}


def test_payer_outside_split_is_credited_the_amount():
    expense = make_expense("100.00", "A", "BCD")

    deltas = expense.balance_deltas()

    assert deltas == {
        "A": Decimal("100.00"),
        "B": Decimal("-33.34"),
        "C": Decimal("-33.33"),
        "D": Decimal("-33.33"),
    }
    assert sum(deltas.values()) == 0


@pytest.mark.parametrize("amount, payer, split_among", [
    ("200.00", "A", "BCD"),
    ("0.05", "A", "ABCDEFG"),
    ("0.05", "D", "ABCDEFG"),
    ("1.00", "A", "BCDEFG"),
])
def test_payer_is_never_credited_more_than_paid(amount, payer, split_among):
    expense = make_expense(amount, payer, split_among)

    charges = expense.allocations()
    deltas = expense.balance_deltas()

    assert sum(charges.values()) == Decimal(amount)
    assert all(charge >= 0 for charge in charges.values())
    assert Decimal("0") <= deltas[payer] <= Decimal(amount)
    assert sum(deltas.values()) == 0


def test_tiny_amount_among_many_charges_nobody_negative():
    expense = make_expense("0.05", "A", "ABCDEFG")

    assert expense.allocations() == {
        "A": Decimal("0.01"), "B": Decimal("0.01"), "C": Decimal("0.01"),
        "D": Decimal("0.01"), "E": Decimal("0.01"), "F": Decimal("0"), "G": Decimal("0"),
    }
    assert expense.balance_deltas()["A"] == Decimal("0.04")


def test_distribute_spreads_cents_in_split_order():
    expense = make_expense("100.00", "B", "ABC")

    allocations = expense.allocations(ResiduePolicy.DISTRIBUTE)
    deltas = expense.balance_deltas(ResiduePolicy.DISTRIBUTE)

    assert allocations == {"A": Decimal("33.34"), "B": Decimal("33.33"), "C": Decimal("33.33")}
    assert deltas == {"A": Decimal("-33.34"), "B": Decimal("66.67"), "C": Decimal("-33.33")}


def test_distribute_allocations_sum_to_amount():
    expense = make_expense("10.00", "A", "ABCDEFG")

    allocations = expense.allocations(ResiduePolicy.DISTRIBUTE)

    assert sum(allocations.values()) == Decimal("10.00")
    assert max(allocations.values()) - min(allocations.values()) <= Decimal("0.01")


def test_solo_expense_changes_nothing():
    deltas = make_expense("42.00", "A", "A").balance_deltas()

    assert deltas == {"A": Decimal("0.00")}


def test_str_and_dict():
    expense = make_expense("100", "A", "ABC")

    assert str(expense) == "Dinner - $100.00 (paid by A, split among 3 people)"
    assert expense.to_dict()["share_per_person"] == "33.33"
    assert expense.to_dict()["split_among"] == ["A", "B", "C"]


def test_generate_expense_id():
    assert generate_expense_id(1) == "E001"
    assert generate_expense_id(42) == "E042"
