"""
Console Shell

Interactive menu for a single in-memory ledger.

Menu:
    1. Add person
    2. Add expense
    3. Show all expenses
    4. Show balances
    5. Calculate settlements
    6. Exit

Usage:
    smart-expense-splitter
"""

from config.settings import configure_logging, get_settings
from errors import RoundingResidue
from ledger import Ledger
from utils import describe_balance, format_currency, parse_amount, parse_names


MENU = """
--- Menu ---
1. Add person
2. Add expense
3. Show all expenses
4. Show balances
5. Calculate settlements
6. Exit"""


def show_expenses(ledger: Ledger) -> None:
    print("\n=== All Expenses ===")
    expenses = ledger.list_expenses()
    if not expenses:
        print("No expenses recorded.")
        return
    for index, expense in enumerate(expenses, start=1):
        print(f"{index}. {expense}")


def show_balances(ledger: Ledger, symbol: str = "$") -> None:
    print("\n=== Current Balances ===")
    for name, balance in ledger.balances().items():
        print(describe_balance(name, balance, symbol))


def show_settlements(ledger: Ledger, symbol: str = "$") -> None:
    print("\n=== Settlement Plan ===")
    try:
        transactions = ledger.plan_settlements()
    except RoundingResidue as e:
        print(f"Error: {e}")
        return
    if not transactions:
        print("Everyone is settled up!")
        return
    for t in transactions:
        print(t.describe(symbol))


def add_person(ledger: Ledger) -> None:
    name = input("Enter person's name: ").strip()
    participant = ledger.register_participant(name)
    print(f"Added: {participant.name}")


def add_expense(ledger: Ledger, symbol: str = "$") -> None:
    description = input("Enter expense description: ").strip()
    amount = parse_amount(input("Enter amount: "))
    payer = input("Who paid? ").strip()
    split_among = parse_names(input("Split among (comma-separated names): "))

    expense = ledger.post_expense(description, amount, payer, split_among)
    print(f"Added expense: {expense}")
    print(f"Share per person: {format_currency(expense.share_per_person, symbol)}")


def main() -> None:
    settings = get_settings()
    configure_logging("WARNING")
    ledger = Ledger(settings.residue_policy)
    symbol = settings.currency_symbol

    print("=================================")
    print("  Smart Expense Splitter")
    print("=================================")

    while True:
        print(MENU)
        try:
            choice = input("Choose an option: ").strip()
        except EOFError:
            break

        try:
            if choice == "1":
                add_person(ledger)
            elif choice == "2":
                add_expense(ledger, symbol)
            elif choice == "3":
                show_expenses(ledger)
            elif choice == "4":
                show_balances(ledger, symbol)
            elif choice == "5":
                show_settlements(ledger, symbol)
            elif choice == "6":
                break
            else:
                print("Invalid option! Please try again.")
        except ValueError as e:
            print(f"Error: {e}")
        except EOFError:
            break

    print("Thanks for using Smart Expense Splitter!")


if __name__ == "__main__":
    main()
