"""Pure functions for working out who owes whom.

This module contains the functional core for settling up:
- No I/O operations (currency conversion is passed in as a function)
- No side effects
- Pure data transformations
- Easy to test
"""

from collections.abc import Callable, Sequence

from justsplit.domain.models import CurrencyCode, EventId, Expense, ExpenseId, Settlement, User, UserId

Converter = Callable[[float, CurrencyCode, CurrencyCode], float]

# Balances smaller than a cent are treated as settled
BALANCE_TOLERANCE = 0.01


def select_unsettled(expenses: Sequence[Expense], event_id: EventId | None = None) -> list[Expense]:
    """Select unsettled expenses, optionally limited to one event."""
    return [
        expense
        for expense in expenses
        if not expense.settled and (event_id is None or expense.event_id == event_id)
    ]


def calculate_balances(
    expenses: Sequence[Expense],
    users: Sequence[User],
    convert: Converter | None = None,
    currency: CurrencyCode | None = None,
) -> dict[UserId, float]:
    """Calculate each user's net balance.

    Each expense is split evenly across its participants. The payer is
    credited with every other participant's share.

    Args:
        expenses: Expenses to split (already filtered).
        users: Known users; each starts at a zero balance.
        convert: Currency converter, needed when currency is given.
        currency: Currency to express balances in. None keeps raw amounts.

    Returns:
        Dictionary of user id to balance (positive = owed money).

    Raises:
        ValueError: If conversion is needed but no converter was given.
    """
    balances: dict[UserId, float] = {user.id: 0.0 for user in users}

    for expense in expenses:
        if not expense.participants or expense.paid_by is None:
            continue

        amount = expense.amount
        if currency is not None and expense.currency != currency:
            if convert is None:
                raise ValueError(f"Cannot convert {expense.currency} to {currency} without a converter")
            amount = convert(amount, expense.currency, currency)

        share = amount / len(expense.participants)
        for participant in expense.participants:
            if participant == expense.paid_by:
                continue
            balances[participant] = balances.get(participant, 0.0) - share
            balances[expense.paid_by] = balances.get(expense.paid_by, 0.0) + share

    return balances


def calculate_settlements(
    expenses: Sequence[Expense],
    users: Sequence[User],
    event_id: EventId | None = None,
    convert: Converter | None = None,
    currency: CurrencyCode | None = None,
) -> list[Settlement]:
    """Calculate the payments that settle all outstanding debts.

    The largest debtor pays the largest creditor until one of them is square,
    then the next pair is matched.

    Args:
        expenses: All expenses; settled ones are ignored.
        users: Known users.
        event_id: Restrict to one event's expenses.
        convert: Currency converter, needed when currency is given.
        currency: Currency to settle in.

    Returns:
        List of Settlement objects in the order they were matched.

    Raises:
        ValueError: If conversion is needed but no converter was given.
    """
    outstanding = select_unsettled(expenses, event_id)
    if not outstanding:
        return []

    balances = calculate_balances(outstanding, users, convert, currency)

    debtors: list[list] = []
    creditors: list[list] = []
    for user_id, balance in balances.items():
        if abs(balance) < BALANCE_TOLERANCE:
            continue
        if balance < 0:
            debtors.append([user_id, -balance])
        else:
            creditors.append([user_id, balance])

    debtors.sort(key=lambda entry: entry[1], reverse=True)
    creditors.sort(key=lambda entry: entry[1], reverse=True)

    settlements: list[Settlement] = []
    while debtors and creditors:
        debtor, creditor = debtors[0], creditors[0]
        amount = min(debtor[1], creditor[1])

        if amount > 0:
            related: tuple[ExpenseId, ...] = tuple(
                expense.id
                for expense in outstanding
                if expense.paid_by == creditor[0] and debtor[0] in expense.participants
            )
            settlements.append(
                Settlement(
                    from_user=debtor[0],
                    to_user=creditor[0],
                    amount=amount,
                    expense_ids=related,
                    event_id=event_id,
                    currency=currency,
                )
            )
            debtor[1] -= amount
            creditor[1] -= amount

        if debtor[1] < BALANCE_TOLERANCE:
            debtors.pop(0)
        if creditor[1] < BALANCE_TOLERANCE:
            creditors.pop(0)

    return settlements
