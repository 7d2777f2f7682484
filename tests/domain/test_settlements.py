"""Tests for justsplit.domain.settlements pure functions."""

import pytest

from justsplit.domain.models import CurrencyCode, EventId, Expense, ExpenseId, User, UserId
from justsplit.domain.settlements import calculate_balances, calculate_settlements, select_unsettled

USERS = [User(UserId("a"), "Alice"), User(UserId("b"), "Bob"), User(UserId("c"), "Cara")]


def make_expense(
    expense_id: str,
    amount: float,
    paid_by: str,
    participants: list[str],
    currency: str = "USD",
    settled: bool = False,
    event_id: str | None = "trip",
) -> Expense:
    return Expense(
        id=ExpenseId(expense_id),
        date="2023-06-05",
        amount=amount,
        currency=CurrencyCode(currency),
        settled=settled,
        event_id=EventId(event_id) if event_id else None,
        paid_by=UserId(paid_by),
        participants=tuple(UserId(p) for p in participants),
    )


class TestSelectUnsettled:
    """Tests for select_unsettled."""

    def test_filters_settled_and_event(self) -> None:
        """Should drop settled expenses and other events."""
        expenses = [
            make_expense("1", 10, "a", ["a", "b"]),
            make_expense("2", 10, "a", ["a", "b"], settled=True),
            make_expense("3", 10, "a", ["a", "b"], event_id="party"),
        ]

        assert [e.id for e in select_unsettled(expenses)] == ["1", "3"]
        assert [e.id for e in select_unsettled(expenses, EventId("trip"))] == ["1"]


class TestCalculateBalances:
    """Tests for calculate_balances."""

    def test_even_split(self) -> None:
        """Should credit the payer with the other participants' shares."""
        balances = calculate_balances([make_expense("1", 90, "a", ["a", "b", "c"])], USERS)

        assert balances == {"a": pytest.approx(60), "b": pytest.approx(-30), "c": pytest.approx(-30)}

    def test_payer_not_participating(self) -> None:
        """Should credit the payer with every share when they didn't take part."""
        balances = calculate_balances([make_expense("1", 40, "a", ["b", "c"])], USERS)

        assert balances == {"a": pytest.approx(40), "b": pytest.approx(-20), "c": pytest.approx(-20)}

    def test_skips_expense_without_participants(self) -> None:
        """Should ignore expenses nobody shares."""
        balances = calculate_balances([make_expense("1", 40, "a", [])], USERS)

        assert balances == {"a": 0, "b": 0, "c": 0}

    def test_converts_currency(self) -> None:
        """Should convert amounts into the target currency."""
        expenses = [make_expense("1", 50, "a", ["a", "b"], currency="EUR")]

        balances = calculate_balances(
            expenses, USERS, convert=lambda amount, src, dst: amount * 2, currency=CurrencyCode("USD")
        )

        assert balances["a"] == pytest.approx(50)
        assert balances["b"] == pytest.approx(-50)

    def test_conversion_without_converter_raises(self) -> None:
        """Should refuse to mix currencies without a converter."""
        expenses = [make_expense("1", 50, "a", ["a", "b"], currency="EUR")]

        with pytest.raises(ValueError, match="without a converter"):
            calculate_balances(expenses, USERS, currency=CurrencyCode("USD"))


class TestCalculateSettlements:
    """Tests for calculate_settlements."""

    def test_two_debtors_one_creditor(self) -> None:
        """Should have each debtor pay the creditor their share."""
        expenses = [make_expense("e1", 90, "a", ["a", "b", "c"])]

        settlements = calculate_settlements(expenses, USERS, event_id=EventId("trip"))

        assert [(s.from_user, s.to_user) for s in settlements] == [("b", "a"), ("c", "a")]
        assert [s.amount for s in settlements] == [pytest.approx(30), pytest.approx(30)]
        assert settlements[0].expense_ids == ("e1",)
        assert settlements[0].event_id == "trip"

    def test_largest_debtor_pays_largest_creditor(self) -> None:
        """Should match the biggest debts first."""
        expenses = [
            make_expense("e1", 100, "a", ["a", "b"]),  # b owes a 50
            make_expense("e2", 20, "c", ["c", "b"]),  # b owes c 10
        ]

        settlements = calculate_settlements(expenses, USERS)

        assert [(s.from_user, s.to_user, s.amount) for s in settlements] == [
            ("b", "a", pytest.approx(50)),
            ("b", "c", pytest.approx(10)),
        ]
        assert settlements[1].expense_ids == ("e2",)

    def test_mutual_debts_cancel(self) -> None:
        """Should return nothing when balances net to zero."""
        expenses = [make_expense("e1", 10, "a", ["a", "b"]), make_expense("e2", 10, "b", ["a", "b"])]

        assert calculate_settlements(expenses, USERS) == []

    def test_settled_expenses_ignored(self) -> None:
        """Should return nothing when every expense is settled."""
        expenses = [make_expense("e1", 90, "a", ["a", "b", "c"], settled=True)]

        assert calculate_settlements(expenses, USERS) == []

    def test_other_events_ignored(self) -> None:
        """Should only settle the requested event."""
        expenses = [make_expense("e1", 90, "a", ["a", "b", "c"], event_id="party")]

        assert calculate_settlements(expenses, USERS, event_id=EventId("trip")) == []

    def test_settles_in_target_currency(self) -> None:
        """Should convert and tag settlements with the target currency."""
        expenses = [
            make_expense("e1", 30, "a", ["a", "b"], currency="USD"),
            make_expense("e2", 10, "a", ["a", "b"], currency="EUR"),
        ]
        rates = {("EUR", "USD"): 1.5}

        settlements = calculate_settlements(
            expenses,
            USERS,
            convert=lambda amount, src, dst: amount * rates[(src, dst)],
            currency=CurrencyCode("USD"),
        )

        assert len(settlements) == 1
        assert settlements[0].amount == pytest.approx(15 + 7.5)
        assert settlements[0].currency == "USD"
        assert settlements[0].expense_ids == ("e1", "e2")
