"""Tests for domain entities."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from profitfirst.domain.defaults import DEFAULT_BUCKETS, create_default_accounts
from profitfirst.domain.entities import (
    Account,
    AccountType,
    Allocation,
    AppState,
    Transaction,
)


class TestAccount:
    """Tests for Account entity."""

    def test_create_account_defaults(self):
        account = Account(id="a1", name="Company Profit", type=AccountType.PROFIT)
        assert account.target_percentage == Decimal("0")
        assert account.current_percentage == Decimal("0")
        assert account.balance == Decimal("0")
        assert account.bank_account_id is None

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(id="a1", name="Company Profit", type=AccountType.PROFIT)
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.balance = Decimal("10")

    def test_account_type_values(self):
        assert AccountType("OWNERS_COMP") is AccountType.OWNERS_COMP
        with pytest.raises(ValueError):
            AccountType("SAVINGS")


class TestTransaction:
    """Tests for Transaction entity."""

    def test_allocated_amount(self):
        txn = Transaction(
            id="t1",
            date=datetime(2024, 1, 1, tzinfo=UTC),
            description="Income",
            total_amount=Decimal("100"),
            allocations=(Allocation("a", Decimal("60.5")), Allocation("b", Decimal("39.5"))),
        )
        assert txn.allocated_amount == Decimal("100.0")

    def test_allocated_amount_without_allocations(self):
        txn = Transaction(
            id="t1",
            date=datetime(2024, 1, 1, tzinfo=UTC),
            description="Income",
            total_amount=Decimal("100"),
        )
        assert txn.allocated_amount == Decimal("0")


class TestAppState:
    """Tests for AppState."""

    def test_empty_state(self):
        state = AppState()
        assert state.is_empty
        assert state.currency_symbol == "USD"

    def test_state_with_accounts_is_not_empty(self, sample_accounts):
        assert not AppState(accounts=sample_accounts).is_empty

    def test_account_of_type(self, sample_accounts):
        state = AppState(accounts=sample_accounts)
        assert state.account_of_type(AccountType.TAX).id == "acc-tax"
        assert AppState().account_of_type(AccountType.TAX) is None

    def test_account_ids_by_type_keeps_first(self, sample_accounts):
        duplicate = Account(id="acc-profit-2", name="Profit 2", type=AccountType.PROFIT)
        state = AppState(accounts=sample_accounts + (duplicate,))
        lookup = state.account_ids_by_type()
        assert lookup[AccountType.PROFIT] == "acc-profit"
        assert len(lookup) == 5


class TestDefaults:
    """Tests for default bucket seeding."""

    def test_create_default_accounts(self):
        accounts = create_default_accounts()
        assert [acc.type for acc in accounts] == [bucket[1] for bucket in DEFAULT_BUCKETS]
        assert {acc.name for acc in accounts} == {
            "Real Revenue",
            "Company Profit",
            "Owner's Comp",
            "Tax/Zakat",
            "Operating Expense",
        }
        non_income = [acc for acc in accounts if acc.type != AccountType.INCOME]
        assert sum(acc.target_percentage for acc in non_income) == Decimal("100")
        assert all(acc.balance == 0 for acc in accounts)

    def test_default_accounts_get_fresh_ids(self):
        first = {acc.id for acc in create_default_accounts()}
        second = {acc.id for acc in create_default_accounts()}
        assert len(first) == 5
        assert first.isdisjoint(second)
