"""Shared pytest fixtures for profitfirst tests."""

import tempfile
import os
from datetime import datetime, UTC
from decimal import Decimal
from pathlib import Path
import pytest

from profitfirst.database.factories import create_local_cache, create_sqlite_database
from profitfirst.domain.entities import (
    Account,
    AccountType,
    Allocation,
    AppState,
    BankAccount,
    ProfitDistribution,
    Transaction,
)
from profitfirst.domain.importer import ImportService
from profitfirst.domain.ledger import LedgerService
from profitfirst.domain.repository import LocalStateRepository, RemoteStateRepository

OWNER = "owner-1"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def cache(tmp_path):
    """Create a local cache backed by a temporary file."""
    return create_local_cache(cache_path=str(tmp_path / "local-cache.json"))


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


@pytest.fixture
def remote_ledger(temp_db):
    """Create a LedgerService backed by the temporary database."""
    return LedgerService(RemoteStateRepository(temp_db, OWNER))


@pytest.fixture
def local_ledger(cache):
    """Create a LedgerService backed by the local cache."""
    return LedgerService(LocalStateRepository(cache))


@pytest.fixture
def sample_accounts():
    """One account per bucket type with fixed ids."""
    return (
        Account(id="acc-income", name="Real Revenue", type=AccountType.INCOME),
        Account(
            id="acc-profit",
            name="Company Profit",
            type=AccountType.PROFIT,
            target_percentage=Decimal("40"),
        ),
        Account(
            id="acc-owners",
            name="Owner's Comp",
            type=AccountType.OWNERS_COMP,
            target_percentage=Decimal("20"),
        ),
        Account(
            id="acc-tax",
            name="Tax/Zakat",
            type=AccountType.TAX,
            target_percentage=Decimal("10"),
        ),
        Account(
            id="acc-opex",
            name="Operating Expense",
            type=AccountType.OPEX,
            target_percentage=Decimal("30"),
        ),
    )


@pytest.fixture
def sample_state(sample_accounts):
    """A small working set: one allocated transaction, one distribution, one bank account."""
    transaction = Transaction(
        id="tx-1",
        date=datetime(2024, 3, 15, tzinfo=UTC),
        description="Mar 2024 Revenue",
        total_amount=Decimal("1000"),
        allocations=(
            Allocation("acc-profit", Decimal("400")),
            Allocation("acc-owners", Decimal("200")),
            Allocation("acc-tax", Decimal("100")),
            Allocation("acc-opex", Decimal("300")),
        ),
    )
    balances = {
        "acc-profit": Decimal("300"),
        "acc-owners": Decimal("200"),
        "acc-tax": Decimal("100"),
        "acc-opex": Decimal("300"),
    }
    accounts = tuple(
        Account(
            id=acc.id,
            name=acc.name,
            type=acc.type,
            target_percentage=acc.target_percentage,
            balance=balances.get(acc.id, Decimal("0")),
            bank_account_id="bank-1" if acc.type == AccountType.PROFIT else None,
        )
        for acc in sample_accounts
    )
    distribution = ProfitDistribution(
        id="dist-1",
        date=datetime(2024, 3, 31, tzinfo=UTC),
        quarter="Q1 2024",
        total_profit=Decimal("200"),
        distribution_amount=Decimal("100"),
        to_owners=Decimal("50"),
        to_company=Decimal("50"),
        notes="Q1 2024 Distribution",
        is_completed=True,
    )
    bank_account = BankAccount(
        id="bank-1",
        bank_name="City Bank",
        branch_name="Gulshan",
        account_number="0012345",
        account_type="savings",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )
    return AppState(
        currency_symbol="BDT",
        accounts=accounts,
        transactions=(transaction,),
        bank_accounts=(bank_account,),
        profit_distributions=(distribution,),
    )


@pytest.fixture
def sample_payload():
    """A valid import payload in the export format."""
    return {
        "accounts": [
            {"id": "a-income", "name": "Real Revenue", "type": "INCOME", "targetPercentage": 0, "balance": 0},
            {"id": "a-profit", "name": "Company Profit", "type": "PROFIT", "targetPercentage": 40, "balance": 400},
            {"id": "a-owners", "name": "Owner's Comp", "type": "OWNERS_COMP", "targetPercentage": 20, "balance": 200},
            {"id": "a-tax", "name": "Tax/Zakat", "type": "TAX", "targetPercentage": 10, "balance": 100},
            {"id": "a-opex", "name": "Operating Expense", "type": "OPEX", "targetPercentage": 30, "balance": 300},
        ],
        "transactions": [
            {
                "id": "tx-2024-03-15",
                "date": "2024-03-15T00:00:00.000Z",
                "description": "Mar 2024 Revenue",
                "totalAmount": 1000,
                "allocations": [
                    {"accountId": "a-profit", "amount": 400},
                    {"accountId": "a-owners", "amount": 200},
                    {"accountId": "a-tax", "amount": 100},
                    {"accountId": "a-opex", "amount": 300},
                ],
            }
        ],
        "profitDistributions": [
            {
                "id": "dist-2024-q1",
                "date": "2024-03-31T00:00:00.000Z",
                "quarter": "Q1 2024",
                "totalProfit": 400,
                "distributionAmount": 200,
                "toOwners": 100,
                "toCompany": 100,
                "isCompleted": True,
            }
        ],
        "bankAccounts": [],
        "currencySymbol": "BDT",
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
