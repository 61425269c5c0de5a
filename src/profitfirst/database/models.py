"""SQLAlchemy models for the profitfirst store.

Column names are snake_case; ``mappers`` translates rows to domain entities.
Every owner-scoped table carries ``user_id``. Allocations are scoped through
their parent transaction.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Profile(Base):
    """Per-owner preferences."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    currency_symbol = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class BankAccount(Base):
    """Bank account metadata model."""

    __tablename__ = "bank_accounts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    bank_name = Column(String, nullable=False)
    branch_name = Column(String, nullable=False, default="")
    account_number = Column(String, nullable=False, default="")
    account_type = Column(String, nullable=False, default="")
    routing_number = Column(String, nullable=True)
    swift_code = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class Account(Base):
    """Profit First bucket model."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    target_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    current_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    bank_account_id = Column(String, ForeignKey("bank_accounts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    bank_account = relationship("BankAccount")


class Transaction(Base):
    """Income allocation transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    description = Column(String, nullable=False, default="")
    total_amount = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    allocations = relationship(
        "TransactionAllocation",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionAllocation.id",
    )


class TransactionAllocation(Base):
    """Allocation line item model.

    Has no natural key; re-imports replace all rows of a transaction.
    """

    __tablename__ = "transaction_allocations"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(String, ForeignKey("transactions.id"), nullable=False, index=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)

    transaction = relationship("Transaction", back_populates="allocations")
    account = relationship("Account")


class ProfitDistribution(Base):
    """Profit distribution model."""

    __tablename__ = "profit_distributions"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    quarter = Column(String, nullable=False)
    total_profit = Column(Numeric(14, 2), nullable=False)
    distribution_amount = Column(Numeric(14, 2), nullable=False)
    to_owners = Column(Numeric(14, 2), nullable=False)
    to_company = Column(Numeric(14, 2), nullable=False)
    notes = Column(String, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
