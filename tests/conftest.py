"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before and dropped after every
test, so each test starts from empty books.
"""

import os

# Must be set before ledger_core.config is imported
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ledger_core.main import app
from ledger_core.models.base import Base, get_db
from ledger_core.models.enums import LedgerGroup
from ledger_core.schemas.ledger import LedgerAccountCreate
from ledger_core.services.ledger_service import LedgerService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def chart(db_session):
    """
    A small chart of accounts, committed. 1000 Cash is the only
    cash account.

    Returns a dict of code -> LedgerAccount.
    """
    service = LedgerService(db_session)
    rows = [
        ("1000", "Cash", LedgerGroup.ASSET),
        ("1200", "Accounts Receivable", LedgerGroup.ASSET),
        ("2000", "Accounts Payable", LedgerGroup.LIABILITY),
        ("3000", "Owner's Capital", LedgerGroup.EQUITY),
        ("4000", "Sales Revenue", LedgerGroup.INCOME),
        ("4500", "Interest Revenue", LedgerGroup.REVENUE),
        ("5400", "Office Supplies", LedgerGroup.EXPENSE),
        ("6040", "Rent Expense", LedgerGroup.EXPENSE),
    ]
    accounts = {
        code: service.create_account(LedgerAccountCreate(
            code=code, name=name, ledger_group=group, is_cash=code == "1000",
        ))
        for code, name, group in rows
    }
    db_session.commit()
    return accounts
