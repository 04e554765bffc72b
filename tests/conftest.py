import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradejournal.core.database import Base
import tradejournal.models  # noqa: F401


@pytest.fixture
def session_factory(monkeypatch):
    """Point every service at a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    for module in ("trade_service", "profile_service", "review_service"):
        monkeypatch.setattr(f"tradejournal.services.{module}.SessionLocal", factory)
    yield factory
    engine.dispose()


@pytest.fixture
def long_entry():
    return {
        "trade_date": "2024-03-15",
        "trade_time": "21:15",
        "session": "London Close",
        "account_balance": 10000,
        "direction": "Long",
        "entry_price": 50000,
        "stop_loss": 49000,
        "take_profit": 53000,
        "risk_percent": 1,
        "m1_entry_type": "Breaker",
    }
