"""
User profile model holding per-user account defaults.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func

from tradejournal.core.database import Base


class UserProfile(Base):
    """Account settings for one journal user."""

    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    account_balance = Column(Float, nullable=False)
    starting_balance = Column(Float, nullable=False)
    default_risk_percent = Column(Float, nullable=False)
    daily_risk_limit = Column(Float, nullable=False)
    timezone = Column(String(64), nullable=False, default="UTC")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
