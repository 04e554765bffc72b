"""
Weekly review model
"""
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Boolean, Text, UniqueConstraint
from sqlalchemy.sql import func
from tradejournal.core.database import Base

class WeeklyReview(Base):
    """Trader's review of one Sunday-to-Saturday week"""
    __tablename__ = "weekly_reviews"
    __table_args__ = (UniqueConstraint("user_id", "week_start_date", name="uq_weekly_reviews_user_week"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)

    # Snapshot of the computed figures at save time
    total_trades = Column(Integer, nullable=True)
    win_rate = Column(Float, nullable=True)
    average_rr = Column(Float, nullable=True)
    profit_factor = Column(Float, nullable=True)
    best_trade_rr = Column(Float, nullable=True)
    worst_trade_rr = Column(Float, nullable=True)
    best_session = Column(String(20), nullable=True)
    best_entry_type = Column(String(50), nullable=True)

    insights = Column(Text, nullable=True)
    reviewed_all_trades = Column(Boolean, default=False)
    identified_improvements = Column(Text, nullable=True)
    plan_updated = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
