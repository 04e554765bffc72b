"""
Trade model for database storage
"""
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Boolean, Text
from sqlalchemy.sql import func
from tradejournal.core.database import Base

class Trade(Base):
    """Journal trade"""
    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    # Timing
    trade_date = Column(Date, nullable=False, index=True)
    trade_time = Column(String(8), nullable=False)  # HH:MM local time
    exit_time = Column(String(8), nullable=True)
    day_of_week = Column(String(10), nullable=True)  # derived from trade_date
    session = Column(String(20), nullable=False)  # London Close, NY Session, Asian Session

    # Context
    news_event = Column(Boolean, default=False)
    news_details = Column(Text, nullable=True)
    h4_trend = Column(String(20), nullable=True)  # Bullish, Bearish, Ranging
    h4_poi_type = Column(String(30), nullable=True)  # Order Block, FVG, Liquidity Pool
    h4_poi_price = Column(Float, nullable=True)
    h4_target_price = Column(Float, nullable=True)
    h4_notes = Column(Text, nullable=True)
    m15_choch = Column(Boolean, nullable=True)
    m15_choch_price = Column(Float, nullable=True)
    m15_poi_type = Column(String(30), nullable=True)  # Order Block, FVG, Both
    m15_poi_price = Column(Float, nullable=True)
    m15_retracement = Column(Boolean, nullable=True)
    m15_notes = Column(Text, nullable=True)
    m1_choch = Column(Boolean, nullable=True)
    m1_entry_type = Column(String(50), nullable=True, index=True)
    m1_entry_count = Column(Integer, nullable=True)
    m1_notes = Column(Text, nullable=True)

    # Economics
    direction = Column(String(5), nullable=False)  # Long or Short
    account_balance = Column(Float, nullable=False)
    entry_price = Column(Float, nullable=False)
    stop_loss = Column(Float, nullable=False)
    take_profit = Column(Float, nullable=True)
    exit_price = Column(Float, nullable=True)
    risk_percent = Column(Float, nullable=False)
    risk_dollar = Column(Float, nullable=False, default=0.0)
    position_size = Column(Float, nullable=False, default=0.0)
    risk_reward_ratio = Column(Float, nullable=True)
    break_even_applied = Column(Boolean, default=False)
    exit_reason = Column(String(100), nullable=True)

    # Outcome, NULL until exit_price is known
    pl_dollar = Column(Float, nullable=True)
    pl_percent = Column(Float, nullable=True)
    trade_result = Column(String(10), nullable=True)  # Win, Loss, Break Even
    trade_duration = Column(String(20), nullable=True)

    # Psychology
    pre_emotion = Column(String(100), nullable=True)
    during_emotion = Column(String(100), nullable=True)
    post_feeling = Column(String(100), nullable=True)
    plan_followed = Column(String(20), nullable=True)
    mistakes_made = Column(Text, nullable=True)
    lesson_learned = Column(Text, nullable=True)
    screenshot_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
