"""
Pydantic schemas for API request/response contracts.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorDetail(BaseModel):
    error_code: str
    message: str
    field: Optional[str] = None


class TradeInput(BaseModel):
    """Trade form values. Everything is optional so partially filled forms can be previewed."""
    model_config = ConfigDict(extra="ignore")

    trade_date: Optional[date] = None
    trade_time: Optional[str] = None
    exit_time: Optional[str] = None
    session: Optional[str] = None

    news_event: Optional[bool] = None
    news_details: Optional[str] = None
    h4_trend: Optional[str] = None
    h4_poi_type: Optional[str] = None
    h4_poi_price: Optional[float] = None
    h4_target_price: Optional[float] = None
    h4_notes: Optional[str] = None
    m15_choch: Optional[bool] = None
    m15_choch_price: Optional[float] = None
    m15_poi_type: Optional[str] = None
    m15_poi_price: Optional[float] = None
    m15_retracement: Optional[bool] = None
    m15_notes: Optional[str] = None
    m1_choch: Optional[bool] = None
    m1_entry_type: Optional[str] = None
    m1_entry_count: Optional[int] = Field(default=None, ge=0)
    m1_notes: Optional[str] = None

    direction: Optional[str] = None
    account_balance: Optional[float] = None
    entry_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    exit_price: Optional[float] = None
    risk_percent: Optional[float] = None
    break_even_applied: Optional[bool] = None
    exit_reason: Optional[str] = Field(default=None, max_length=100)

    pre_emotion: Optional[str] = Field(default=None, max_length=100)
    during_emotion: Optional[str] = Field(default=None, max_length=100)
    post_feeling: Optional[str] = Field(default=None, max_length=100)
    plan_followed: Optional[str] = Field(default=None, max_length=20)
    mistakes_made: Optional[str] = None
    lesson_learned: Optional[str] = None
    screenshot_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("trade_time", "exit_time", "session", "direction", "m1_entry_type")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class TradePreviewOut(BaseModel):
    day_of_week: Optional[str] = None
    suggested_session: Optional[str] = None
    risk_dollar: float = 0.0
    position_size: float = 0.0
    risk_reward_ratio: Optional[float] = None
    pl_dollar: Optional[float] = None
    pl_percent: Optional[float] = None
    trade_result: Optional[str] = None
    trade_duration: Optional[str] = None


class PositionSizeRequest(BaseModel):
    account_balance: Optional[float] = None
    risk_percent: Optional[float] = None
    entry_price: Optional[float] = None
    stop_loss: Optional[float] = None
    direction: str = "Long"


class PositionSizeOut(BaseModel):
    risk_amount: float = 0.0
    position_size: float = 0.0
    position_value: float = 0.0
    leverage: float = 0.0


class BucketOut(BaseModel):
    key: str
    trades: int
    wins: int
    losses: int
    win_rate: float
    total_pl: float
    average_rr: Optional[float] = None


class AnalyticsResponse(BaseModel):
    dimension: str
    buckets: List[BucketOut] = Field(default_factory=list)
    count: int = 0
    timestamp: str


class ProfileUpdate(BaseModel):
    account_balance: Optional[float] = None
    starting_balance: Optional[float] = None
    default_risk_percent: Optional[float] = None
    daily_risk_limit: Optional[float] = None
    timezone: Optional[str] = Field(default=None, max_length=64)


class WeeklyReviewNotes(BaseModel):
    insights: Optional[str] = None
    reviewed_all_trades: Optional[bool] = None
    identified_improvements: Optional[str] = None
    plan_updated: Optional[bool] = None


class WeeklyReviewOut(BaseModel):
    id: Optional[int] = None
    week_start_date: date
    week_end_date: date
    total_trades: int = 0
    win_rate: float = 0.0
    average_rr: float = 0.0
    profit_factor: float = 0.0
    best_trade_rr: Optional[float] = None
    worst_trade_rr: Optional[float] = None
    best_session: Optional[str] = None
    best_entry_type: Optional[str] = None
    insights: str = ""
    reviewed_all_trades: bool = False
    identified_improvements: str = ""
    plan_updated: bool = False


def error_detail(error_code: str, message: str, field: Optional[str] = None) -> Dict[str, Any]:
    return ErrorDetail(error_code=error_code, message=message, field=field).model_dump()
