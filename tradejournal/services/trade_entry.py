"""
Trade entry validation and derived-field enrichment
"""
from typing import Any, Dict, Iterable, Mapping, Optional

from tradejournal.core.config import settings
from tradejournal.services.calculations import (
    LONG,
    SHORT,
    SESSIONS,
    classify_result,
    compute_duration,
    compute_pnl,
    compute_position_size,
    compute_risk_dollar,
    compute_risk_reward_ratio,
    day_of_week,
    normalize_direction,
    parse_clock,
    parse_trade_date,
    to_number,
)

POSITION_SIZE_DECIMALS = 8

OUTCOME_FIELDS = ("pl_dollar", "pl_percent", "trade_result", "trade_duration")

# Checked in this order; the first missing field is reported.
REQUIRED_FIELDS = (
    ("trade_date", "Please fill in trade date"),
    ("trade_time", "Please fill in trade time"),
    ("session", "Please select a trading session"),
    ("account_balance", "Please fill in account balance"),
    ("direction", "Please select trade direction"),
    ("entry_price", "Please fill in entry price"),
    ("stop_loss", "Please fill in stop loss"),
    ("risk_percent", "Please select risk percentage"),
)

NUMERIC_FIELDS = {"account_balance", "entry_price", "stop_loss", "risk_percent"}


class TradeValidationError(ValueError):
    """Raised when a trade entry cannot be submitted"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def _is_blank(field: str, value: Any) -> bool:
    if field in NUMERIC_FIELDS:
        return not to_number(value)
    if isinstance(value, str):
        return not value.strip()
    return value is None


def validate_trade_entry(data: Mapping[str, Any], allowed_risk_percents: Optional[Iterable[float]] = None):
    """
    Gate run before a trade is accepted for storage

    Args:
        data: Raw trade form values
        allowed_risk_percents: Risk percent choices; defaults to configuration

    Raises:
        TradeValidationError: with the first failing rule's message
    """
    for field, message in REQUIRED_FIELDS:
        if _is_blank(field, data.get(field)):
            raise TradeValidationError(message, field)

    if parse_trade_date(data["trade_date"]) is None:
        raise TradeValidationError("Trade date must be a valid YYYY-MM-DD date", "trade_date")

    if parse_clock(data["trade_time"]) is None:
        raise TradeValidationError("Trade time must be a valid HH:MM time", "trade_time")

    if data["session"] not in SESSIONS:
        raise TradeValidationError(f"Session must be one of: {', '.join(SESSIONS)}", "session")

    direction = normalize_direction(data["direction"])
    if direction is None:
        raise TradeValidationError("Direction must be Long or Short", "direction")

    balance = to_number(data["account_balance"])
    if balance < 0:
        raise TradeValidationError("Account balance cannot be negative", "account_balance")

    if allowed_risk_percents is None:
        allowed_risk_percents = settings.get_allowed_risk_percents()
    allowed = sorted(float(item) for item in allowed_risk_percents)
    if to_number(data["risk_percent"]) not in allowed:
        choices = ", ".join(f"{item:g}" for item in allowed)
        raise TradeValidationError(f"Risk percentage must be one of: {choices}", "risk_percent")

    entry = to_number(data["entry_price"])
    stop = to_number(data["stop_loss"])
    if direction == LONG and stop >= entry:
        raise TradeValidationError("For long trades, stop loss must be below entry price", "stop_loss")
    if direction == SHORT and stop <= entry:
        raise TradeValidationError("For short trades, stop loss must be above entry price", "stop_loss")

    exit_time = data.get("exit_time")
    if not _is_blank("exit_time", exit_time) and parse_clock(exit_time) is None:
        raise TradeValidationError("Exit time must be a valid HH:MM time", "exit_time")


def enrich_trade(
    data: Mapping[str, Any],
    tolerance: Optional[float] = None,
    wrap_overnight: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with every derived field recomputed

    Outcome fields are only filled once an exit price is known; until then
    they are None. P&L and result also stay None while the direction or the
    position size is missing. P&L is classified before it is rounded for storage.
    """
    if tolerance is None:
        tolerance = settings.BREAK_EVEN_TOLERANCE
    if wrap_overnight is None:
        wrap_overnight = settings.WRAP_OVERNIGHT_DURATION

    enriched = dict(data)
    enriched["day_of_week"] = day_of_week(data.get("trade_date"))

    direction = normalize_direction(data.get("direction"))
    if direction is not None:
        enriched["direction"] = direction

    entry = data.get("entry_price")
    stop = data.get("stop_loss")
    risk_dollar = compute_risk_dollar(data.get("account_balance"), data.get("risk_percent"))
    position_size = round(compute_position_size(risk_dollar, entry, stop), POSITION_SIZE_DECIMALS)

    enriched["risk_dollar"] = round(risk_dollar, 2)
    enriched["position_size"] = position_size
    enriched["risk_reward_ratio"] = compute_risk_reward_ratio(entry, data.get("take_profit"), stop, direction)

    if to_number(data.get("exit_price")) is None:
        for field in OUTCOME_FIELDS:
            enriched[field] = None
        return enriched

    enriched["trade_duration"] = compute_duration(data.get("trade_time"), data.get("exit_time"), wrap_overnight)

    # No direction or no size: there is no P&L to classify yet
    if direction is None or position_size <= 0:
        enriched["pl_dollar"] = enriched["pl_percent"] = enriched["trade_result"] = None
        return enriched

    pnl = compute_pnl(entry, data.get("exit_price"), position_size, direction)
    enriched["pl_dollar"] = round(pnl.dollar_pnl, 2)
    enriched["pl_percent"] = round(pnl.percent_pnl, 2)
    enriched["trade_result"] = classify_result(pnl.dollar_pnl, tolerance)
    return enriched
