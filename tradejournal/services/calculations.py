"""
Trade economics calculations: risk sizing, P&L, result classification and duration.

Every function here is total. Journal forms call them on each keystroke with
partially filled inputs, so missing or non-numeric values resolve to 0 or None
instead of raising. Whether a trade may be submitted is decided separately in
``tradejournal.services.trade_entry``.
"""
import math
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Dict, NamedTuple, Optional

LONG = "Long"
SHORT = "Short"
DIRECTIONS = (LONG, SHORT)

LONDON_CLOSE = "London Close"
NY_SESSION = "NY Session"
ASIAN_SESSION = "Asian Session"
SESSIONS = (LONDON_CLOSE, NY_SESSION, ASIAN_SESSION)

WIN = "Win"
LOSS = "Loss"
BREAK_EVEN = "Break Even"
TRADE_RESULTS = (WIN, LOSS, BREAK_EVEN)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Shown instead of an infinite profit factor when there are no losing trades.
PROFIT_FACTOR_CAP = 999.99

MINUTES_PER_DAY = 24 * 60


class PnL(NamedTuple):
    """Realized profit and loss of a closed trade"""
    dollar_pnl: float
    percent_pnl: float


@dataclass
class PositionSizing:
    """Result of the stand-alone position size calculator"""
    risk_amount: float = 0.0
    position_size: float = 0.0
    position_value: float = 0.0
    leverage: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def to_number(value: Any) -> Optional[float]:
    """Coerce a form value to a finite float, or None when it is not usable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_direction(value: Any) -> Optional[str]:
    """Map case-insensitive direction input onto ``Long``/``Short``."""
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    for direction in DIRECTIONS:
        if lowered == direction.lower():
            return direction
    return None


def compute_risk_dollar(account_balance: Any, risk_percent: Any) -> float:
    """
    Convert the risk percent into a currency amount against the account balance

    Args:
        account_balance: Account balance at the time of the trade
        risk_percent: Percent of the balance put at risk (1 means 1%)

    Returns:
        ``account_balance * risk_percent / 100``, or 0 while either input is
        missing, zero or out of range
    """
    balance = to_number(account_balance)
    percent = to_number(risk_percent)
    if balance is None or percent is None or balance <= 0 or percent <= 0:
        return 0.0
    return balance * percent / 100


def compute_position_size(risk_dollar: Any, entry_price: Any, stop_loss: Any) -> float:
    """
    Quantity such that hitting the stop loses exactly ``risk_dollar``

    A zero entry/stop distance is a normal mid-entry state and yields 0.
    """
    risk = to_number(risk_dollar)
    entry = to_number(entry_price)
    stop = to_number(stop_loss)
    if risk is None or entry is None or stop is None or risk <= 0:
        return 0.0
    distance = abs(entry - stop)
    if distance == 0:
        return 0.0
    return risk / distance


def compute_risk_reward_ratio(
    entry_price: Any,
    take_profit: Any,
    stop_loss: Any,
    direction: Optional[str] = None,
) -> Optional[float]:
    """
    Reward side N of a ``1:N`` risk:reward ratio, rounded to 2 decimals

    Args:
        entry_price: Entry price
        take_profit: Take profit price
        stop_loss: Stop loss price
        direction: Trade direction; accepted for symmetry, magnitude does not
            depend on it

    Returns:
        The ratio, 0 when the risk distance is zero, None when the take profit
        or stop loss is not set
    """
    entry = to_number(entry_price)
    target = to_number(take_profit)
    stop = to_number(stop_loss)
    if entry is None or target is None or stop is None:
        return None
    risk_distance = abs(entry - stop)
    if risk_distance == 0:
        return 0.0
    reward_distance = abs(target - entry)
    return round(reward_distance / risk_distance, 2)


def compute_pnl(entry_price: Any, exit_price: Any, position_size: Any, direction: Any) -> PnL:
    """
    Realized P&L in dollars and as a percent of the position notional

    Values are not rounded; round for display only after classification.
    """
    entry = to_number(entry_price)
    exit_ = to_number(exit_price)
    size = to_number(position_size)
    side = normalize_direction(direction)
    if entry is None or exit_ is None or size is None or side is None:
        return PnL(0.0, 0.0)

    if side == LONG:
        dollar_pnl = (exit_ - entry) * size
    else:
        dollar_pnl = (entry - exit_) * size

    notional = abs(entry * size)
    percent_pnl = dollar_pnl / notional * 100 if notional != 0 else 0.0
    return PnL(dollar_pnl, percent_pnl)


def classify_result(dollar_pnl: Any, tolerance: float = 0.0) -> Optional[str]:
    """
    Classify a P&L as Win, Loss or Break Even

    With the default tolerance of 0 this is an exact comparison against zero.
    A positive tolerance treats ``|dollar_pnl| <= tolerance`` as Break Even.
    Returns None when there is no numeric P&L to classify.
    """
    value = to_number(dollar_pnl)
    if value is None:
        return None
    band = abs(to_number(tolerance) or 0.0)
    if value > band:
        return WIN
    if value < -band:
        return LOSS
    return BREAK_EVEN


def parse_clock(value: Any) -> Optional[int]:
    """Minutes since midnight for an ``HH:MM`` (or ``HH:MM:SS``) string, None otherwise."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    if not all(part.isdigit() and len(part) <= 2 for part in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if not (hours < 24 and minutes < 60 and seconds < 60):
        return None
    return hours * 60 + minutes


def format_minutes(total_minutes: int) -> str:
    hours, minutes = divmod(int(total_minutes), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def compute_duration(entry_time: Any, exit_time: Any, wrap_overnight: bool = True) -> Optional[str]:
    """
    Elapsed time between two local ``HH:MM`` clock readings

    Both readings carry no date. When the exit reads earlier than the entry the
    trade is taken to have crossed midnight and 24h are added; with
    ``wrap_overnight=False`` that case is treated as invalid input instead.

    Returns:
        ``"Xh Ym"`` or ``"Ym"``, or None when either time is unusable
    """
    start = parse_clock(entry_time)
    end = parse_clock(exit_time)
    if start is None or end is None:
        return None
    elapsed = end - start
    if elapsed < 0:
        if not wrap_overnight:
            return None
        elapsed += MINUTES_PER_DAY
    return format_minutes(elapsed)


def compute_win_rate(wins: Any, total_trades: Any) -> float:
    """Win percentage rounded to 2 decimals; 0 for an empty sample."""
    won = to_number(wins) or 0.0
    total = to_number(total_trades) or 0.0
    if total <= 0:
        return 0.0
    return round(won / total * 100, 2)


def compute_profit_factor(total_wins: Any, total_losses: Any) -> float:
    """Gross profit over gross loss, rounded to 3 decimals"""
    gains = to_number(total_wins) or 0.0
    losses = abs(to_number(total_losses) or 0.0)
    if losses == 0:
        return PROFIT_FACTOR_CAP if gains > 0 else 0.0
    return round(gains / losses, 3)


def session_from_time(trade_time: Any) -> Optional[str]:
    """Trading session for a local ``HH:MM`` time."""
    minutes = parse_clock(trade_time)
    if minutes is None:
        return None
    hour = minutes // 60
    if 20 <= hour < 22:
        return LONDON_CLOSE
    if hour >= 22 or hour < 2:
        return NY_SESSION
    return ASIAN_SESSION


def parse_trade_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def day_of_week(trade_date: Any) -> Optional[str]:
    """English weekday name for a trade date (``date`` or ``YYYY-MM-DD``)."""
    parsed = parse_trade_date(trade_date)
    if parsed is None:
        return None
    return WEEKDAYS[parsed.weekday()]


def size_position(
    account_balance: Any,
    risk_percent: Any,
    entry_price: Any,
    stop_loss: Any,
    direction: Any,
) -> PositionSizing:
    """
    Stand-alone position size calculator

    Unlike ``compute_position_size`` this is direction aware: a stop on the
    wrong side of the entry yields a zero position while still reporting the
    risk amount.
    """
    entry = to_number(entry_price)
    stop = to_number(stop_loss)
    if not entry or not stop:
        return PositionSizing()

    risk_amount = compute_risk_dollar(account_balance, risk_percent)
    side = normalize_direction(direction)
    if side == LONG:
        price_diff = entry - stop
    elif side == SHORT:
        price_diff = stop - entry
    else:
        price_diff = 0.0

    if price_diff <= 0:
        return PositionSizing(risk_amount=risk_amount)

    size = risk_amount / price_diff
    value = size * entry
    balance = to_number(account_balance) or 0.0
    leverage = value / balance if balance > 0 else 0.0
    return PositionSizing(
        risk_amount=risk_amount,
        position_size=size,
        position_value=value,
        leverage=leverage,
    )
