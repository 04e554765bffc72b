"""
Aggregation of journal trades into per-category buckets and summary statistics
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from tradejournal.services.calculations import (
    LOSS,
    WIN,
    compute_profit_factor,
    compute_win_rate,
    parse_trade_date,
    to_number,
)

KeyFn = Union[str, Callable[[Any], Any]]

# API dimension name -> trade field
DIMENSIONS = {
    "session": "session",
    "entry-type": "m1_entry_type",
    "day-of-week": "day_of_week",
}


def trade_field(trade: Any, name: str) -> Any:
    """Read a field from a trade given as a mapping or as an object (ORM row)."""
    if isinstance(trade, Mapping):
        return trade.get(name)
    return getattr(trade, name, None)


def field_key(name: str) -> Callable[[Any], Any]:
    def key(trade: Any) -> Any:
        return trade_field(trade, name)
    return key


def closed_pl(trade: Any) -> Optional[float]:
    """P/L of a trade with a determined outcome, None otherwise."""
    return to_number(trade_field(trade, "pl_dollar"))


@dataclass
class Bucket:
    """Running totals for one categorical group"""
    count: int = 0
    wins: int = 0
    losses: int = 0
    pl_sum: float = 0.0
    rr_values: List[float] = field(default_factory=list)

    def add(self, pl_dollar: float, trade_result: Any, risk_reward_ratio: Optional[float]):
        self.count += 1
        self.pl_sum += pl_dollar
        if trade_result == WIN:
            self.wins += 1
        elif trade_result == LOSS:
            self.losses += 1
        if risk_reward_ratio is not None:
            self.rr_values.append(risk_reward_ratio)

    @property
    def win_rate(self) -> float:
        if self.count == 0:
            return 0.0
        return self.wins / self.count * 100

    @property
    def average_rr(self) -> Optional[float]:
        if not self.rr_values:
            return None
        return float(np.mean(self.rr_values))

    def to_dict(self) -> Dict[str, Any]:
        average_rr = self.average_rr
        return {
            "trades": self.count,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": round(self.win_rate, 2),
            "total_pl": round(self.pl_sum, 2),
            "average_rr": round(average_rr, 3) if average_rr is not None else None,
        }


def aggregate_by(trades: Iterable[Any], key_fn: KeyFn) -> Dict[str, Bucket]:
    """
    Group closed trades by a categorical key and fold each group into a Bucket

    Args:
        trades: Trade records (mappings or objects)
        key_fn: Callable extracting the key from a trade, or a field name

    Returns:
        Buckets keyed by category, in first-seen order. Trades without a
        numeric ``pl_dollar``, with an empty key, or whose key cannot be read
        are left out.
    """
    if isinstance(key_fn, str):
        key_fn = field_key(key_fn)

    buckets: Dict[str, Bucket] = {}
    for trade in trades or ():
        pl_dollar = closed_pl(trade)
        if pl_dollar is None:
            continue
        try:
            key = key_fn(trade)
        except (AttributeError, KeyError, TypeError, ValueError):
            continue
        if key is None:
            continue
        key = str(key)
        if not key.strip():
            continue

        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket()
        bucket.add(
            pl_dollar,
            trade_field(trade, "trade_result"),
            to_number(trade_field(trade, "risk_reward_ratio")),
        )
    return buckets


def by_session(trades: Iterable[Any]) -> Dict[str, Bucket]:
    return aggregate_by(trades, DIMENSIONS["session"])


def by_entry_type(trades: Iterable[Any]) -> Dict[str, Bucket]:
    return aggregate_by(trades, DIMENSIONS["entry-type"])


def by_day_of_week(trades: Iterable[Any]) -> Dict[str, Bucket]:
    return aggregate_by(trades, DIMENSIONS["day-of-week"])


def sort_buckets(
    buckets: Mapping[str, Bucket],
    key: str = "pl_sum",
    descending: bool = True,
) -> List[Tuple[str, Bucket]]:
    """Order buckets for display. Buckets without a value (e.g. no R:R) go last."""
    def sort_value(item: Tuple[str, Bucket]) -> float:
        value = getattr(item[1], key)
        if value is None:
            return -math.inf if descending else math.inf
        return value

    return sorted(buckets.items(), key=sort_value, reverse=descending)


@dataclass
class TradeSummary:
    """Dashboard statistics over a user's trades"""
    total_trades: int = 0
    completed_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    total_pl: float = 0.0
    total_pl_percent: float = 0.0
    average_rr: float = 0.0
    profit_factor: float = 0.0
    best_streak: int = 0
    current_streak_count: int = 0
    current_streak_type: str = "W"
    largest_win: float = 0.0
    largest_loss: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _rr_values(trades: Iterable[Any]) -> List[float]:
    values = (to_number(trade_field(trade, "risk_reward_ratio")) for trade in trades)
    return [value for value in values if value is not None]


def _gross_totals(completed: List[Any]) -> Tuple[float, float]:
    total_wins = sum(closed_pl(t) for t in completed if trade_field(t, "trade_result") == WIN)
    total_losses = abs(sum(closed_pl(t) for t in completed if trade_field(t, "trade_result") == LOSS))
    return total_wins, total_losses


def summarize_trades(trades: Iterable[Any]) -> TradeSummary:
    """
    Compute dashboard statistics

    Args:
        trades: Trades ordered most recent first, as the journal lists them

    Returns:
        TradeSummary; open trades count toward ``total_trades`` only
    """
    trades = list(trades or ())
    completed = [trade for trade in trades if closed_pl(trade) is not None]
    if not completed:
        return TradeSummary(total_trades=len(trades))

    results = [trade_field(trade, "trade_result") for trade in completed]
    pls = [closed_pl(trade) for trade in completed]
    wins = results.count(WIN)
    losses = results.count(LOSS)
    total_wins, total_losses = _gross_totals(completed)
    rr_values = _rr_values(completed)

    # Longest run of wins or losses, walking oldest to newest
    best_streak = 0
    run_wins = 0
    run_losses = 0
    for result in reversed(results):
        if result == WIN:
            run_wins += 1
            run_losses = 0
            best_streak = max(best_streak, run_wins)
        elif result == LOSS:
            run_losses += 1
            run_wins = 0
            best_streak = max(best_streak, run_losses)

    streak_type = "W" if results[0] == WIN else "L"
    streak_result = WIN if streak_type == "W" else LOSS
    current_streak = 0
    for result in results:
        if result != streak_result:
            break
        current_streak += 1

    return TradeSummary(
        total_trades=len(trades),
        completed_trades=len(completed),
        wins=wins,
        losses=losses,
        win_rate=compute_win_rate(wins, len(completed)),
        total_pl=round(sum(pls), 2),
        total_pl_percent=round(sum(to_number(trade_field(t, "pl_percent")) or 0.0 for t in completed), 2),
        average_rr=round(float(np.mean(rr_values)), 3) if rr_values else 0.0,
        profit_factor=compute_profit_factor(total_wins, total_losses),
        best_streak=best_streak,
        current_streak_count=current_streak,
        current_streak_type=streak_type,
        largest_win=max(pls + [0.0]),
        largest_loss=min(pls + [0.0]),
    )


def _best_key(buckets: Mapping[str, Bucket]) -> Optional[str]:
    ordered = sort_buckets(buckets)
    return ordered[0][0] if ordered else None


def weekly_review_figures(trades: Iterable[Any]) -> Dict[str, Any]:
    """Computed part of a weekly review for the trades of one week"""
    trades = list(trades or ())
    completed = [trade for trade in trades if closed_pl(trade) is not None]
    results = [trade_field(trade, "trade_result") for trade in completed]
    total_wins, total_losses = _gross_totals(completed)
    rr_values = _rr_values(completed)

    return {
        "total_trades": len(trades),
        "win_rate": compute_win_rate(results.count(WIN), len(completed)),
        "average_rr": round(float(np.mean(rr_values)), 3) if rr_values else 0.0,
        "profit_factor": compute_profit_factor(total_wins, total_losses),
        "best_trade_rr": max(rr_values) if rr_values else None,
        "worst_trade_rr": min(rr_values) if rr_values else None,
        "best_session": _best_key(by_session(completed)),
        "best_entry_type": _best_key(by_entry_type(completed)),
    }


def daily_pnl(trades: Iterable[Any]) -> pd.Series:
    """Closed P/L summed per trade date, oldest first."""
    rows = []
    for trade in trades or ():
        pl_dollar = closed_pl(trade)
        trade_date = parse_trade_date(trade_field(trade, "trade_date"))
        if pl_dollar is None or trade_date is None:
            continue
        rows.append((trade_date, pl_dollar))

    if not rows:
        return pd.Series(dtype=float, name="pl_dollar")
    frame = pd.DataFrame(rows, columns=["trade_date", "pl_dollar"])
    return frame.groupby("trade_date")["pl_dollar"].sum().sort_index()


def equity_curve(trades: Iterable[Any], starting_balance: float) -> pd.Series:
    """Account balance at the end of each trading day."""
    daily = daily_pnl(trades)
    return (daily.cumsum() + float(starting_balance)).rename("balance")
