from datetime import date

import pytest
from fastapi import HTTPException

from tradejournal.api import routes
from tradejournal.api.schemas import PositionSizeRequest, ProfileUpdate, TradeInput, WeeklyReviewNotes
from tradejournal.core.config import settings
from tradejournal.services.profile_service import ProfileService
from tradejournal.services.review_service import WeeklyReviewService
from tradejournal.services.trade_service import TradeJournalService


class StubTradeService:
    def __init__(self, trades):
        self.trades = trades
        self.calls = []

    def list_trades(self, user_id, filters=None, start_date=None, end_date=None, limit=None):
        self.calls.append({"user_id": user_id, "filters": filters, "limit": limit})
        return self.trades


class FailingTradeService:
    def list_trades(self, *args, **kwargs):
        raise RuntimeError("database is locked")


@pytest.fixture
def journal_services(session_factory, monkeypatch):
    trade_service = TradeJournalService()
    monkeypatch.setattr(routes, "trade_service", trade_service)
    monkeypatch.setattr(routes, "profile_service", ProfileService())
    monkeypatch.setattr(routes, "review_service", WeeklyReviewService(trade_service))
    return trade_service


@pytest.mark.asyncio
async def test_preview_trade_returns_derived_fields():
    payload = await routes.preview_trade(
        TradeInput(
            trade_date=date(2024, 3, 15),
            trade_time="21:15",
            exit_time="23:45",
            account_balance=10000,
            direction="Long",
            entry_price=50000,
            stop_loss=49000,
            take_profit=53000,
            exit_price=51000,
            risk_percent=1,
        )
    )
    assert payload["day_of_week"] == "Friday"
    assert payload["suggested_session"] == "London Close"
    assert payload["risk_dollar"] == 100.0
    assert payload["risk_reward_ratio"] == 3.0
    assert payload["pl_dollar"] == 100.0
    assert payload["trade_result"] == "Win"
    assert payload["trade_duration"] == "2h 30m"


@pytest.mark.asyncio
async def test_preview_of_empty_form_is_zeroed():
    payload = await routes.preview_trade(TradeInput(trade_time="  "))
    assert payload["risk_dollar"] == 0.0
    assert payload["position_size"] == 0.0
    assert payload["suggested_session"] is None
    assert payload["pl_dollar"] is None


@pytest.mark.asyncio
async def test_preview_without_direction_has_no_result():
    payload = await routes.preview_trade(
        TradeInput(account_balance=1000, risk_percent=1, entry_price=100, stop_loss=90, exit_price=80)
    )
    assert payload["position_size"] == 1.0
    assert payload["pl_dollar"] is None
    assert payload["trade_result"] is None


@pytest.mark.asyncio
async def test_position_size_calculator():
    payload = await routes.calculate_position_size(
        PositionSizeRequest(account_balance=10000, risk_percent=2, entry_price=100, stop_loss=110, direction="Short")
    )
    assert payload["risk_amount"] == 200.0
    assert payload["position_size"] == pytest.approx(20.0)


@pytest.mark.asyncio
async def test_trade_routes_require_trade_service(monkeypatch):
    monkeypatch.setattr(routes, "trade_service", None)
    with pytest.raises(HTTPException) as exc:
        await routes.list_trades(user_id="user-1")
    assert exc.value.status_code == 503


@pytest.mark.asyncio
async def test_create_trade_rejects_invalid_entry(journal_services, long_entry):
    long_entry["stop_loss"] = 51000
    with pytest.raises(HTTPException) as exc:
        await routes.create_trade(TradeInput(**long_entry), user_id="user-1")
    assert exc.value.status_code == 422
    assert exc.value.detail["error_code"] == "trade.invalid"
    assert exc.value.detail["field"] == "stop_loss"


@pytest.mark.asyncio
async def test_trade_lifecycle(journal_services, long_entry):
    created = await routes.create_trade(TradeInput(**long_entry), user_id="user-1")
    trade_id = created["id"]

    updated = await routes.update_trade(trade_id, TradeInput(exit_price=51000, exit_time="22:15"), user_id="user-1")
    assert updated["trade_result"] == "Win"
    assert updated["trade_duration"] == "1h 0m"

    listed = await routes.list_trades(user_id="user-1", trade_result="Win")
    assert listed["count"] == 1
    assert listed["trades"][0]["id"] == trade_id

    with pytest.raises(HTTPException) as exc:
        await routes.get_trade(trade_id, user_id="user-2")
    assert exc.value.status_code == 404

    await routes.delete_trade(trade_id, user_id="user-1")
    with pytest.raises(HTTPException) as exc:
        await routes.get_trade(trade_id, user_id="user-1")
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_list_trades_caps_limit(monkeypatch):
    service = StubTradeService([])
    monkeypatch.setattr(routes, "trade_service", service)
    monkeypatch.setattr(settings, "TRADE_HISTORY_LIMIT", 50)

    await routes.list_trades(user_id="user-1", limit=1000)
    await routes.list_trades(user_id="user-1", limit=10)
    assert [call["limit"] for call in service.calls] == [50, 10]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -5])
async def test_list_trades_rejects_non_positive_limit(monkeypatch, limit):
    service = StubTradeService([])
    monkeypatch.setattr(routes, "trade_service", service)

    with pytest.raises(HTTPException) as exc:
        await routes.list_trades(user_id="user-1", limit=limit)
    assert exc.value.status_code == 422
    assert exc.value.detail["error_code"] == "trade.invalid_query"
    assert service.calls == []


@pytest.mark.asyncio
async def test_analytics_by_session(monkeypatch):
    trades = [
        {"session": "NY Session", "pl_dollar": 50.0, "trade_result": "Win", "risk_reward_ratio": 2.0},
        {"session": "NY Session", "pl_dollar": -20.0, "trade_result": "Loss", "risk_reward_ratio": 1.5},
        {"session": "Asian Session", "pl_dollar": 80.0, "trade_result": "Win", "risk_reward_ratio": None},
        {"session": "NY Session", "pl_dollar": None, "trade_result": None, "risk_reward_ratio": 3.0},
    ]
    monkeypatch.setattr(routes, "trade_service", StubTradeService(trades))

    payload = await routes.get_analytics("session", user_id="user-1")
    assert payload["count"] == 2
    assert [bucket["key"] for bucket in payload["buckets"]] == ["Asian Session", "NY Session"]
    ny = payload["buckets"][1]
    assert ny["trades"] == 2
    assert ny["win_rate"] == 50.0
    assert ny["total_pl"] == 30.0
    assert ny["average_rr"] == 1.75
    assert payload["buckets"][0]["average_rr"] is None


@pytest.mark.asyncio
async def test_analytics_rejects_unknown_dimension(monkeypatch):
    monkeypatch.setattr(routes, "trade_service", StubTradeService([]))
    with pytest.raises(HTTPException) as exc:
        await routes.get_analytics("month", user_id="user-1")
    assert exc.value.status_code == 404
    assert exc.value.detail["error_code"] == "analytics.unknown_dimension"


@pytest.mark.asyncio
async def test_analytics_reports_service_failure(monkeypatch):
    monkeypatch.setattr(routes, "trade_service", FailingTradeService())
    with pytest.raises(HTTPException) as exc:
        await routes.get_analytics("entry-type", user_id="user-1")
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_summary_and_daily_pnl(monkeypatch):
    trades = [
        {"trade_date": "2024-03-12", "pl_dollar": -40.0, "trade_result": "Loss", "pl_percent": -0.4},
        {"trade_date": "2024-03-11", "pl_dollar": 120.0, "trade_result": "Win", "pl_percent": 1.2},
    ]
    monkeypatch.setattr(routes, "trade_service", StubTradeService(trades))
    monkeypatch.setattr(routes, "profile_service", None)
    monkeypatch.setattr(settings, "DEFAULT_STARTING_BALANCE", 1000.0)

    summary = (await routes.get_summary(user_id="user-1"))["summary"]
    assert summary["total_pl"] == 80.0
    assert summary["profit_factor"] == 3.0
    assert summary["current_streak_type"] == "L"

    daily = await routes.get_daily_pnl(user_id="user-1")
    assert daily["days"] == [
        {"date": "2024-03-11", "pl_dollar": 120.0, "balance": 1120.0},
        {"date": "2024-03-12", "pl_dollar": -40.0, "balance": 1080.0},
    ]


@pytest.mark.asyncio
async def test_weekly_review_round_trip(journal_services, long_entry):
    await routes.create_trade(TradeInput(**dict(long_entry, exit_price=51000)), user_id="user-1")

    saved = await routes.save_weekly_review(
        WeeklyReviewNotes(insights="Patience paid"), user_id="user-1", day=date(2024, 3, 15)
    )
    assert saved["total_trades"] == 1
    assert saved["insights"] == "Patience paid"

    loaded = await routes.get_weekly_review(user_id="user-1", day=date(2024, 3, 11))
    assert loaded["id"] == saved["id"]
    assert loaded["best_session"] == "London Close"


@pytest.mark.asyncio
async def test_weekly_review_requires_service(monkeypatch):
    monkeypatch.setattr(routes, "review_service", None)
    with pytest.raises(HTTPException) as exc:
        await routes.get_weekly_review(user_id="user-1")
    assert exc.value.status_code == 503


@pytest.mark.asyncio
async def test_profile_update_validation(journal_services):
    profile = await routes.update_profile(ProfileUpdate(account_balance=7500), user_id="user-1")
    assert profile["account_balance"] == 7500.0

    with pytest.raises(HTTPException) as exc:
        await routes.update_profile(ProfileUpdate(daily_risk_limit=0), user_id="user-1")
    assert exc.value.status_code == 422
    assert exc.value.detail["error_code"] == "profile.invalid"
