"""
API routes for the trade journal
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Any, Dict, Optional
from datetime import date, datetime, timezone
import logging

from tradejournal.api.schemas import (
    AnalyticsResponse,
    PositionSizeOut,
    PositionSizeRequest,
    ProfileUpdate,
    TradeInput,
    TradePreviewOut,
    WeeklyReviewNotes,
    WeeklyReviewOut,
    error_detail,
)
from tradejournal.api.security import get_user_id, require_api_key
from tradejournal.core.config import settings
from tradejournal.services.aggregation import (
    DIMENSIONS,
    aggregate_by,
    daily_pnl,
    equity_curve,
    sort_buckets,
    summarize_trades,
)
from tradejournal.services.calculations import session_from_time, size_position
from tradejournal.services.profile_service import ProfileService
from tradejournal.services.review_service import WeeklyReviewService
from tradejournal.services.trade_entry import TradeValidationError, enrich_trade
from tradejournal.services.trade_service import TradeJournalService, TradeNotFoundError

logger = logging.getLogger(__name__)

# Create router
api_router = APIRouter(dependencies=[Depends(require_api_key)])

# Global services (will be injected)
trade_service: Optional[TradeJournalService] = None
profile_service: Optional[ProfileService] = None
review_service: Optional[WeeklyReviewService] = None

def set_services(ts: TradeJournalService, ps: ProfileService, rs: WeeklyReviewService):
    """Set global services"""
    global trade_service, profile_service, review_service
    trade_service = ts
    profile_service = ps
    review_service = rs

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _require_trade_service() -> TradeJournalService:
    if not trade_service:
        raise HTTPException(status_code=503, detail="Trade journal not available")
    return trade_service

def _invalid_trade(e: TradeValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=error_detail("trade.invalid", e.message, e.field))

# Calculator Routes
@api_router.post("/calculator/trade", response_model=TradePreviewOut)
async def preview_trade(payload: TradeInput):
    """Derived fields for a partially filled trade form"""
    values = payload.model_dump(exclude_unset=True)
    enriched = enrich_trade(values)
    preview = {name: enriched.get(name) for name in TradePreviewOut.model_fields}
    preview["suggested_session"] = session_from_time(values.get("trade_time"))
    return preview

@api_router.post("/calculator/position-size", response_model=PositionSizeOut)
async def calculate_position_size(request: PositionSizeRequest):
    """Stand-alone position size calculator"""
    sizing = size_position(
        request.account_balance,
        request.risk_percent,
        request.entry_price,
        request.stop_loss,
        request.direction,
    )
    return sizing.to_dict()

# Trade Routes
@api_router.get("/trades")
async def list_trades(
    user_id: str = Depends(get_user_id),
    session: Optional[str] = None,
    direction: Optional[str] = None,
    trade_result: Optional[str] = None,
    entry_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = None,
):
    """Get a user's trades, most recent first"""
    service = _require_trade_service()
    if limit is not None and limit < 1:
        raise HTTPException(
            status_code=422,
            detail=error_detail("trade.invalid_query", "limit must be at least 1", "limit"),
        )
    limit = min(limit or settings.TRADE_HISTORY_LIMIT, settings.TRADE_HISTORY_LIMIT)
    filters = {
        "session": session,
        "direction": direction,
        "trade_result": trade_result,
        "m1_entry_type": entry_type,
    }

    try:
        trades = service.list_trades(user_id, filters=filters, start_date=start_date, end_date=end_date, limit=limit)
        return {
            "trades": trades,
            "count": len(trades),
            "timestamp": _now()
        }
    except ValueError as e:
        raise HTTPException(status_code=422, detail=error_detail("trade.invalid_query", str(e)))
    except Exception as e:
        logger.error(f"Error listing trades: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.post("/trades", status_code=201)
async def create_trade(payload: TradeInput, user_id: str = Depends(get_user_id)):
    """Record a new trade"""
    service = _require_trade_service()

    try:
        return service.create_trade(user_id, payload.model_dump(exclude_unset=True))
    except TradeValidationError as e:
        raise _invalid_trade(e)
    except Exception as e:
        logger.error(f"Error creating trade: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.get("/trades/{trade_id}")
async def get_trade(trade_id: int, user_id: str = Depends(get_user_id)):
    """Get a single trade"""
    service = _require_trade_service()

    try:
        return service.get_trade(user_id, trade_id)
    except TradeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error getting trade {trade_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.put("/trades/{trade_id}")
async def update_trade(trade_id: int, payload: TradeInput, user_id: str = Depends(get_user_id)):
    """Edit a trade; derived fields are recomputed"""
    service = _require_trade_service()

    try:
        return service.update_trade(user_id, trade_id, payload.model_dump(exclude_unset=True))
    except TradeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TradeValidationError as e:
        raise _invalid_trade(e)
    except Exception as e:
        logger.error(f"Error updating trade {trade_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.delete("/trades/{trade_id}")
async def delete_trade(trade_id: int, user_id: str = Depends(get_user_id)):
    """Delete a trade"""
    service = _require_trade_service()

    try:
        service.delete_trade(user_id, trade_id)
        return {"message": f"Trade {trade_id} deleted"}
    except TradeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting trade {trade_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

# Analytics Routes
@api_router.get("/analytics/{dimension}", response_model=AnalyticsResponse)
async def get_analytics(
    dimension: str,
    user_id: str = Depends(get_user_id),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """Per-category performance, best total P/L first"""
    service = _require_trade_service()
    if dimension not in DIMENSIONS:
        raise HTTPException(
            status_code=404,
            detail=error_detail(
                "analytics.unknown_dimension",
                f"dimension must be one of: {', '.join(sorted(DIMENSIONS))}",
            ),
        )

    try:
        trades = service.list_trades(user_id, start_date=start_date, end_date=end_date)
        buckets = sort_buckets(aggregate_by(trades, DIMENSIONS[dimension]))
        return {
            "dimension": dimension,
            "buckets": [{"key": key, **bucket.to_dict()} for key, bucket in buckets],
            "count": len(buckets),
            "timestamp": _now()
        }
    except Exception as e:
        logger.error(f"Error computing {dimension} analytics: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.get("/stats/summary")
async def get_summary(user_id: str = Depends(get_user_id)):
    """Dashboard statistics"""
    service = _require_trade_service()

    try:
        trades = service.list_trades(user_id)
        return {
            "summary": summarize_trades(trades).to_dict(),
            "timestamp": _now()
        }
    except Exception as e:
        logger.error(f"Error computing summary: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.get("/stats/daily")
async def get_daily_pnl(
    user_id: str = Depends(get_user_id),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """P/L per trading day with the resulting account balance"""
    service = _require_trade_service()

    try:
        trades = service.list_trades(user_id, start_date=start_date, end_date=end_date)
        starting_balance = settings.DEFAULT_STARTING_BALANCE
        if profile_service:
            starting_balance = profile_service.get_profile(user_id)["starting_balance"]

        daily = daily_pnl(trades)
        balances = equity_curve(trades, starting_balance)
        days = [
            {
                "date": day.isoformat(),
                "pl_dollar": round(float(daily[day]), 2),
                "balance": round(float(balances[day]), 2),
            }
            for day in daily.index
        ]
        return {
            "days": days,
            "count": len(days),
            "starting_balance": starting_balance,
            "timestamp": _now()
        }
    except Exception as e:
        logger.error(f"Error computing daily P/L: {e}")
        raise HTTPException(status_code=500, detail=str(e))

# Weekly Review Routes
@api_router.get("/reviews/weekly", response_model=WeeklyReviewOut)
async def get_weekly_review(user_id: str = Depends(get_user_id), day: Optional[date] = None):
    """Review of the week containing ``day`` (today by default)"""
    if not review_service:
        raise HTTPException(status_code=503, detail="Weekly review not available")

    try:
        return review_service.get_review(user_id, day)
    except Exception as e:
        logger.error(f"Error loading weekly review: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.put("/reviews/weekly", response_model=WeeklyReviewOut)
async def save_weekly_review(
    notes: WeeklyReviewNotes,
    user_id: str = Depends(get_user_id),
    day: Optional[date] = None,
):
    """Save review notes for the week containing ``day``"""
    if not review_service:
        raise HTTPException(status_code=503, detail="Weekly review not available")

    try:
        return review_service.save_review(user_id, notes.model_dump(exclude_unset=True), day)
    except Exception as e:
        logger.error(f"Error saving weekly review: {e}")
        raise HTTPException(status_code=500, detail=str(e))

# Profile Routes
@api_router.get("/profile")
async def get_profile(user_id: str = Depends(get_user_id)) -> Dict[str, Any]:
    """Get the user's account profile"""
    if not profile_service:
        raise HTTPException(status_code=503, detail="Profile service not available")

    try:
        return profile_service.get_profile(user_id)
    except Exception as e:
        logger.error(f"Error loading profile: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@api_router.put("/profile")
async def update_profile(payload: ProfileUpdate, user_id: str = Depends(get_user_id)) -> Dict[str, Any]:
    """Update the user's account profile"""
    if not profile_service:
        raise HTTPException(status_code=503, detail="Profile service not available")

    try:
        return profile_service.update_profile(user_id, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=error_detail("profile.invalid", str(e)))
    except Exception as e:
        logger.error(f"Error updating profile: {e}")
        raise HTTPException(status_code=500, detail=str(e))
