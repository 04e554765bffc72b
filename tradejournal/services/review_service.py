"""
Weekly review: computed figures for the current week plus the trader's notes
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

from tradejournal.core.database import SessionLocal
from tradejournal.models.review import WeeklyReview
from tradejournal.services.aggregation import weekly_review_figures
from tradejournal.services.trade_service import TradeJournalService

logger = logging.getLogger(__name__)

NOTE_FIELDS = ("insights", "reviewed_all_trades", "identified_improvements", "plan_updated")


def week_bounds(day: date) -> Tuple[date, date]:
    """Sunday-to-Saturday week containing ``day``."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


class WeeklyReviewService:
    """Builds and stores weekly reviews"""

    def __init__(self, trade_service: Optional[TradeJournalService] = None):
        self.trade_service = trade_service or TradeJournalService()

    def get_review(self, user_id: str, day: Optional[date] = None) -> Dict[str, Any]:
        """
        Review of the week containing ``day`` (today by default)

        Figures are always recomputed from the week's trades; notes come from
        the stored review when there is one.
        """
        week_start, week_end = week_bounds(day or date.today())
        review = self._compute(user_id, week_start, week_end)

        db = SessionLocal()
        try:
            row = self._get_row(db, user_id, week_start)
            review["id"] = row.id if row is not None else None
            for name in NOTE_FIELDS:
                stored = getattr(row, name) if row is not None else None
                review[name] = stored if stored is not None else self._empty_note(name)
            return review
        finally:
            db.close()

    def save_review(self, user_id: str, notes: Dict[str, Any], day: Optional[date] = None) -> Dict[str, Any]:
        """Store notes together with a snapshot of the week's figures"""
        week_start, week_end = week_bounds(day or date.today())
        figures = self._compute(user_id, week_start, week_end)

        db = SessionLocal()
        try:
            row = self._get_row(db, user_id, week_start)
            if row is None:
                row = WeeklyReview(user_id=user_id, week_start_date=week_start)
                db.add(row)
            for name, value in figures.items():
                setattr(row, name, value)
            for name in NOTE_FIELDS:
                if name in notes and notes[name] is not None:
                    setattr(row, name, notes[name])
            db.commit()
            logger.info(f"Saved weekly review {week_start.isoformat()} for user {user_id}")
        finally:
            db.close()

        return self.get_review(user_id, week_start)

    def _compute(self, user_id: str, week_start: date, week_end: date) -> Dict[str, Any]:
        trades = self.trade_service.list_trades(user_id, start_date=week_start, end_date=week_end)
        review = weekly_review_figures(trades)
        review["week_start_date"] = week_start
        review["week_end_date"] = week_end
        return review

    @staticmethod
    def _get_row(db, user_id: str, week_start: date) -> Optional[WeeklyReview]:
        return db.query(WeeklyReview).filter(
            WeeklyReview.user_id == user_id,
            WeeklyReview.week_start_date == week_start,
        ).first()

    @staticmethod
    def _empty_note(name: str) -> Any:
        return False if name in ("reviewed_all_trades", "plan_updated") else ""
