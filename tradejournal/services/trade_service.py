"""
Journal trade storage: create, edit, delete and query a user's trades
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from tradejournal.core.database import SessionLocal
from tradejournal.models.trade import Trade
from tradejournal.services.calculations import parse_trade_date
from tradejournal.services.trade_entry import enrich_trade, validate_trade_entry

logger = logging.getLogger(__name__)

TRADE_COLUMNS = tuple(column.name for column in Trade.__table__.columns)
PROTECTED_FIELDS = {"id", "user_id", "created_at", "updated_at"}
FILTERABLE_FIELDS = ("session", "direction", "trade_result", "m1_entry_type", "day_of_week")


class TradeNotFoundError(LookupError):
    """Raised when a trade does not exist or belongs to another user"""


class TradeJournalService:
    """Persists journal trades with their derived economics"""

    def create_trade(self, user_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate, enrich and store a new trade

        Args:
            user_id: Owner of the trade
            payload: Raw trade form values

        Returns:
            The stored trade as a dictionary

        Raises:
            TradeValidationError: if the entry cannot be submitted
        """
        validate_trade_entry(payload)
        values = self._storable_values(enrich_trade(payload))

        db = SessionLocal()
        try:
            trade = Trade(user_id=user_id, **values)
            db.add(trade)
            db.commit()
            db.refresh(trade)
            logger.info(f"Recorded trade {trade.id} for user {user_id}: {trade.direction} {trade.session}")
            return self.to_dict(trade)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error recording trade for user {user_id}: {e}")
            raise
        finally:
            db.close()

    def update_trade(self, user_id: str, trade_id: int, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply edits and recompute every derived field from the merged values"""
        db = SessionLocal()
        try:
            trade = self._get_owned(db, user_id, trade_id)
            merged = self.to_dict(trade)
            merged.update({k: v for k, v in changes.items() if k not in PROTECTED_FIELDS})

            validate_trade_entry(merged)
            for key, value in self._storable_values(enrich_trade(merged)).items():
                setattr(trade, key, value)

            db.commit()
            db.refresh(trade)
            logger.info(f"Updated trade {trade_id} for user {user_id}")
            return self.to_dict(trade)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating trade {trade_id}: {e}")
            raise
        finally:
            db.close()

    def delete_trade(self, user_id: str, trade_id: int):
        db = SessionLocal()
        try:
            trade = self._get_owned(db, user_id, trade_id)
            db.delete(trade)
            db.commit()
            logger.info(f"Deleted trade {trade_id} for user {user_id}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting trade {trade_id}: {e}")
            raise
        finally:
            db.close()

    def get_trade(self, user_id: str, trade_id: int) -> Dict[str, Any]:
        db = SessionLocal()
        try:
            return self.to_dict(self._get_owned(db, user_id, trade_id))
        finally:
            db.close()

    def list_trades(
        self,
        user_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        List a user's trades, most recent first

        Args:
            user_id: Owner of the trades
            filters: Equality filters on session, direction, trade_result,
                m1_entry_type or day_of_week; None values are ignored
            start_date: Inclusive lower bound on trade_date
            end_date: Inclusive upper bound on trade_date
            limit: Maximum rows; None returns every match

        Returns:
            Trades as dictionaries
        """
        db = SessionLocal()
        try:
            query = db.query(Trade).filter(Trade.user_id == user_id)
            for name, value in (filters or {}).items():
                if value is None:
                    continue
                if name not in FILTERABLE_FIELDS:
                    raise ValueError(f"Cannot filter trades by {name}")
                query = query.filter(getattr(Trade, name) == value)
            if start_date is not None:
                query = query.filter(Trade.trade_date >= start_date)
            if end_date is not None:
                query = query.filter(Trade.trade_date <= end_date)

            query = query.order_by(Trade.trade_date.desc(), Trade.trade_time.desc(), Trade.id.desc())
            if limit is not None:
                query = query.limit(limit)
            trades = query.all()
            return [self.to_dict(trade) for trade in trades]
        finally:
            db.close()

    @staticmethod
    def to_dict(trade: Trade) -> Dict[str, Any]:
        data = {}
        for name in TRADE_COLUMNS:
            value = getattr(trade, name)
            if isinstance(value, (date, datetime)):
                value = value.isoformat()
            data[name] = value
        return data

    def _get_owned(self, db, user_id: str, trade_id: int) -> Trade:
        trade = db.query(Trade).filter(Trade.id == trade_id, Trade.user_id == user_id).first()
        if trade is None:
            raise TradeNotFoundError(f"Trade {trade_id} not found")
        return trade

    @staticmethod
    def _storable_values(record: Mapping[str, Any]) -> Dict[str, Any]:
        values = {
            name: record[name]
            for name in TRADE_COLUMNS
            if name in record and name not in PROTECTED_FIELDS
        }
        values["trade_date"] = parse_trade_date(record.get("trade_date"))
        return values
