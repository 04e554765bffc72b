from tradejournal.models.trade import Trade
from tradejournal.models.profile import UserProfile
from tradejournal.models.review import WeeklyReview

__all__ = ["Trade", "UserProfile", "WeeklyReview"]
