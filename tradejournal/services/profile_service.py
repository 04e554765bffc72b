"""
Service for reading and updating a user's account profile.
"""
from typing import Dict, Any

from tradejournal.core.config import settings
from tradejournal.core.database import SessionLocal
from tradejournal.models.profile import UserProfile
from tradejournal.services.calculations import to_number


class ProfileService:
    """Persisted profile service."""

    NUMERIC_KEYS = ("account_balance", "starting_balance", "default_risk_percent", "daily_risk_limit")
    PROFILE_KEYS = NUMERIC_KEYS + ("timezone",)

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        """Return the effective profile: configured defaults overlaid by the stored row."""
        profile = settings.get_default_profile(user_id)

        db = SessionLocal()
        try:
            row = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
            if row is not None:
                for key in self.PROFILE_KEYS:
                    profile[key] = getattr(row, key)
            return profile
        finally:
            db.close()

    def update_profile(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Persist the provided profile values; omitted keys keep their current value."""
        parsed = self._validate_payload(payload)
        profile = self.get_profile(user_id)
        profile.update(parsed)

        db = SessionLocal()
        try:
            row = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
            if row is None:
                row = UserProfile(user_id=user_id)
                db.add(row)
            for key in self.PROFILE_KEYS:
                setattr(row, key, profile[key])
            db.commit()
        finally:
            db.close()

        return profile

    def _validate_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        provided = {k: v for k, v in payload.items() if k in self.PROFILE_KEYS and v is not None}
        if not provided:
            raise ValueError(f"Provide at least one of: {', '.join(self.PROFILE_KEYS)}")

        parsed: Dict[str, Any] = {}
        for key in self.NUMERIC_KEYS:
            if key not in provided:
                continue
            value = to_number(provided[key])
            if value is None:
                raise ValueError(f"{key} must be a number")
            parsed[key] = value

        if parsed.get("account_balance", 0) < 0:
            raise ValueError("account_balance cannot be negative")
        if "starting_balance" in parsed and parsed["starting_balance"] <= 0:
            raise ValueError("starting_balance must be positive")
        allowed = settings.get_allowed_risk_percents()
        if "default_risk_percent" in parsed and parsed["default_risk_percent"] not in allowed:
            choices = ", ".join(f"{item:g}" for item in allowed)
            raise ValueError(f"default_risk_percent must be one of: {choices}")
        limit = parsed.get("daily_risk_limit")
        if limit is not None and (limit <= 0 or limit > 100):
            raise ValueError("daily_risk_limit must be between 0 and 100")

        if "timezone" in provided:
            timezone = str(provided["timezone"]).strip()
            if not timezone:
                raise ValueError("timezone cannot be empty")
            parsed["timezone"] = timezone

        return parsed
