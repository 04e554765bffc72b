"""
Application configuration management
"""
import json
from typing import Any, List, Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Ensure repository .env values win over stale exported shell variables.
load_dotenv(override=True)

class Settings(BaseSettings):
    """Application settings"""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./trade_journal.db"

    # Account defaults (used until a user profile is stored)
    DEFAULT_ACCOUNT_BALANCE: float = 10000.0
    DEFAULT_STARTING_BALANCE: float = 10000.0
    DEFAULT_RISK_PERCENT: float = 1.0
    DAILY_RISK_LIMIT: float = 3.0  # percent of balance
    DEFAULT_TIMEZONE: str = "UTC"
    ALLOWED_RISK_PERCENTS: str = "1,1.5,2"

    # Trade economics
    BREAK_EVEN_TOLERANCE: float = 0.0  # 0 keeps exact-equality classification
    WRAP_OVERNIGHT_DURATION: bool = True

    # Journal
    TRADE_HISTORY_LIMIT: int = 500

    # Security
    API_AUTH_ENABLED: bool = True
    API_AUTH_TOKEN: str = "change-me-api-token"
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/trade_journal.log"

    @field_validator('DEFAULT_ACCOUNT_BALANCE', 'DEFAULT_STARTING_BALANCE', 'DAILY_RISK_LIMIT')
    @classmethod
    def validate_positive_numbers(cls, v):
        if v <= 0:
            raise ValueError('Must be positive')
        return v

    @field_validator('ALLOWED_RISK_PERCENTS')
    @classmethod
    def validate_risk_percents(cls, v):
        try:
            values = [float(item) for item in cls._parse_str_list(v)]
        except ValueError:
            raise ValueError('ALLOWED_RISK_PERCENTS must be a list of numbers')
        if not values:
            raise ValueError('ALLOWED_RISK_PERCENTS cannot be empty')
        if any(item <= 0 or item > 100 for item in values):
            raise ValueError('ALLOWED_RISK_PERCENTS must be between 0 and 100')
        return v

    @field_validator('BREAK_EVEN_TOLERANCE')
    @classmethod
    def validate_break_even_tolerance(cls, v):
        if v < 0:
            raise ValueError('BREAK_EVEN_TOLERANCE cannot be negative')
        return v

    @field_validator('TRADE_HISTORY_LIMIT')
    @classmethod
    def validate_history_limit(cls, v):
        if int(v) <= 0:
            raise ValueError('TRADE_HISTORY_LIMIT must be positive')
        return int(v)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v or "").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError('LOG_LEVEL must be a standard logging level name')
        return level

    @model_validator(mode='after')
    def validate_default_risk_percent(self):
        if self.DEFAULT_RISK_PERCENT not in self.get_allowed_risk_percents():
            raise ValueError('DEFAULT_RISK_PERCENT must be one of ALLOWED_RISK_PERCENTS')
        return self

    @staticmethod
    def _parse_str_list(value: Any) -> List[str]:
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        if value is None:
            return []
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith('[') and stripped.endswith(']'):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(',') if item.strip()]
        return [str(value).strip()] if str(value).strip() else []

    def get_cors_origins(self) -> List[str]:
        origins = self._parse_str_list(self.CORS_ORIGINS)
        return origins or ["http://localhost:5173", "http://127.0.0.1:5173"]

    def get_allowed_risk_percents(self) -> List[float]:
        return sorted({float(item) for item in self._parse_str_list(self.ALLOWED_RISK_PERCENTS)})

    def get_default_profile(self, user_id: Optional[str] = None) -> dict:
        return {
            "user_id": user_id,
            "account_balance": float(self.DEFAULT_ACCOUNT_BALANCE),
            "starting_balance": float(self.DEFAULT_STARTING_BALANCE),
            "default_risk_percent": float(self.DEFAULT_RISK_PERCENT),
            "daily_risk_limit": float(self.DAILY_RISK_LIMIT),
            "timezone": self.DEFAULT_TIMEZONE,
        }

# Global settings instance
settings = Settings()
