import re
from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.exceptions import InvalidConfiguration

load_dotenv()

DURATION_PATTERN = re.compile(r"^(\d+)(ms|s|m|h|d)$", re.IGNORECASE)

_UNIT_TO_KWARG = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str, name: str = "duration") -> timedelta:
    """Parse a lifetime string such as ``15m`` or ``7d`` into a timedelta."""
    match = DURATION_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidConfiguration(f"{name} must match pattern <number><ms|s|m|h|d>")
    amount, unit = match.groups()
    return timedelta(**{_UNIT_TO_KWARG[unit.lower()]: int(amount)})


class Settings(BaseSettings):
    DATABASE_URL: str

    JWT_SECRET: str
    JWT_EXPIRES: str = "15m"
    REFRESH_SECRET: str
    REFRESH_EXPIRES: str = "7d"
    JWT_ALGORITHM: str = "HS256"

    DEFAULT_ADMIN_EMAIL: str
    DEFAULT_ADMIN_PASSWORD: str = Field(..., min_length=8)
    DEFAULT_ADMIN_FULLNAME: str = "Super Admin"

    # Rate limiting is backed by redis; leave unset to run without it
    REDIS_URL: Optional[str] = None

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    BCRYPT_ROUNDS: int = 12
    LOG_LEVEL: str = "INFO"

    PROJECT_NAME: str = "Regional Feedback Admin API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Region-scoped ratings and feedback administration"

    @field_validator("JWT_EXPIRES", "REFRESH_EXPIRES")
    @classmethod
    def validate_lifetime(cls, value: str, info) -> str:
        parse_duration(value, info.field_name)
        return value

    @property
    def access_token_lifetime(self) -> timedelta:
        return parse_duration(self.JWT_EXPIRES, "JWT_EXPIRES")

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return parse_duration(self.REFRESH_EXPIRES, "REFRESH_EXPIRES")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise InvalidConfiguration(f"Invalid configuration: {exc}") from exc


settings = load_settings()
