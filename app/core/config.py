
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "TATU API"
    API_V1_STR: str = "/api/v1"
    # "development" exposes diagnostic messages on 500 responses
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    CORS_ORIGINS: List[str] = ["*"]

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "12345"
    POSTGRES_DB: str = "tatu_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None

    # Scheduling
    CALENDAR_TIMEZONE: str = "UTC"
    MAX_SLOT_DURATION_MINUTES: int = 12 * 60

    # Money
    COMMISSION_RATE: Decimal = Decimal("0.10")
    ARTIST_MEMBERSHIP_FEE: Decimal = Decimal("49.99")
    PAYMENT_CURRENCY: str = "usd"

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_SUCCESS_URL: str = "http://localhost:3000/register-artist-success?session_id={CHECKOUT_SESSION_ID}"
    STRIPE_CANCEL_URL: str = "http://localhost:3000/register-artist-cancelled"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
