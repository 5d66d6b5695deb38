"""
Application settings
Values come from the environment or a local .env file
"""
from decimal import Decimal
from typing import List, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Tropicana HMS"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Database
    DATABASE_URL: str = "sqlite:///./tropicana.db"

    # JWT
    SECRET_KEY: str = "tropicana-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Media uploads
    MEDIA_ROOT: str = "./uploads"
    MEDIA_URL_PREFIX: str = "/uploads"

    # PayMongo
    PAYMONGO_SECRET_KEY: Optional[str] = None
    PAYMONGO_WEBHOOK_SECRET: Optional[str] = None
    PAYMONGO_BASE_URL: str = "https://api.paymongo.com/v1"
    PAYMONGO_TIMEOUT: float = 30.0

    # Pricing defaults, used when a property has no rate of its own
    DEFAULT_CURRENCY: str = "PHP"
    DEFAULT_TAX_RATE: Decimal = Decimal("0.12")
    DEFAULT_SERVICE_FEE_RATE: Decimal = Decimal("0.05")

    # Webhook bookkeeping
    WEBHOOK_MAX_RETRIES: int = 3
    WEBHOOK_RETENTION_DAYS: int = 30

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
