from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

BULLION_PAGE_URL = "https://www.sharesansar.com/bullion"


class Settings(BaseSettings):
    # DB
    DATABASE_URL: str = "sqlite:///./welcome_craft.db"

    # Security / JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Price sources
    SILVER_PRICE_URL: str = BULLION_PAGE_URL
    GOLD_PRICE_URL: str = BULLION_PAGE_URL
    SILVER_SCRAPER: str = "table_row"
    GOLD_SCRAPER: str = "highlight_cell"
    SCRAPE_TIMEOUT_SECONDS: float = 10.0

    # Scheduler: ticks fire while the local hour is in [START, END]
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_INTERVAL_MINUTES: int = 15
    SCHEDULER_START_HOUR: int = 5
    SCHEDULER_END_HOUR: int = 13

    # Storefront
    WHATSAPP_PHONE: Optional[str] = None
    CART_TTL_DAYS: int = 7
    PRICE_HISTORY_DEFAULT_LIMIT: int = 30
    PRICE_HISTORY_MAX_LIMIT: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"
    LOGS_DIR: Path = Path("logs")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
