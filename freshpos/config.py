"""
Configuration management for FreshPOS
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "FreshPOS"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./freshpos.db"

    # Frontend origins allowed by CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Seed the default catalog / demo customers when their tables are empty
    SEED_DEFAULT_DATA: bool = True

    # Delivery board refresh
    ORDER_POLL_INTERVAL_SEC: int = 10      # clients re-read the order feed every N seconds
    ORDER_WAIT_TIMEOUT_SEC: float = 25.0   # max time a /wait request blocks for a new order
    ORDER_EVENT_QUEUE_SIZE: int = 100      # per-subscriber buffer

    # Display
    CURRENCY_SYMBOL: str = "$"
    LOW_STOCK_ALERT_LIMIT: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
