from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Tailor POS"
    APP_PORT: int = 9210
    DEBUG: bool = False

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "tailor_pos"
    POSTGRES_PORT: int = 5432
    SQLALCHEMY_DATABASE_URI: Optional[str] = None  # e.g. sqlite:///./tailor.db

    # Paths
    LOGS_PATH: str = "./logs"

    # Pricing defaults (used when the prices table has no entry)
    STITCHING_PRICE_STANDARD: float = 9
    STITCHING_PRICE_ECONOMY: float = 7
    DESIGN_STITCHING_PRICE: float = 9
    DESIGN_STYLE_PRICE: float = 6
    HOME_DELIVERY_CHARGE: float = 5
    EXPRESS_DELIVERY_CHARGE: float = 2

    # Workflow
    PENDING_ORDERS_LIMIT: int = 5

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    FOLLOWUP_HOUR: int = 9

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
