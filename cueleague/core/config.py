from pydantic import field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./cueleague.db"
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ADMIN_PASSWORD: str = "YOUR_ADMIN_PASSWORD_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ACCESS_KEY_BATCH_SIZE: int = 3
    # Upper bound on unredeemed keys; redemption checks each one
    MAX_UNUSED_ACCESS_KEYS: int = 50
    LOG_LEVEL: str = "INFO"

    # Rules for the club-wide league (players not attached to a tournament)
    DEFAULT_WIN_POINTS: int = 3
    DEFAULT_LOSS_POINTS: int = 1
    DEFAULT_MIN_GAMES: int = 32
    DEFAULT_TOP_SLOTS: int = 8
    DEFAULT_REPLACEMENT_SLOTS: int = 2

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_postgres_scheme(cls, v: str) -> str:
        # Heroku-style URLs still use the scheme SQLAlchemy dropped
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

settings = Settings()
