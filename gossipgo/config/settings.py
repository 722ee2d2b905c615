"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT
    JWT_SECRET: str
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Passwords
    BCRYPT_ROUNDS: int = 12

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Storage
    SEED_SAMPLE_DATA: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # Client
    API_BASE_URL: str = "http://127.0.0.1:8000"
    SESSION_FILE: str = "~/.gossipgo/session.json"
    HTTP_TIMEOUT_SECONDS: float = 15.0
    HTTP_MAX_RETRIES: int = 3
    HTTP_BACKOFF_SECONDS: float = 0.5

    # Presence simulation
    PRESENCE_TICK_SECONDS: float = 10.0
    PRESENCE_CONNECT_DELAY_SECONDS: float = 0.5
    PRESENCE_SELECT_PROBABILITY: float = 0.3
    PRESENCE_ONLINE_PROBABILITY: float = 0.7

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
