"""Users API — Configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = ""
    DB_DRIVER: str = "postgresql+psycopg2"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "users"

    # Connection pool
    DB_POOL_MAX: int = 2
    DB_POOL_ACQUIRE_TIMEOUT_S: float = 30.0
    DB_POOL_IDLE_S: int = 10

    # HTTP
    API_PREFIX: str = "/api"
    MAX_BODY_BYTES: int = 50 * 1024 * 1024
    CORS_ORIGINS: list[str] = ["*"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def database_url(self) -> str:
        """DATABASE_URL when set, otherwise assembled from the DB_* parts."""
        if self.DATABASE_URL.strip():
            return self.DATABASE_URL.strip()
        url = URL.create(
            self.DB_DRIVER,
            username=self.DB_USER or None,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
