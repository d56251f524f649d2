from functools import lru_cache
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config_models import DatabaseConfig, LoggingConfig, ServerConfig

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class Settings(BaseSettings):
    """Application settings assembled from environment variables and defaults."""

    # Environment
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug: bool = Field(default=False)

    # API
    api_title: str = Field(default="Post Service API")
    api_version: str = Field(default="0.1.0")
    api_description: str = Field(default="Minimal CRUD service for blog posts")

    # Server
    server: ServerConfig = ServerConfig()

    # Logging
    logging: LoggingConfig = LoggingConfig()

    # Database (populated in validator)
    database: DatabaseConfig | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **values):
        # Ensure plain ValueError is raised (not Pydantic ValidationError)
        if not os.getenv("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable is required")
        super().__init__(**values)

    @model_validator(mode="after")
    def _assemble_subconfigs(self):
        """Assemble nested configurations from environment variables."""
        self.database = DatabaseConfig(
            url=os.environ["DATABASE_URL"].strip(),
            echo=self.environment == "development" and self.debug,
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            create_tables=_env_flag("DB_CREATE_TABLES", True),
        )

        self.server = ServerConfig(
            host=os.getenv("SERVER_HOST", self.server.host),
            port=int(os.getenv("SERVER_PORT", str(self.server.port))),
            reload=_env_flag("SERVER_RELOAD", self.server.reload),
            check_db_on_start=_env_flag("DB_CHECK_ON_START", self.server.check_db_on_start),
        )

        # Adjust logging for environment; an explicit LOG_LEVEL wins
        level = self.logging.level
        if self.environment == "production":
            level = "WARNING"
        elif self.environment == "development":
            level = "DEBUG"
        level = (os.getenv("LOG_LEVEL") or level).strip().upper()
        self.logging = LoggingConfig(level=level, format=self.logging.format)

        return self


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
