from urllib.parse import quote_plus

from pydantic import Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration using Pydantic BaseSettings.
    Values are loaded automatically from environment variables and `.env`.
    """

    PROJECT_NAME: str = "Orderflow"
    VERSION: str = "0.1.0"

    # Database Settings
    DB_URL: str | None = Field(None, description="Full async database URL (overrides DB_* parts)")
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("orderflow", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every X seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout to obtain a pooled connection")

    # Redis Settings
    REDIS_ENABLED: bool = Field(False, description="Use Redis for aggregate report caching")
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database")
    REDIS_PASSWORD: str | None = Field(None, description="Redis password")
    REPORT_CACHE_TTL_SECONDS: int = Field(30, description="Maximum staleness of cached aggregate reads")

    # Inventory and order policy
    LOW_STOCK_THRESHOLD: int = Field(10, description="Active products at or below this stock are reported")
    PENDING_ORDER_TTL_MINUTES: int = Field(30, description="Pending orders older than this are cancelled")
    MAX_ITEM_QUANTITY: int = Field(1000, description="Upper bound for a single line item quantity")
    SHIPPING_ADDRESS_MAX_LENGTH: int = Field(500, description="Maximum shipping address length")

    # Expiry sweep
    SWEEP_ENABLED: bool = Field(True, description="Run the expiry sweep background task")
    SWEEP_INTERVAL_SECONDS: int = Field(300, description="Seconds between two sweep passes")
    SWEEP_MAX_RETRIES: int = Field(3, description="Attempts per order on concurrency conflicts")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Log format: colored, json or plain")

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @field_validator("LOW_STOCK_THRESHOLD", "REPORT_CACHE_TTL_SECONDS")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must be 0 or greater")
        return v

    @field_validator("PENDING_ORDER_TTL_MINUTES", "SWEEP_MAX_RETRIES", "MAX_ITEM_QUANTITY")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be 'colored', 'json' or 'plain'")
        return v

    @model_validator(mode="after")
    def validate_sweep_interval(self) -> "Settings":
        if self.SWEEP_INTERVAL_SECONDS <= 0:
            raise ValueError("SWEEP_INTERVAL_SECONDS must be positive")
        if self.SWEEP_INTERVAL_SECONDS > self.PENDING_ORDER_TTL_MINUTES * 60:
            raise ValueError(
                "SWEEP_INTERVAL_SECONDS must not exceed the pending order staleness threshold "
                f"({self.PENDING_ORDER_TTL_MINUTES * 60}s)"
            )
        return self

    @computed_field
    @property
    def async_database_url(self) -> str:
        """Build the async database URL"""
        if self.DB_URL:
            return self.DB_URL

        encoded_user = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            encoded_password = quote_plus(self.DB_PASSWORD)
            return (
                f"postgresql+asyncpg://{encoded_user}:{encoded_password}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return f"postgresql+asyncpg://{encoded_user}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def redis_url(self) -> str:
        """Build the Redis URL"""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Whether the application runs in development mode"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local", "test"]


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached settings instance.
    Avoids loading the environment more than once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
