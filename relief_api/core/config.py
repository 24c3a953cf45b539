"""
Application Configuration
Environment variables and settings management
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./relief.db",
        description="Async database URL (postgresql+asyncpg or sqlite+aiosqlite)",
    )
    DB_POOL_SIZE: int = Field(default=10, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database max overflow connections")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout in seconds")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time in seconds")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(
        default="relief-dev-secret-key-change-in-production-min-32-chars",
        description="JWT secret key",
    )
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, description="JWT access token expiration")
    AUTH_ACTIVE_ISSUER: str = Field(default="local", description="Token validation strategy in use")
    AUTH_LOCAL_ISSUER: str = Field(default="relief-api", description="Issuer claim for locally issued tokens")
    AUTH_TRUSTED_ISSUERS: str = Field(default="relief-api", description="Comma separated accepted token issuers")

    # Browser login redirect target
    LOGIN_URL: str = Field(default="/login", description="Login location for unauthenticated browsers")

    # Security
    CORS_ORIGINS: str = Field(default="", description="Comma separated CORS allowed origins")

    # Audit trail
    AUDIT_QUERY_MAX_LIMIT: int = Field(default=1000, description="Maximum page size for audit log queries")
    AUDIT_EXPORT_MAX_DAYS: int = Field(default=365, description="Maximum export period in days")
    AUDIT_EXPORT_ROW_LIMIT: int = Field(default=10000, description="Maximum rows in a single export")

    # Bootstrap admin credentials
    BOOTSTRAP_ADMIN_USERNAME: str = Field(default="admin", description="Initial ADMIN username")
    BOOTSTRAP_ADMIN_PASSWORD: str = Field(default="ReliefAdmin!2024", description="Initial ADMIN password")

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "testing", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @property
    def trusted_issuers(self) -> List[str]:
        return _split_csv(self.AUTH_TRUSTED_ISSUERS)

    @property
    def cors_origins(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS)

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


# Create settings instance
settings = Settings()

# Derived settings
DATABASE_CONFIG = {
    "pool_size": settings.DB_POOL_SIZE,
    "max_overflow": settings.DB_MAX_OVERFLOW,
    "pool_timeout": settings.DB_POOL_TIMEOUT,
    "pool_recycle": settings.DB_POOL_RECYCLE,
    "pool_pre_ping": True,
}
