import os
from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing or malformed."""
    pass


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Settings read straight from environment variables.
    """
    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL")
    DB_POOL_MIN_SIZE: int = int(os.environ.get("DB_POOL_MIN_SIZE", 5))
    DB_POOL_MAX_SIZE: int = int(os.environ.get("DB_POOL_MAX_SIZE", 20))
    APPLY_SCHEMA_ON_STARTUP: bool = _as_bool(os.environ.get("APPLY_SCHEMA_ON_STARTUP"), False)

    # Redis
    APPLICATION_REDIS_URL: str = os.environ.get("APPLICATION_REDIS_URL")
    RATE_LIMITER_REDIS_URL: str = os.environ.get("RATE_LIMITER_REDIS_URL")
    RATE_LIMIT_ENABLED: bool = _as_bool(os.environ.get("RATE_LIMIT_ENABLED"), True)

    # JWT
    SECRET_KEY: str = os.environ.get("SECRET_KEY")
    ALGORITHM: str = os.environ.get("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

    # Runtime
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "production")
    APP_UTC_OFFSET_HOURS: int = int(os.environ.get("APP_UTC_OFFSET_HOURS", 3))
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.environ.get("LOG_DIR", "logs")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def validate(self):
        """Fails fast on settings the API cannot run without."""
        if not self.SECRET_KEY:
            raise ConfigurationError("SECRET_KEY must be set; refusing to start without a token signing key.")
        if self.DB_POOL_MIN_SIZE > self.DB_POOL_MAX_SIZE:
            raise ConfigurationError("DB_POOL_MIN_SIZE cannot be larger than DB_POOL_MAX_SIZE.")


# Single importable settings instance
settings = Config()
