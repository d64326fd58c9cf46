import os
from typing import List
from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

# Load environment variables from the correct .env file
env_file = ".env.production" if os.getenv("APP_ENV") == "production" else ".env"
load_dotenv(env_file)

class Settings(BaseSettings):
    APP_ENV: str = "development"
    DEBUG: bool = False
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_COMMAND_TIMEOUT: int = 30
    ALLOWED_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "info"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "60/minute"

    # Search
    SEARCH_DEFAULT_TAKE: int = 10
    SEARCH_MAX_TAKE: int = 100
    SEARCH_MAX_SKIP: int = 10000
    SEARCH_TRIGRAM_ENABLED: bool = False
    SEARCH_TRIGRAM_THRESHOLD: float = 0.3

    # Cache-Control max-age (seconds), only sent in production
    SEARCH_CACHE_MAX_AGE: int = 86400
    CATALOG_CACHE_MAX_AGE: int = 3600

    # Header value required for catalog mutations
    ADMIN_API_KEY: str = ""

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def validate_search_bounds(self):
        if self.SEARCH_MAX_TAKE < 1:
            raise ValueError("SEARCH_MAX_TAKE must be at least 1")
        if not 1 <= self.SEARCH_DEFAULT_TAKE <= self.SEARCH_MAX_TAKE:
            raise ValueError("SEARCH_DEFAULT_TAKE must be between 1 and SEARCH_MAX_TAKE")
        if self.SEARCH_MAX_SKIP < 0:
            raise ValueError("SEARCH_MAX_SKIP must not be negative")
        return self

    @model_validator(mode="after")
    def validate_production_secrets(self):
        """Ensure critical secrets are set when running in production."""
        if self.APP_ENV == "production":
            missing = [key for key in ["ADMIN_API_KEY"] if not getattr(self, key)]
            if missing:
                raise ValueError(
                    f"Missing required secrets for production: {', '.join(missing)}"
                )
        return self

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

settings = Settings()
