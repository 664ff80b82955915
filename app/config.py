from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./channel_pricing.db",
        alias="DATABASE_URL"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    # CORS - admin console URLs (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
        alias="ALLOWED_ORIGINS"
    )

    # ==============================================
    # Pricing
    # ==============================================
    # Default display unit for price tables: "per_million" or "per_thousand"
    price_display_unit: str = Field(default="per_million", alias="PRICE_DISPLAY_UNIT")

    # Fail fast with 409 instead of waiting when a channel row is locked (PostgreSQL only)
    pricing_lock_nowait: bool = Field(default=False, alias="PRICING_LOCK_NOWAIT")

    @field_validator('price_display_unit')
    @classmethod
    def validate_price_display_unit(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("per_million", "per_thousand"):
            raise ValueError("PRICE_DISPLAY_UNIT must be 'per_million' or 'per_thousand'")
        return v

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:5173"]

        seen = set()
        unique_origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in seen:
                seen.add(origin)
                unique_origins.append(origin)

        return unique_origins if unique_origins else ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
