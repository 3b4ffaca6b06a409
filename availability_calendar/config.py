from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")  # JSON lines for production

    # CORS - Frontend URLs from environment (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:8081,http://127.0.0.1:8081,http://localhost:19006",
        alias="ALLOWED_ORIGINS"
    )

    # ==============================================
    # Calendar Event Model
    # ==============================================
    # Join booked days whose reservation ids differ but channel/guest/check-in match
    calendar_fallback_matching: bool = Field(default=True, alias="CALENDAR_FALLBACK_MATCHING")

    # Months loaded on first open, per device layout
    calendar_phone_months: int = Field(default=3, alias="CALENDAR_PHONE_MONTHS")
    calendar_tablet_months: int = Field(default=4, alias="CALENDAR_TABLET_MONTHS")
    calendar_tablet_landscape_months: int = Field(default=6, alias="CALENDAR_TABLET_LANDSCAPE_MONTHS")

    # Months added per "load previous" / "load next", one per grid column
    calendar_phone_page_months: int = Field(default=1, alias="CALENDAR_PHONE_PAGE_MONTHS")
    calendar_tablet_page_months: int = Field(default=2, alias="CALENDAR_TABLET_PAGE_MONTHS")
    calendar_tablet_landscape_page_months: int = Field(default=3, alias="CALENDAR_TABLET_LANDSCAPE_PAGE_MONTHS")

    @field_validator(
        'calendar_phone_months',
        'calendar_tablet_months',
        'calendar_tablet_landscape_months',
        'calendar_phone_page_months',
        'calendar_tablet_page_months',
        'calendar_tablet_landscape_page_months'
    )
    @classmethod
    def validate_month_count(cls, v: int) -> int:
        """Month counts must be positive"""
        if v < 1:
            raise ValueError("Month counts must be at least 1")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:3000"]

        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")  # Remove trailing slashes
            if origin and origin not in origins:
                origins.append(origin)

        return origins if origins else ["http://localhost:3000"]

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
