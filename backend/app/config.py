"""
Application configuration using pydantic-settings.
"""
from functools import lru_cache
from pydantic import model_validator
from pydantic_settings import BaseSettings

from app.core.geo import longitude_window_is_safe


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./civictrack.db"

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    project_name: str = "CivicTrack"

    # Moderation
    flag_hide_threshold: int = 3
    flag_reason_max_length: int = 200

    # Geo search (kilometers)
    radius_min_km: float = 0.1
    radius_max_km: float = 10.0
    default_radius_km: float = 5.0
    # Beyond this latitude the longitude window is not used for pruning.
    # Must stay low enough for radius_max_km, see check_geo_limits.
    polar_latitude_limit: float = 89.0

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 50

    # CORS
    backend_cors_origins: list[str] = [
        "http://localhost:3000",  # Next.js frontend
        "http://localhost:5173",
    ]

    @model_validator(mode="after")
    def check_geo_limits(self) -> "Settings":
        if not 0 < self.radius_min_km <= self.default_radius_km <= self.radius_max_km:
            raise ValueError("radius limits must satisfy 0 < min <= default <= max")
        if not longitude_window_is_safe(self.radius_max_km, self.polar_latitude_limit):
            raise ValueError(
                f"polar_latitude_limit {self.polar_latitude_limit} is too close to the pole "
                f"for radius_max_km {self.radius_max_km}; searches would miss issues"
            )
        return self

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
