"""Configuration management for the catalog loader."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class LoaderSettings(BaseSettings):
    """Catalog loader settings loaded from environment variables."""

    # Frame graph
    max_frame_depth: int = 50  # Deeper nesting is treated as a cycle

    # Body defaults
    default_albedo: float = 0.5
    default_obliquity: float = 0.0  # Degrees, used by rotation models that omit it

    # Timelines
    # When an entry defines no orbit at all, place the body at the center of
    # its orbit frame instead of rejecting the entry with NoTimelineData.
    synthesize_default_orbit: bool = True

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "SSC_"
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> LoaderSettings:
    """Get cached settings instance."""
    return LoaderSettings()
