"""Engine configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (PATHFX_*) and .env.

    Priority: environment variables > .env > defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="PATHFX_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Flattening
    flatten_tolerance: float = 0.25  # max chord deviation in canvas units
    flatten_max_depth: int = 16  # recursion limit for curve subdivision

    # Measure cache
    measure_cache_size: int = 64  # paths kept per MeasureCache

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    # Preview rendering
    preview_width: int = 800
    preview_height: int = 800
    preview_background: str = "#FFFFFF"
    preview_stroke_color: str = "#E94560"
    preview_stroke_width: int = 3
    preview_padding: int = 20


settings = Settings()
