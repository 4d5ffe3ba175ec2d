"""
Centralized configuration management

All configuration values are read from environment variables,
with sensible defaults for development.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # --- FastAPI ---
    app_host: str = "0.0.0.0"
    app_port: int = 5000
    render_app_port: int = 4000
    log_level: str = "info"
    app_env: str = "development"  # development | production
    cors_origins: str = "*"
    max_body_bytes: int = 50 * 1024 * 1024

    # --- Uploads / background removal ---
    upload_dir: str = "uploads"
    upload_max_bytes: int = 10 * 1024 * 1024
    rembg_model: str = "isnet-general-use"

    # --- Renderer ---
    render_content_timeout_ms: int = 120000
    render_stabilize_budget_ms: int = 5000
    render_settle_frames: int = 10
    render_frame_delay_ms: int = 50
    render_final_delay_ms: int = 500
    render_max_dimension: int = 8192
    render_inline_fonts: bool = True
    font_fetch_timeout_seconds: float = 10.0
    # Modern UA so Google Fonts serves woff2
    render_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    fonts_dir: str = "fonts"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance (singleton)."""
    return Settings()
