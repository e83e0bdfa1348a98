"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    insetmap_env: str = "development"
    insetmap_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Layout
    inset_margin: float = 0.02  # engine.constants.INSET_MARGIN

    # Inset border, merged with per-configuration overrides
    border_color: str = "black"
    border_linewidth: float = 1.0
    border_fill: str = "white"

    # Rendering
    render_dpi: int = 150

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def border_style(self) -> dict[str, object]:
        return {
            "color": self.border_color,
            "linewidth": self.border_linewidth,
            "fill": self.border_fill,
        }


settings = Settings()
