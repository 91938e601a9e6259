"""Configuration management for comparison thresholds, highlight geometry, and pipeline defaults."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCCOMPARE_",
        extra="ignore",
    )

    # Text Comparison
    minor_change_fraction: float = Field(
        default=0.3,
        description="Fraction of differing token positions reported as minor changes (floor applied)",
    )
    similarity_precision: int = Field(
        default=2,
        description="Decimal places used for every similarity percentage",
    )
    visual_min_token_length: int = Field(
        default=1,
        description="Tokens of this length or shorter are ignored by lexical diff in layout highlighting",
    )
    markup_min_token_length: int = Field(
        default=2,
        description="Tokens of this length or shorter are ignored by lexical diff in prose highlighting",
    )

    # Glyph Highlighting
    highlight_baseline_offset: float = Field(
        default=0.8,
        description="Fraction of glyph height the highlight top edge is raised above the baseline",
    )
    highlight_fallback_width: float = Field(
        default=50.0,
        description="Highlight width in page units when the glyph run has no usable width",
    )
    highlight_fallback_height: float = Field(
        default=20.0,
        description="Highlight height in page units when the glyph run has no usable height",
    )
    highlight_alpha: float = Field(
        default=0.35,
        description="Opacity of highlight fills painted on rasterized pages (0.0-1.0)",
    )
    removed_color: tuple[int, int, int] = Field(
        default=(255, 0, 0),
        description="RGB tint for tokens removed from the first document",
    )
    added_color: tuple[int, int, int] = Field(
        default=(0, 200, 0),
        description="RGB tint for tokens added in the second document",
    )
    removed_markup_color: str = Field(
        default="#fecaca",
        description="CSS background color wrapping removed tokens in markup output",
    )
    added_markup_color: str = Field(
        default="#bbf7d0",
        description="CSS background color wrapping added tokens in markup output",
    )

    # Image Comparison
    image_pixel_threshold: int = Field(
        default=30,
        description="Channel delta above which a pixel counts as different (0-255)",
    )
    image_threshold_policy: str = Field(
        default="any_channel",
        description="Pixel threshold policy: 'any_channel' (max RGB delta) or 'sum_of_channels' (summed RGB delta)",
    )
    image_dimension_policy: str = Field(
        default="clip",
        description="How differently sized images are handled: 'clip' to the overlap or 'strict' (incomparable)",
    )

    # Pipeline
    default_highlight_mode: str = Field(
        default="positional",
        description="Highlight mode: 'positional', 'lexical-markup' or 'lexical-visual'",
    )
    visual_page_index: int = Field(
        default=0,
        description="Zero-based page sampled for visual PDF comparisons",
    )
    raster_target_width: int = Field(
        default=800,
        description="Output width in pixels for rasterized pages (aspect ratio preserved)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: str | None = Field(default=None, description="Optional log file path")


def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _get_settings()


@lru_cache()
def _get_settings() -> Settings:
    return Settings()


settings = get_settings()
