"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ENHANCER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Food Image Enhancer"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: list[str] = ["*"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Hosted inference
    inference_base_url: str = "https://router.huggingface.co/hf-inference/models"
    style_model: str = "stabilityai/stable-diffusion-xl-base-1.0"
    background_model: str = "facebook/detr-resnet-50-panoptic"
    quality_model: str = "caidas/swin2SR-classical-sr-x2-64"
    inference_timeout: float = 120.0  # Cold models can take a minute to load

    # Error reporting
    error_detail_max_length: int = 160  # Characters of upstream error body shown to users

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB

    # Suggested food categories for the form (any label is accepted)
    food_categories: list[str] = [
        "Pizza",
        "Burger",
        "Sushi",
        "Pasta",
        "Salad",
        "Dessert",
        "Steak",
        "Tacos",
    ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
