"""Configuration settings for the flow engine."""

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from .flow import DEFAULT_WHATSAPP_MESSAGE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(
        env_prefix="CHATFLOW_",
        env_file=".env",
        extra="ignore",
    )

    # Persistence backends: memory, redis, http
    flow_store: str = "memory"
    config_store: str = "memory"

    # Redis Configuration
    redis_url: str = "redis://localhost:6379"
    redis_prefix: str = "chatflow:"
    flow_key: str = "main"

    # Site API Configuration
    api_base_url: str = "http://localhost:3000"
    http_timeout_seconds: float = 10.0

    # Validation
    max_options_per_node: int = 12

    # WhatsApp fallback used when the stored chatbot config has no number
    whatsapp_number: str = ""
    whatsapp_message: str = DEFAULT_WHATSAPP_MESSAGE

    # Optional YAML/JSON file replacing the built-in seed flow
    seed_flow_path: str = ""


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
