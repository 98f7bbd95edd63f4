"""
Configuration settings for the Transcript Labeler.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PROMPT_TEMPLATES_DIR = str(Path(__file__).parent / "llm" / "prompts")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Transcript Labeler"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON
    LOG_LEVEL: str = "INFO"

    # === Anthropic Configuration ===
    ANTHROPIC_API_KEY: str = ""  # Required unless DEBUG_MODE bypasses remote calls
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_API_VERSION: str = "2023-06-01"
    ANTHROPIC_MODEL: str = "claude-3-5-sonnet-20240620"
    ANTHROPIC_TIMEOUT: int = 60  # seconds

    # === LLM Generation Parameters ===
    LLM_MAX_TOKENS: int = 500
    LLM_MAX_RETRIES: int = 2  # Remote call attempts per batch, each through the limiter

    # === Batching ===
    MAX_BATCH_CHARS: int = 4000  # Summed text length per batch
    CONCURRENT_DISPATCH: bool = True  # False dispatches batches one after another

    # === Global Throughput Limiter ===
    RATE_LIMIT_INTERVAL_SECONDS: float = 1.0  # One remote call start per interval

    # === Per-Caller Quota ===
    QUOTA_WINDOW_SECONDS: int = 3600
    QUOTA_LIMIT_IDENTIFIED: int = 10
    QUOTA_LIMIT_ANONYMOUS: int = 200

    # === Identity ===
    PRINCIPAL_HEADER: str = "x-ms-client-principal"
    ANONYMOUS_CALLER_ID: str = "anonymous"

    # === Prompts ===
    PROMPT_TEMPLATES_DIR: str = DEFAULT_PROMPT_TEMPLATES_DIR

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    # === Debug Flags ===
    DEBUG_MODE: bool = False  # Bypass remote calls, every category is ""
    DEBUG_API: bool = False  # With DEBUG_MODE: real calls plus diagnostic records


# Global settings instance
settings = Settings()
