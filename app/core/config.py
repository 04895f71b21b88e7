# python
# app/core/config.py
"""Configuration settings for the Chit Chat API.

Uses Pydantic BaseSettings for environment variable management.
"""
import secrets
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.services.generation import GenerationConfig


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


DEFAULT_SYSTEM_PROMPT = (
    "You are Chit Chat, a helpful AI assistant. "
    "Respond to the user's messages in a conversational and helpful manner."
)


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Chit Chat API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret key for JWT encoding",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_days: int = Field(default=7, description="JWT token expiration in days")
    auth_cookie_name: str = Field(default="auth-token", description="Session cookie name")
    auth_cookie_secure: bool = Field(default=False, description="Send session cookie over HTTPS only")

    # ===== Database Settings =====
    database_url: str | None = Field(
        default="sqlite+aiosqlite:///./chitchat.db", description="Database connection URL"
    )
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== AI Service (Gemini) =====
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-1.5-flash", description="Gemini model to use")
    gemini_max_tokens: int = Field(default=2048, description="Maximum tokens for Gemini")
    gemini_temperature: float = Field(default=0.8, description="Sampling temperature")
    ai_request_timeout: int = Field(default=60, description="AI request timeout in seconds")
    ai_max_retry_attempts: int = Field(default=3, description="Retries on rate limit or quota errors")
    ai_retry_backoff_factor: float = Field(default=2.0, description="Exponential backoff multiplier")
    ai_retry_min_wait: int = Field(default=2, description="Minimum wait between retries in seconds")
    ai_retry_max_wait: int = Field(default=30, description="Maximum wait between retries in seconds")
    ai_max_concurrent_requests: int = Field(
        default=10, description="Concurrent provider calls allowed per process"
    )

    # ===== Chat Behaviour =====
    chat_system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT, description="Preamble placed before the conversation history"
    )
    chat_create_on_missing_conversation: bool = Field(
        default=True,
        description="Start a new conversation when the requested id is unknown or deleted",
    )
    conversation_name_max_length: int = Field(default=50, description="Maximum generated title length")
    conversation_name_fallback_length: int = Field(
        default=30, description="Characters of the first message used when title generation fails"
    )

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    def generation_config(self) -> GenerationConfig:
        """Build the explicit provider configuration handed to the generator."""
        return GenerationConfig(
            api_key=self.gemini_api_key or "",
            model_name=self.gemini_model,
            max_output_tokens=self.gemini_max_tokens,
            temperature=self.gemini_temperature,
            request_timeout=self.ai_request_timeout,
            max_retry_attempts=self.ai_max_retry_attempts,
            retry_backoff_factor=self.ai_retry_backoff_factor,
            retry_min_wait=self.ai_retry_min_wait,
            retry_max_wait=self.ai_retry_max_wait,
            max_concurrent_requests=self.ai_max_concurrent_requests,
        )

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            if lv in ["test"]:
                return "testing"
            return lv
        return v

    @field_validator("conversation_name_max_length", "conversation_name_fallback_length")
    @classmethod
    def validate_name_lengths(cls, v):
        if v < 1 or v > 255:
            raise ValueError("Conversation name lengths must be between 1 and 255")
        return v

    @field_validator("ai_max_concurrent_requests", "ai_max_retry_attempts")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if settings.is_production and not settings.gemini_api_key:
            errors.append("GEMINI_API_KEY is required in production")
        if settings.is_production and not settings.auth_cookie_secure:
            errors.append("AUTH_COOKIE_SECURE must be enabled in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "ai_enabled": settings.has_ai_enabled,
            "create_on_missing_conversation": settings.chat_create_on_missing_conversation,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "model": settings.gemini_model,
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
    "DEFAULT_SYSTEM_PROMPT",
]
