"""
Settings and configuration management using Pydantic BaseSettings.
All configuration values can be overridden via environment variables.
"""
import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden by creating a .env file in the project root
    or by setting environment variables with the same names.
    """

    LOG_LEVEL: str = "INFO"

    # ========================================================================
    # COMPLETION SERVICE (LLM) CONFIGURATION
    # ========================================================================
    LLM_PROVIDER: str = "openai"  # Available: "openai", "gemini"
    LLM_MODEL: str = "llama-3.1-8b-instant"
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_API_KEY_ENV: str = "GROQ_API_KEY"  # Name of the env var holding the key
    LLM_TIMEOUT: int = 30
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 2048
    LLM_MAX_RETRIES: int = 0
    LLM_RETRY_BACKOFF: float = 1.0
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_API_KEY_ENV: str = "GOOGLE_AI_API_KEY"

    # ========================================================================
    # TEXT EXTRACTION CONFIGURATION
    # ========================================================================
    EXTRACTION_MAX_CHARS: int = 4000
    MIN_USABLE_TEXT_CHARS: int = 30
    PDF_EXTRACTION_STRATEGY: str = "heuristic"  # Available: "heuristic", "pypdf2"
    MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024

    # ========================================================================
    # PIPELINE CONFIGURATION
    # ========================================================================
    MODEL_FAILURE_POLICY: str = "degrade"  # Available: "degrade", "fail"

    # ========================================================================
    # STORE CONFIGURATION
    # ========================================================================
    STORE_PROVIDER: str = "memory"  # Available: "memory", "supabase"
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_BUCKET: str = "resumes"

    # ========================================================================
    # RATE LIMITING
    # ========================================================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 3600
    RATE_LIMIT_BACKEND: str = "memory"  # Available: "memory", "redis"
    REDIS_URL: str = "redis://localhost:6379/0"

    # ========================================================================
    # API SERVER
    # ========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 9000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


def load_api_key(env_name: str) -> str:
    """Read a provider API key from the process environment.

    Keys are resolved on every call instead of being cached in the settings
    singleton, so rotating a key does not require a restart.
    """
    return os.environ.get(env_name, "").strip()


# Singleton instance
settings = Settings()
