"""Application configuration read from environment variables."""

import os


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class AppConfig:
    """Centralized application configuration."""

    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
    SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

    LISTINGS_TABLE = os.environ.get("LISTINGS_TABLE", "listings")
    PROFILES_TABLE = os.environ.get("PROFILES_TABLE", "profiles")
    IMAGE_BUCKET = os.environ.get("IMAGE_BUCKET", "house-photos")

    LISTINGS_PAGE_SIZE = int(os.environ.get("LISTINGS_PAGE_SIZE", "30"))
    LISTING_LOG_MAX_ENTRIES = int(os.environ.get("LISTING_LOG_MAX_ENTRIES", "50"))
    NOTICE_DISMISS_SECONDS = float(os.environ.get("NOTICE_DISMISS_SECONDS", "3"))

    APP_BASE_URL = os.environ.get("APP_BASE_URL", "http://localhost:5173").rstrip("/")
    DEFAULT_REDIRECT = "/dashboard"

    @classmethod
    def use_llm_extraction(cls) -> bool:
        """Feature flag for LLM-assisted description extraction (read per call)."""
        return _env_bool("USE_LLM_EXTRACTION", "false")

    @classmethod
    def llm_provider(cls) -> str:
        return os.environ.get("LLM_PROVIDER", "anthropic").lower()

    @classmethod
    def llm_model(cls) -> str:
        return os.environ.get("LLM_MODEL", "claude-sonnet-4-20250514")
