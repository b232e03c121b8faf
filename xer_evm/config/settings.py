"""
Configuration settings for the XER analytics core.
Load configuration from environment variables or a project-root .env file.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
PROJECT_ROOT = Path(__file__).parent.parent.parent
env_file = PROJECT_ROOT / '.env'
if env_file.exists():
    load_dotenv(env_file)


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


class Settings:
    """Application settings loaded from environment variables."""

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = _optional_path(os.getenv('LOG_DIR'))

    # ============================================================================
    # Input limits
    # ============================================================================
    MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', '50'))
    XER_ENCODING = os.getenv('XER_ENCODING', 'utf-8')

    # ============================================================================
    # Gemini Configuration (narrative summaries)
    # ============================================================================
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY', '')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
    GEMINI_MAX_RETRIES = int(os.getenv('GEMINI_MAX_RETRIES', '5'))

    @classmethod
    def max_upload_bytes(cls) -> int:
        """Largest XER file accepted, in bytes."""
        return cls.MAX_UPLOAD_MB * 1024 * 1024

    @classmethod
    def validate_required_settings(cls, with_summary: bool = False) -> list[str]:
        """
        Validate that all required settings are configured.
        Returns list of missing required settings.
        """
        missing = []

        # Only the narrative summary talks to an external service
        if with_summary and not cls.GEMINI_API_KEY:
            missing.append('GEMINI_API_KEY')

        return missing


# Create settings instance
settings = Settings()
