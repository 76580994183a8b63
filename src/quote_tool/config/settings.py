"""
Centralized settings and path configuration for the quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _optional_path(env_key: str) -> Optional[Path]:
    raw = (os.getenv(env_key) or "").strip()
    return Path(raw) if raw else None


def _float_from_env(env_key: str, default: float) -> float:
    raw = (os.getenv(env_key) or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Branding used on invoices and pitch prompts
    agency_name: str = "OneWay media"

    # Optional rate card override (service,min,rate)
    rate_card_csv: Optional[Path] = None

    # Advisory text generator
    genai_api_key: str = ""
    genai_model: str = "gemini-3-flash-preview"
    genai_timeout: float = 15.0

    # Invoice image rendering
    font_path: Optional[Path] = None

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment and the project structure."""
        root = project_root or get_project_root()

        return cls(
            project_root=root,
            agency_name=(os.getenv('QUOTE_TOOL_AGENCY_NAME') or "OneWay media").strip(),
            rate_card_csv=_optional_path('QUOTE_TOOL_RATE_CARD') or root / 'rate_card.csv',
            genai_api_key=(os.getenv('GOOGLE_GENAI_API_KEY') or os.getenv('API_KEY') or "").strip(),
            genai_model=(os.getenv('QUOTE_TOOL_GENAI_MODEL') or "gemini-3-flash-preview").strip(),
            genai_timeout=_float_from_env('QUOTE_TOOL_GENAI_TIMEOUT', 15.0),
            font_path=_optional_path('QUOTE_TOOL_FONT_PATH'),
            log_level=(os.getenv('QUOTE_TOOL_LOG_LEVEL') or "INFO").strip().upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
