"""
Configuration module for Invoice Desk.

Handles settings for the extraction API connection, upload limits,
presentation options, and application-wide settings with validation.
"""

import copy
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_URL = "http://localhost:8080"

# Content types accepted by the upload widget, with their file extensions
ACCEPTED_FILE_TYPES = {
    "application/pdf": [".pdf"],
    "image/png": [".png"],
    "image/jpeg": [".jpg", ".jpeg"],
    "image/webp": [".webp"],
    "text/plain": [".txt"],
}


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("false", "0", "no", "off")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class UploadStyle(Enum):
    """Presentation of the upload widget."""
    DROPZONE = "dropzone"  # Uploads as soon as a file is dropped
    COMPACT = "compact"    # File picker with explicit Upload button


def _default_upload_style() -> UploadStyle:
    try:
        return UploadStyle(os.getenv("INVOICE_UPLOAD_STYLE", UploadStyle.DROPZONE.value).lower())
    except ValueError:
        return UploadStyle.DROPZONE


@dataclass
class ApiConfig:
    """Configuration for the invoice extraction REST API."""
    base_url: str = field(
        default_factory=lambda: os.getenv("INVOICE_API_URL") or os.getenv("API_BASE_URL") or DEFAULT_API_URL
    )
    timeout: int = field(default_factory=lambda: _env_int("INVOICE_API_TIMEOUT", 30))  # Seconds
    upload_timeout: int = field(default_factory=lambda: _env_int("INVOICE_UPLOAD_TIMEOUT", 600))  # Extraction is slow
    verify_ssl: bool = field(default_factory=lambda: _env_flag("SSL_VERIFY", True))

    @property
    def api_root(self) -> str:
        return f"{self.base_url.rstrip('/')}/api"

    @staticmethod
    def validate_connection(base_url: str = DEFAULT_API_URL, timeout: int = 5) -> tuple[bool, str]:
        """Validate the extraction API is running and accessible."""
        import requests
        url = f"{base_url.rstrip('/')}/api/invoices"
        try:
            response = requests.get(url, timeout=timeout)
            if response.status_code == 200:
                try:
                    count = len(response.json())
                except (ValueError, TypeError):
                    return False, "API responded but returned an unreadable invoice list"
                return True, f"API connected. {count} invoice(s) available"
            return False, f"API returned status {response.status_code}"
        except requests.exceptions.ConnectionError:
            return False, (
                f"Cannot connect to the API at {base_url}. Ensure the backend is running "
                "or set INVOICE_API_URL in .env"
            )
        except requests.exceptions.Timeout:
            return False, f"API at {base_url} timed out"


@dataclass
class UploadConfig:
    """Configuration for document uploads."""
    max_file_size_mb: int = 16  # Advisory; the server enforces the real limit
    accepted_types: dict = field(default_factory=lambda: dict(ACCEPTED_FILE_TYPES))
    success_delay_seconds: float = 2.0

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def accepted_extensions(self) -> list[str]:
        return [ext for exts in self.accepted_types.values() for ext in exts]


@dataclass
class AppConfig:
    """Main application configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    upload_style: UploadStyle = field(default_factory=_default_upload_style)

    # Page settings
    page_title: str = "Document Extraction App"
    page_subtitle: str = "Upload invoices and extract structured data using AI"

    # Export settings
    excel_currency_format: str = '"$"#,##0.00'


def validate_system_requirements(config: Optional[AppConfig] = None) -> dict:
    """
    Validate all system requirements on startup.

    Args:
        config: Configuration to check; defaults to the global one

    Returns:
        Dictionary with validation results for each requirement.
    """
    results = {}
    config = config or get_config()

    api_ok, api_msg = ApiConfig.validate_connection(config.api.base_url)
    results["api"] = {
        "available": api_ok,
        "message": api_msg,
        "base_url": config.api.base_url,
    }

    # Check Python dependencies
    try:
        import openpyxl
        import pandas
        import PIL
        import pydantic
        results["python_deps"] = {
            "installed": True,
            "message": "All Python dependencies installed",
        }
    except ImportError as e:
        results["python_deps"] = {
            "installed": False,
            "message": f"Missing Python dependency: {e.name}",
        }

    return results


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def session_config() -> AppConfig:
    """Independent copy of the global configuration for one browser session."""
    return copy.deepcopy(get_config())


def update_config(**kwargs) -> AppConfig:
    """Update configuration with new values."""
    config = get_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


def reset_config() -> None:
    """Drop the global configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
