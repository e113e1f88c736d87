"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/tierlist/core/config.py
# Project root is: backend/tierlist/core/../../../
_current_file = Path(__file__).resolve()
_package_dir = _current_file.parent.parent
_backend_dir = _package_dir.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=True)

DEFAULT_CATALOG_PATH = _package_dir / "data" / "imageset.config.json"


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "TierList"
    app_env: str = Field(default="development", description="Application environment")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )
    base_url: str = Field(
        default="",
        description="Origin used to make image URLs absolute (e.g. https://tiers.example.com)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"tierlist.services": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/tierlist.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=14,
        ge=1,
        description="Number of days to keep log files"
    )
    log_image_data: bool = Field(
        default=False,
        description="Log embedded image data in full instead of truncating it"
    )

    # Catalog and custom items
    catalog_path: Optional[str] = Field(
        default=None,
        description="Path to the bundled catalog JSON (packaged default when unset)"
    )
    custom_items_path: str = Field(
        default="~/.tierlist/custom_items.json",
        description="JSON file used as the local key-value store by client sessions"
    )
    custom_items_key: str = Field(default="customItems", description="Key holding custom item records")
    placeholder_image: str = Field(
        default="/placeholder-image.jpg",
        description="Image used for items that no source can resolve"
    )

    # Board state
    state_query_param: str = Field(default="state", description="Query parameter carrying the board token")
    default_template: str = Field(default="5rows", description="Template used when no state is available")

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_base_url(cls, v):
        """Normalize the configured origin"""
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def resolved_catalog_path(self) -> Path:
        """Catalog file actually used at startup"""
        if self.catalog_path:
            return Path(self.catalog_path).expanduser()
        return DEFAULT_CATALOG_PATH

    @property
    def resolved_custom_items_path(self) -> Path:
        return Path(self.custom_items_path).expanduser()

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        env_prefix="TIERLIST_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
