"""
Application settings management.

Settings are loaded from environment variables with .env file support.
All configuration is validated using Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Packaged configuration files (default hierarchy) live next to the package code
PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_HIERARCHY_PATH = PACKAGE_CONFIG_DIR / "default_hierarchy.yaml"


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Environment variables (prefixed with HEALTHSCORE_) take precedence over
    .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALTHSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Evaluation
    # ==========================================================================

    strict_mode: bool = Field(
        default=False,
        description="Abort aggregation upward on any child error (default: lenient)",
    )
    hierarchy_path: Optional[Path] = Field(
        default=None,
        description="Custom KPI hierarchy document (YAML or JSON). "
        "None selects the packaged default hierarchy.",
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    log_sessions_to_keep: int = Field(
        default=5, ge=1, le=100, description="Number of recent log files to retain"
    )

    # ==========================================================================
    # Server Configuration
    # ==========================================================================

    host: str = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")

    def resolved_hierarchy_path(self) -> Path:
        """Hierarchy document to load when a caller does not supply one."""
        return self.hierarchy_path or DEFAULT_HIERARCHY_PATH


# Global settings instance
settings = Settings()
