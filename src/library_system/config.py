"""Configuration management for the Library System.

Settings are loaded from the environment (``LIBRARY_SYSTEM_*``) or a
``.env`` file and validated with Pydantic v2:
1. Server metadata - name and version announced by the tool server
2. Persistence - SQLite database location
3. Circulation defaults - loan period used when a book doesn't set one
4. Operator session - the identity the tool server acts as
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibraryConfig(BaseSettings):
    """Library System configuration.

    Every field can be overridden with an environment variable of the same
    name prefixed with ``LIBRARY_SYSTEM_`` (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_SYSTEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="library-system",
        description="Name announced by the tool server",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    transport: Literal["stdio"] = Field(
        default="stdio",
        description="Tool server transport",
    )

    # === Database Configuration ===

    database_path: Path = Field(
        default=Path("data/library.db"),
        description="SQLite database file path",
    )

    # === Circulation Defaults ===

    default_borrow_duration: int = Field(
        default=14,
        description="Loan period in days for books added without one",
        ge=1,
        le=365,
    )

    # === Operator Session ===

    operator_name: str = Field(
        default="librarian",
        description="Name of the user the tool server is logged in as",
        min_length=1,
    )

    operator_role: str = Field(
        default="librarian",
        description="Role of the operator session (librarian, admin, both, none)",
        pattern=r"^(librarian|admin|both|none)$",
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    # === Validation Methods ===

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Resolve the database path and make sure its directory exists."""
        abs_path = v.absolute()
        abs_path.parent.mkdir(parents=True, exist_ok=True)

        if not abs_path.parent.is_dir():
            raise ValueError(f"Database directory {abs_path.parent} is not accessible")

        return abs_path

    @field_validator("operator_role", mode="before")
    @classmethod
    def normalize_operator_role(cls, v: str) -> str:
        """Accept role names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    def get_database_url(self) -> str:
        """Get the SQLAlchemy database URL."""
        return f"sqlite:///{self.database_path}"


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
