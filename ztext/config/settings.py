"""
settings.py

This module provides configuration management for ZText.

Features:
- Centralized library configuration using Pydantic settings
- Environment overrides with the ZTEXT_ prefix
- Constants for library-wide use

Usage:
Import appsettings for configuration values.

Environment:
- `ZTEXT_BEQUIET=True` suppresses LOG output.
- `ZTEXT_ERRORCHECKS=False` skips the programmer-error checks in tree operations.
- `ZTEXT_MAXDEPTH=<n>` bounds nested evaluation.
"""

from typing import Final
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Characters allowed in variable and command names
NAME_CHARACTERS: Final[frozenset[str]] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_"
)


class App(BaseSettings):
    """
    Library settings model.

    Settings can be overridden through environment variables with ZTEXT_ prefix.

    Attributes:
        beQuiet: Suppress detailed logging output
        errorChecks: Validate parameters of tree operations
        maxDepth: Maximum nesting of evaluations before output is cut to ""
    """

    beQuiet: bool = False
    errorChecks: bool = True
    maxDepth: int = Field(default=128, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="ZTEXT_",  # Environment variables with this prefix override settings
        case_sensitive=False,  # Allow case-insensitive environment variables
        extra="allow",  # Allow additional attributes not defined in the model
    )


# Create the library settings instance
appsettings: Final[App] = App()
