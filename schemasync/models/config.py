"""Configuration models for schema reconciliation."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_IDENTITY_ENABLED_DESTINATIONS = ["SNOWFLAKE", "BQ"]

_TRUE_VALUES = ("1", "true", "yes", "on")


class IdentityResolutionConfig(BaseModel):
    """Feature switches for identity-resolution bookkeeping tables."""

    enabled: bool = Field(
        default=False, description="Global switch for identity resolution"
    )
    enabled_destinations: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IDENTITY_ENABLED_DESTINATIONS),
        description="Destination types eligible for identity resolution",
    )

    def is_identity_resolution_enabled(self) -> bool:
        return self.enabled

    def is_identity_enabled_destination(self, destination_type: str) -> bool:
        return destination_type.upper() in {d.upper() for d in self.enabled_destinations}


class SchemaSyncConfig(BaseModel):
    """Settings resolved once per reconciliation cycle."""

    staging_files_page_size: int = Field(
        default=100,
        description="Number of staging file schemas read per query",
        gt=0,
    )
    identity_resolution: IdentityResolutionConfig = Field(
        default_factory=IdentityResolutionConfig,
        description="Identity resolution switches",
    )

    @field_validator("staging_files_page_size")
    @classmethod
    def validate_page_size(cls, v):
        """Validate staging_files_page_size is positive."""
        if v <= 0:
            raise ValueError("staging_files_page_size must be greater than 0")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SchemaSyncConfig":
        """Build configuration from environment variables.

        Reads:
        - WAREHOUSE_STAGING_FILES_SCHEMA_PAGINATION_SIZE
        - WAREHOUSE_ENABLE_ID_RESOLUTION
        - WAREHOUSE_IDENTITY_ENABLED_DESTINATIONS (comma separated)

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        identity: dict = {}

        page_size = env.get("WAREHOUSE_STAGING_FILES_SCHEMA_PAGINATION_SIZE")
        if page_size:
            values["staging_files_page_size"] = page_size

        enabled = env.get("WAREHOUSE_ENABLE_ID_RESOLUTION")
        if enabled:
            identity["enabled"] = enabled.strip().lower() in _TRUE_VALUES

        destinations = env.get("WAREHOUSE_IDENTITY_ENABLED_DESTINATIONS")
        if destinations:
            identity["enabled_destinations"] = [
                d.strip() for d in destinations.split(",") if d.strip()
            ]

        if identity:
            values["identity_resolution"] = IdentityResolutionConfig(**identity)
        return cls(**values)
