"""Configuration models."""

from schemasync.models.config import IdentityResolutionConfig, SchemaSyncConfig

__all__ = ["IdentityResolutionConfig", "SchemaSyncConfig"]
