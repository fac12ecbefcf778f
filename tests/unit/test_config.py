"""Unit tests for configuration models."""

import pytest
from pydantic import ValidationError

from schemasync.models.config import IdentityResolutionConfig, SchemaSyncConfig


def test_defaults():
    """Test default configuration values."""
    config = SchemaSyncConfig()

    assert config.staging_files_page_size == 100
    assert config.identity_resolution.enabled is False
    assert config.identity_resolution.enabled_destinations == ["SNOWFLAKE", "BQ"]


@pytest.mark.parametrize("page_size", [0, -5])
def test_page_size_must_be_positive(page_size):
    with pytest.raises(ValidationError):
        SchemaSyncConfig(staging_files_page_size=page_size)


def test_identity_enabled_destination_is_case_insensitive():
    config = IdentityResolutionConfig(enabled=True, enabled_destinations=["bq"])

    assert config.is_identity_resolution_enabled()
    assert config.is_identity_enabled_destination("BQ")
    assert config.is_identity_enabled_destination("bq")
    assert not config.is_identity_enabled_destination("SNOWFLAKE")


def test_from_env_without_variables():
    assert SchemaSyncConfig.from_env({}) == SchemaSyncConfig()


def test_from_env_reads_all_variables():
    """Test that every supported environment variable is applied."""
    config = SchemaSyncConfig.from_env(
        {
            "WAREHOUSE_STAGING_FILES_SCHEMA_PAGINATION_SIZE": "25",
            "WAREHOUSE_ENABLE_ID_RESOLUTION": "true",
            "WAREHOUSE_IDENTITY_ENABLED_DESTINATIONS": "BQ, POSTGRES,",
        }
    )

    assert config.staging_files_page_size == 25
    assert config.identity_resolution.enabled is True
    assert config.identity_resolution.enabled_destinations == ["BQ", "POSTGRES"]


@pytest.mark.parametrize(
    "value,expected",
    [("1", True), ("YES", True), ("on", True), ("false", False), ("0", False)],
)
def test_from_env_identity_switch(value, expected):
    config = SchemaSyncConfig.from_env({"WAREHOUSE_ENABLE_ID_RESOLUTION": value})
    assert config.identity_resolution.enabled is expected


def test_from_env_invalid_page_size():
    with pytest.raises(ValidationError):
        SchemaSyncConfig.from_env(
            {"WAREHOUSE_STAGING_FILES_SCHEMA_PAGINATION_SIZE": "0"}
        )


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("WAREHOUSE_STAGING_FILES_SCHEMA_PAGINATION_SIZE", "7")
    assert SchemaSyncConfig.from_env().staging_files_page_size == 7
