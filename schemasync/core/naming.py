"""Destination identifier casing and bookkeeping table names."""

DISCARDS_TABLE = "rudder_discards"
IDENTITY_MERGE_RULES_TABLE = "rudder_identity_merge_rules"
IDENTITY_MAPPINGS_TABLE = "rudder_identity_mappings"

# Destinations whose unquoted identifiers are stored upper-cased
UPPERCASE_DESTINATIONS = frozenset({"SNOWFLAKE"})


def to_provider_case(destination_type: str, name: str) -> str:
    """Render an identifier the way the destination stores it.

    Args:
        destination_type: Destination type (e.g., 'SNOWFLAKE', 'BQ')
        name: Raw identifier (e.g., 'received_at')

    Returns:
        The identifier in destination casing (e.g., 'RECEIVED_AT' on Snowflake)
    """
    if destination_type.upper() in UPPERCASE_DESTINATIONS:
        return name.upper()
    return name
