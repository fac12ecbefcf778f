"""Exception hierarchy for the schemasync package."""


class SchemaSyncError(Exception):
    """Base exception for all schemasync errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class PersistenceError(SchemaSyncError):
    """Raised when reading or writing the schema cache or staging files fails."""

    pass


class DeserializationError(PersistenceError):
    """Raised when a stored schema payload cannot be decoded."""

    pass


class IntrospectionError(SchemaSyncError):
    """Raised when fetching the live schema from a warehouse fails."""

    pass


class ConfigurationError(SchemaSyncError):
    """Raised when a store, manager or setting cannot be resolved."""

    pass
