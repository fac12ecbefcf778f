"""Warehouse manager registry.

Maps destination types (e.g. 'DUCKDB') to factories creating the manager
that introspects that destination.
"""

from __future__ import annotations

from typing import Any, Callable, overload

from schemasync.core.exceptions import ConfigurationError
from schemasync.warehouse.base import WarehouseManager

ManagerFactory = Callable[..., WarehouseManager]

_manager_registry: dict[str, ManagerFactory] = {}


@overload
def register_manager(destination_type: str) -> Callable[[ManagerFactory], ManagerFactory]: ...


@overload
def register_manager(destination_type: str, factory: ManagerFactory) -> None: ...


def register_manager(
    destination_type: str,
    factory: ManagerFactory | None = None,
) -> Callable[[ManagerFactory], ManagerFactory] | None:
    """Register a warehouse manager factory.

    Can be used as a decorator or called directly:

        @register_manager("DUCKDB")
        def create_duckdb_manager(**options):
            return DuckDBManager(**options)

        register_manager("DUCKDB", create_duckdb_manager)

    Args:
        destination_type: Destination type the factory serves (case-insensitive).
        factory: Factory function (optional if used as decorator).

    Raises:
        ConfigurationError: If the destination type is already registered.
    """
    key = destination_type.upper()

    def _register(f: ManagerFactory) -> ManagerFactory:
        if key in _manager_registry:
            raise ConfigurationError(
                f"Warehouse manager '{key}' is already registered",
                context={"destination_type": key},
            )
        _manager_registry[key] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_manager(destination_type: str, **options: Any) -> WarehouseManager:
    """Create the warehouse manager for a destination type.

    Args:
        destination_type: Destination type (case-insensitive).
        **options: Passed to the registered factory (e.g. database path).

    Raises:
        ConfigurationError: If no manager is registered for the type.
    """
    key = destination_type.upper()
    factory = _manager_registry.get(key)
    if factory is None:
        available = ", ".join(sorted(_manager_registry.keys())) or "(none)"
        raise ConfigurationError(
            f"Unknown warehouse type: '{destination_type}'",
            context={"destination_type": destination_type, "available_types": available},
        )
    return factory(**options)


def list_manager_types() -> list[str]:
    """Return all registered destination types."""
    return sorted(_manager_registry.keys())


def unregister_manager(destination_type: str) -> None:
    """Remove a registered manager. Intended for testing only."""
    _manager_registry.pop(destination_type.upper(), None)
