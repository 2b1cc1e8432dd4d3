# =============================================================================
# maintenance_core/errors/__init__.py
# Centralized Error Handling for the Maintenance Registry
# =============================================================================

from .exceptions import (
    MaintenanceRegistryError,
    RemoteStoreError,
    RemoteWriteError,
    LocalStoreError,
    SequenceAllocationError,
    ConfigurationError,
)

from .handlers import (
    describe_error,
    handle_error,
)

__all__ = [
    # Exceptions
    "MaintenanceRegistryError",
    "RemoteStoreError",
    "RemoteWriteError",
    "LocalStoreError",
    "SequenceAllocationError",
    "ConfigurationError",
    # Handlers
    "describe_error",
    "handle_error",
]
