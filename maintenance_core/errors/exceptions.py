# =============================================================================
# maintenance_core/errors/exceptions.py
# Custom Exception Hierarchy for the Maintenance Registry
# =============================================================================

from typing import Optional, Dict, Any


class MaintenanceRegistryError(Exception):
    """
    Base exception for all Maintenance Registry errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "REMOTE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "MR_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class RemoteStoreError(MaintenanceRegistryError):
    """Raised when a call to the remote system of record fails"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation
        kwargs.setdefault("code", "REMOTE_001")

        super().__init__(
            message=message,
            details=details,
            **kwargs,
        )


class RemoteWriteError(RemoteStoreError):
    """
    Raised when the remote upsert fails after the local write succeeded.

    The record is already in the local mirror; only the remote copy is behind.
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        key: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key is not None:
            details["key"] = key

        super().__init__(
            message=message,
            table=table,
            operation="upsert",
            code="REMOTE_002",
            details=details,
            **kwargs,
        )

    @property
    def table(self) -> Optional[str]:
        return self.details.get("table")

    @property
    def key(self) -> Optional[Any]:
        return self.details.get("key")


class LocalStoreError(MaintenanceRegistryError):
    """Raised when the local SQLite mirror cannot be read or written"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            code="LOCAL_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class SequenceAllocationError(MaintenanceRegistryError):
    """Raised when a job running id cannot be allocated"""

    def __init__(
        self,
        message: str,
        job_type: Optional[str] = None,
        date_received: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if job_type:
            details["job_type"] = job_type
        if date_received:
            details["date_received"] = date_received

        super().__init__(
            message=message,
            code="SEQ_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(MaintenanceRegistryError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
