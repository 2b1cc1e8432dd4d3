# =============================================================================
# maintenance_core/offline/connection_manager.py
# Remote Availability Tracking
# =============================================================================
"""
ConnectionManager - Tracks whether the remote system of record is usable.

Features:
- Configuration check (no credentials means offline mode)
- Status derived from the outcome of every remote call
- On-demand TCP probe of the Supabase host
- Event callbacks for status changes
"""

from __future__ import annotations
import socket
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import urlparse
import logging

from maintenance_core.config import RegistryConfig

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"                   # Last remote call succeeded
    DEGRADED = "degraded"               # Last remote call failed
    OFFLINE = "offline"                 # Remote host unreachable
    NOT_CONFIGURED = "not_configured"   # No usable Supabase credentials
    UNKNOWN = "unknown"                 # No remote call made yet


@dataclass
class ConnectionState:
    """Current connection state with metadata."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None


class ConnectionManager:
    """
    Connection state for one data service instance.

    Usage:
        manager = ConnectionManager(config)
        if manager.is_configured:
            # Try the remote first
        else:
            # Local mirror only
    """

    def __init__(self, config: RegistryConfig):
        self._config = config
        self._state = ConnectionState()
        self._callbacks: List[Callable[[ConnectionState], None]] = []
        if not config.is_remote_configured:
            self._state.status = ConnectionStatus.NOT_CONFIGURED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def is_configured(self) -> bool:
        """Whether a remote should be attempted at all."""
        return self._config.is_remote_configured

    @property
    def is_online(self) -> bool:
        return self._state.status == ConnectionStatus.ONLINE

    def record_success(self) -> None:
        """Record a successful remote call."""
        self._state.last_check = datetime.now()
        self._state.last_online = self._state.last_check
        self._state.consecutive_failures = 0
        self._state.error_message = None
        self._set_status(ConnectionStatus.ONLINE)

    def record_failure(self, error: Optional[BaseException] = None) -> None:
        """Record a failed remote call."""
        self._state.last_check = datetime.now()
        self._state.consecutive_failures += 1
        self._state.error_message = str(error) if error is not None else None
        self._set_status(ConnectionStatus.DEGRADED)

    def _set_status(self, status: ConnectionStatus) -> None:
        old_status = self._state.status
        self._state.status = status
        if old_status != status:
            logger.info(f"Connection status changed: {old_status.value} -> {status.value}")
            self._notify_callbacks()

    def check_connection(self) -> ConnectionState:
        """
        Probe the Supabase host over TCP and update state.

        Returns:
            Updated ConnectionState
        """
        if not self.is_configured:
            self._set_status(ConnectionStatus.NOT_CONFIGURED)
            return self._state

        self._state.last_check = datetime.now()
        if self._probe():
            self._state.last_online = self._state.last_check
            self._state.consecutive_failures = 0
            self._state.error_message = None
            self._set_status(ConnectionStatus.ONLINE)
        else:
            self._state.consecutive_failures += 1
            self._set_status(ConnectionStatus.OFFLINE)
        return self._state

    def _probe(self) -> bool:
        """
        Check Supabase reachability.

        Returns:
            True if a TCP connection to the Supabase host succeeds
        """
        parsed = urlparse(self._config.supabase_url)
        host = parsed.hostname
        port = parsed.port or 443
        if not host:
            return False

        try:
            with socket.create_connection((host, port), timeout=self._config.remote_timeout_seconds):
                return True
        except OSError as e:
            self._state.error_message = str(e)
            logger.debug(f"Supabase check failed: {e}")
            return False

    def register_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        """
        Register a callback for connection status changes.

        Args:
            callback: Function called with ConnectionState when status changes
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[ConnectionState], None]) -> None:
        """Remove a registered callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in self._callbacks:
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

    def get_status_display(self) -> dict:
        """Get status information for UI display."""
        return {
            "status": self._state.status.value,
            "configured": self.is_configured,
            "is_online": self.is_online,
            "last_check": self._state.last_check.isoformat() if self._state.last_check else None,
            "last_online": self._state.last_online.isoformat() if self._state.last_online else None,
            "failures": self._state.consecutive_failures,
            "error": self._state.error_message,
        }
