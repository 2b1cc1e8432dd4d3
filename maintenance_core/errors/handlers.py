# =============================================================================
# maintenance_core/errors/handlers.py
# Error Reporting for the Maintenance Registry
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional
import streamlit as st

from maintenance_core.logging import get_logger
from .exceptions import MaintenanceRegistryError, RemoteWriteError

logger = get_logger(__name__)


def describe_error(error: BaseException, user_message: Optional[str] = None) -> str:
    """
    One-line description of an error for people, not logs.

    A RemoteWriteError means the record is safe in the local mirror, so it
    reads as a sync problem rather than a lost save.
    """
    if isinstance(error, RemoteWriteError):
        where = f" ({error.table} {error.key})" if error.table and error.key is not None else ""
        return f"Saved on this device, cloud sync failed{where}: {user_message or error.message}"
    if isinstance(error, MaintenanceRegistryError):
        return user_message or error.message
    return user_message or str(error)


def handle_error(
    error: BaseException,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> str:
    """
    Log an error and, inside a Streamlit page, show it to the user.

    Args:
        error: The exception to handle
        show_user_message: Whether to display the error via Streamlit
        log_error: Whether to log the error
        user_message: Custom message to show (uses the error message if None)

    Returns:
        The message shown (or that would have been shown) to the user
    """
    message = describe_error(error, user_message)

    if isinstance(error, MaintenanceRegistryError):
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(f"[{code}] {message}", extra={"details": details}, exc_info=error)

    if show_user_message:
        if isinstance(error, RemoteWriteError):
            st.warning(message)
        elif recoverable:
            st.error(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Check the registry configuration.")

    return message
