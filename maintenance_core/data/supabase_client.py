# =============================================================================
# maintenance_core/data/supabase_client.py
# Supabase Client Configuration for the Maintenance Registry
# Handles the remote connection and the table operations the data core needs
# =============================================================================

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import streamlit as st
from supabase import Client, create_client
from supabase.client import ClientOptions

from maintenance_core.config import RegistryConfig
from maintenance_core.errors import RemoteStoreError

logger = logging.getLogger(__name__)

# (column, operator, value); operator is one of eq, lt, lte, gt, gte
Filter = Tuple[str, str, Any]

FILTER_OPERATORS = ("eq", "lt", "lte", "gt", "gte")
PAGE_SIZE = 1000


def get_supabase_client(config: RegistryConfig) -> Optional[Client]:
    """
    Create a Supabase client from the resolved configuration.

    Expects credentials in .streamlit/secrets.toml or the environment:
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"

    Returns:
        Supabase client instance or None if not configured
    """
    if not config.is_remote_configured:
        logger.info("Supabase credentials not configured; running in offline mode")
        return None

    try:
        options = ClientOptions(postgrest_client_timeout=config.remote_timeout_seconds)
        client: Client = create_client(config.supabase_url, config.supabase_key, options=options)
        return client
    except Exception as e:
        logger.warning(f"Failed to initialize Supabase client: {e}")
        return None


@st.cache_resource(ttl=3600)  # Cache for 1 hour, then refresh
def get_cached_supabase_client(
    supabase_url: str,
    supabase_key: str,
    remote_timeout_seconds: float,
) -> Optional[Client]:
    """
    Get cached Supabase client (reused across Streamlit sessions).

    Keyed by the credentials, so a changed secret gets its own client.

    Returns:
        Cached Supabase client instance or None
    """
    return get_supabase_client(RegistryConfig(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        remote_timeout_seconds=remote_timeout_seconds,
    ))


class SupabaseRemote:
    """
    Table operations against the remote system of record.

    Every method raises RemoteStoreError on failure; the caller decides
    whether to fall back to the local mirror.
    """

    def __init__(self, client: Client):
        self.client = client

    def _apply_filters(self, query, filters: Optional[Iterable[Filter]]):
        for column, op, value in filters or ():
            if op not in FILTER_OPERATORS:
                raise ValueError(f"Unsupported filter operator: {op}")
            query = getattr(query, op)(column, value)
        return query

    def fetch(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        columns: str = "*",
        order_by: str = "id",
    ) -> List[Dict[str, Any]]:
        """
        Fetch ALL matching rows (handles the Supabase 1000 row limit).

        Args:
            table: Remote table name
            filters: Optional (column, op, value) filters
            columns: Column list for the select
            order_by: Column that fixes the row order across pages

        Returns:
            List of raw rows as returned by PostgREST
        """
        try:
            all_rows: List[Dict[str, Any]] = []
            offset = 0

            while True:
                query = self._apply_filters(self.client.table(table).select(columns), filters)
                response = query.order(order_by).range(offset, offset + PAGE_SIZE - 1).execute()

                if not response.data:
                    break
                all_rows.extend(response.data)
                # Fewer than a full page means we've reached the end
                if len(response.data) < PAGE_SIZE:
                    break
                offset += PAGE_SIZE

            return all_rows

        except Exception as e:
            raise RemoteStoreError(
                f"Error fetching data from {table}: {e}",
                table=table,
                operation="select",
            ) from e

    def fetch_one(self, table: str, column: str, value: Any) -> Optional[Dict[str, Any]]:
        """Fetch a single row by column value, or None if absent."""
        try:
            response = (
                self.client.table(table)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise RemoteStoreError(
                f"Error fetching row from {table}: {e}",
                table=table,
                operation="select",
            ) from e
        return response.data[0] if response.data else None

    def upsert(
        self,
        table: str,
        rows: List[Dict[str, Any]],
        on_conflict: str = "id",
    ) -> None:
        """Insert or update rows, replacing by the conflict column."""
        if not rows:
            return
        try:
            self.client.table(table).upsert(rows, on_conflict=on_conflict).execute()
        except Exception as e:
            raise RemoteStoreError(
                f"Error upserting into {table}: {e}",
                table=table,
                operation="upsert",
            ) from e

    def insert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Insert rows (bulk insert)."""
        if not rows:
            return
        try:
            self.client.table(table).insert(rows).execute()
        except Exception as e:
            raise RemoteStoreError(
                f"Error inserting into {table}: {e}",
                table=table,
                operation="insert",
            ) from e

    def delete(self, table: str, filters: Sequence[Filter]) -> None:
        """Delete rows matching filters."""
        if not filters:
            raise ValueError("Refusing to delete without filters")
        try:
            query = self._apply_filters(self.client.table(table).delete(), filters)
            query.execute()
        except ValueError:
            raise
        except Exception as e:
            raise RemoteStoreError(
                f"Error deleting from {table}: {e}",
                table=table,
                operation="delete",
            ) from e

    def count(self, table: str, filters: Optional[Sequence[Filter]] = None) -> int:
        """Count matching rows without transferring them."""
        try:
            query = self.client.table(table).select("*", count="exact", head=True)
            response = self._apply_filters(query, filters).execute()
        except Exception as e:
            raise RemoteStoreError(
                f"Error counting rows in {table}: {e}",
                table=table,
                operation="count",
            ) from e
        return response.count or 0
