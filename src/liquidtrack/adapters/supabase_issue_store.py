"""Supabase-backed issue store."""

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from realtime import AsyncRealtimeChannel
from realtime.exceptions import AuthorizationError, NotConnectedError
from supabase import AsyncClient
from websockets.exceptions import WebSocketException

from liquidtrack.domain.issues import Issue, IssueStatus, NewIssue
from liquidtrack.errors import StoreError
from liquidtrack.services.store import ChangeCallback, ChangeSubscription, IssueStore

_COLUMNS = (
    "id, title, description, status, created_at, updated_at, "
    "responsible_id, ai_analysis"
)

_REALTIME_ERRORS = (
    NotConnectedError,
    AuthorizationError,
    WebSocketException,
    httpx.HTTPError,
    OSError,
)


@dataclass
class SupabaseChangeSubscription(ChangeSubscription):
    """Realtime channel bound to a Supabase client."""

    client: AsyncClient
    channel: AsyncRealtimeChannel
    released: bool = False

    async def release(self) -> None:
        """Remove the realtime channel once."""
        if self.released:
            return
        self.released = True
        try:
            await self.client.remove_channel(self.channel)
        except _REALTIME_ERRORS as exc:
            raise StoreError(f"Failed to remove realtime channel: {exc}") from exc


@dataclass
class SupabaseIssueStore(IssueStore):
    """Supabase implementation for issue persistence."""

    client: AsyncClient | None

    async def query(
        self, order_by: str = "created_at", descending: bool = True
    ) -> list[Issue]:
        """Return all issues ordered by a column."""
        client = self._require_client()
        try:
            response = (
                await client.table("issues")
                .select(_COLUMNS)
                .order(order_by, desc=descending)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError(f"Failed to fetch issues: {exc}") from exc
        return [_row_to_issue(row) for row in response.data or []]

    async def insert(self, issue: NewIssue) -> None:
        """Insert an issue row."""
        client = self._require_client()
        created_at = issue.created_at.isoformat()
        try:
            await client.table("issues").insert(
                {
                    "title": issue.title,
                    "description": issue.description,
                    "status": issue.status.value,
                    "responsible_id": issue.responsible_id,
                    "created_at": created_at,
                    "updated_at": created_at,
                }
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError(f"Failed to add issue: {exc}") from exc

    async def update(self, issue_id: str, fields: dict[str, object]) -> None:
        """Update columns of an issue row and stamp updated_at."""
        client = self._require_client()
        payload = {**fields, "updated_at": datetime.now(tz=UTC).isoformat()}
        try:
            await client.table("issues").update(payload).eq("id", issue_id).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError(f"Failed to update issue {issue_id}: {exc}") from exc

    async def delete(self, issue_id: str) -> None:
        """Delete an issue row."""
        client = self._require_client()
        try:
            await client.table("issues").delete().eq("id", issue_id).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError(f"Failed to delete issue {issue_id}: {exc}") from exc

    async def subscribe_to_changes(
        self, table: str, callback: ChangeCallback
    ) -> ChangeSubscription:
        """Open a realtime channel that reports every change to ``table``."""
        client = self._require_client()
        channel = client.channel(f"{table}_changes")
        channel.on_postgres_changes(
            "*", schema="public", table=table, callback=callback
        )
        try:
            await channel.subscribe()
        except _REALTIME_ERRORS as exc:
            raise StoreError(f"Failed to subscribe to {table}: {exc}") from exc
        return SupabaseChangeSubscription(client=client, channel=channel)

    def _require_client(self) -> AsyncClient:
        if self.client is None:
            raise StoreError("Supabase is not configured")
        return self.client


def _row_to_issue(row: dict[str, object]) -> Issue:
    """Map a snake_case issues row to the domain model."""
    created_at = _parse_timestamp(row.get("created_at"))
    updated_raw = row.get("updated_at")
    return Issue(
        id=str(row["id"]),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        status=IssueStatus.parse(row.get("status")),
        created_at=created_at,
        updated_at=_parse_timestamp(updated_raw) if updated_raw else created_at,
        responsible_id=str(row.get("responsible_id") or ""),
        ai_analysis=str(row["ai_analysis"]) if row.get("ai_analysis") else None,
    )


def _parse_timestamp(raw: object) -> datetime:
    """Parse a PostgREST timestamp, treating naive values as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    else:
        return datetime.fromtimestamp(0, tz=UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value
