"""Persistence interfaces for issues."""

from collections.abc import Callable
from typing import Protocol

from liquidtrack.domain.issues import Issue, NewIssue

ChangeCallback = Callable[[dict[str, object]], None]


class ChangeSubscription(Protocol):
    """Handle for a live change subscription."""

    async def release(self) -> None:
        """Stop delivering notifications; safe to call more than once."""


class IssueStore(Protocol):
    """Remote store for issue rows.

    Every operation raises ``StoreError`` when the store is not configured or
    the backing service reports a failure.
    """

    async def query(
        self, order_by: str = "created_at", descending: bool = True
    ) -> list[Issue]:
        """Return all issues visible to the current session."""

    async def insert(self, issue: NewIssue) -> None:
        """Insert a new issue row."""

    async def update(self, issue_id: str, fields: dict[str, object]) -> None:
        """Update selected columns of an issue row."""

    async def delete(self, issue_id: str) -> None:
        """Delete an issue row by id."""

    async def subscribe_to_changes(
        self, table: str, callback: ChangeCallback
    ) -> ChangeSubscription:
        """Call ``callback`` whenever a row in ``table`` changes.

        The payload is advisory; consumers re-query for content.
        """
