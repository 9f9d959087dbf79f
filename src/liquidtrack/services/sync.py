"""Local issue snapshot kept in sync with the remote store."""

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from liquidtrack.domain.issues import Issue, IssueStatus, NewIssue
from liquidtrack.errors import StoreError
from liquidtrack.i18n import Language
from liquidtrack.services.advice import AdviceService
from liquidtrack.services.store import ChangeSubscription, IssueStore

ISSUES_TABLE = "issues"

_logger = logging.getLogger(__name__)


@dataclass
class IssueSynchronizer:
    """Owns the ordered issue snapshot presented to the UI.

    Status and responsible changes are applied locally before the store
    confirms them. A failed write is reverted by reloading from the store,
    which always wins over local state.
    """

    store: IssueStore
    advice_service: AdviceService
    error: bool = False
    loading: bool = False
    revision: int = 0
    _issues: tuple[Issue, ...] = field(default=(), init=False)
    _analyzing: set[str] = field(default_factory=set, init=False)
    _subscription: ChangeSubscription | None = field(default=None, init=False)
    _reload_task: asyncio.Task[None] | None = field(default=None, init=False)
    _reload_pending: bool = field(default=False, init=False)
    _generation: int = field(default=0, init=False)

    @property
    def issues(self) -> tuple[Issue, ...]:
        """Return the current snapshot, newest first."""
        return self._issues

    @property
    def subscribed(self) -> bool:
        """Return True while a change subscription is held."""
        return self._subscription is not None

    def get(self, issue_id: str) -> Issue | None:
        """Return the snapshot entry for an id, if present."""
        for issue in self._issues:
            if issue.id == issue_id:
                return issue
        return None

    def is_analyzing(self, issue_id: str) -> bool:
        """Return True while advice is being generated for an issue."""
        return issue_id in self._analyzing

    async def load(self) -> None:
        """Replace the snapshot with the store's issues, newest first."""
        generation = self._generation
        try:
            issues = await self.store.query(order_by="created_at", descending=True)
        except StoreError:
            _logger.exception("Error fetching issues")
            self.error = True
            return
        finally:
            self.loading = False
        if generation != self._generation:
            return
        self._replace(tuple(issues))
        self.error = False

    async def activate(self) -> None:
        """Load the snapshot and start listening for remote changes."""
        generation = self._generation
        self.loading = True
        await self.load()
        if self._subscription is not None:
            return
        try:
            subscription = await self.store.subscribe_to_changes(
                ISSUES_TABLE, self._on_change
            )
        except StoreError:
            _logger.exception("Failed to subscribe to issue changes")
            return
        if generation != self._generation:
            await subscription.release()
            return
        self._subscription = subscription
        _logger.info("Subscribed to %s changes", ISSUES_TABLE)

    async def deactivate(self) -> None:
        """Release the subscription and forget the session's data."""
        self._generation += 1
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            try:
                await subscription.release()
            except StoreError:
                _logger.exception("Failed to release issue subscription")
            else:
                _logger.info("Released %s subscription", ISSUES_TABLE)
        task, self._reload_task = self._reload_task, None
        self._reload_pending = False
        if task is not None and not task.done():
            task.cancel()
        self._analyzing.clear()
        self._replace(())
        self.error = False
        self.loading = False

    def request_reload(self) -> None:
        """Schedule a reload, coalescing requests made while one is running."""
        if self._reload_task is not None and not self._reload_task.done():
            self._reload_pending = True
            return
        self._reload_task = asyncio.get_running_loop().create_task(
            self._run_reloads()
        )

    async def wait_for_reload(self) -> None:
        """Wait until any scheduled reloads have finished."""
        while self._reload_task is not None and not self._reload_task.done():
            await self._reload_task

    async def create(self, title: str, description: str, responsible_id: str) -> None:
        """Insert a new issue; the snapshot catches up via the subscription."""
        if not title.strip() or not description.strip():
            raise ValueError("Title and description are required")
        new_issue = NewIssue(
            title=title.strip(),
            description=description.strip(),
            responsible_id=responsible_id,
            created_at=datetime.now(tz=UTC),
        )
        try:
            await self.store.insert(new_issue)
        except StoreError:
            _logger.exception("Error adding issue")
            raise

    async def remove(self, issue_id: str, confirm: Callable[[], bool]) -> bool:
        """Delete an issue once ``confirm`` agrees; returns True if dispatched."""
        if not confirm():
            return False
        try:
            await self.store.delete(issue_id)
        except StoreError:
            _logger.exception("Error deleting issue %s", issue_id)
        return True

    async def set_status(self, issue_id: str, status: IssueStatus) -> None:
        """Change an issue status locally, then remotely."""
        self._patch(issue_id, status=status)
        try:
            await self.store.update(issue_id, {"status": status.value})
        except StoreError:
            _logger.exception("Error updating status of issue %s", issue_id)
            await self.load()

    async def set_responsible(self, issue_id: str, responsible_id: str) -> None:
        """Change an issue's responsible person locally, then remotely."""
        self._patch(issue_id, responsible_id=responsible_id)
        try:
            await self.store.update(issue_id, {"responsible_id": responsible_id})
        except StoreError:
            _logger.exception("Error updating responsible of issue %s", issue_id)
            await self.load()

    async def request_advice(self, issue: Issue, language: Language) -> str | None:
        """Generate and store advice; returns None if already in progress."""
        if issue.id in self._analyzing:
            return None
        self._analyzing.add(issue.id)
        try:
            advice = await self.advice_service.generate(
                issue.title, issue.description, language
            )
            try:
                await self.store.update(issue.id, {"ai_analysis": advice})
            except StoreError:
                _logger.exception("Error saving AI analysis for issue %s", issue.id)
            else:
                self._patch(issue.id, ai_analysis=advice)
            return advice
        finally:
            self._analyzing.discard(issue.id)

    def _on_change(self, _payload: dict[str, object]) -> None:
        self.request_reload()

    async def _run_reloads(self) -> None:
        while True:
            self._reload_pending = False
            await self.load()
            if not self._reload_pending:
                return

    def _patch(self, issue_id: str, **changes: object) -> None:
        self._replace(
            tuple(
                dataclasses.replace(issue, **changes) if issue.id == issue_id else issue
                for issue in self._issues
            )
        )

    def _replace(self, issues: tuple[Issue, ...]) -> None:
        if issues != self._issues:
            self.revision += 1
        self._issues = issues
