"""Shared test fixtures."""

import dataclasses
import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from liquidtrack.config import Settings
from liquidtrack.containers import AppContainer
from liquidtrack.domain.auth import AuthSession
from liquidtrack.domain.issues import Issue, IssueStatus, NewIssue
from liquidtrack.errors import AdviceError, AuthError, StoreError
from liquidtrack.services.advice import AdviceClient, AdviceService
from liquidtrack.services.auth import AuthGate, AuthListener, AuthProvider
from liquidtrack.services.store import ChangeCallback, ChangeSubscription, IssueStore
from liquidtrack.services.sync import IssueSynchronizer

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


def make_issue(  # noqa: PLR0913
    issue_id: str,
    title: str = "Delayed shipment",
    description: str = "Container held at port",
    status: IssueStatus = IssueStatus.NEW,
    minutes: int = 0,
    responsible_id: str = "1",
    ai_analysis: str | None = None,
) -> Issue:
    """Build an issue created ``minutes`` after the base time."""
    created_at = BASE_TIME + timedelta(minutes=minutes)
    return Issue(
        id=issue_id,
        title=title,
        description=description,
        status=status,
        created_at=created_at,
        updated_at=created_at,
        responsible_id=responsible_id,
        ai_analysis=ai_analysis,
    )


@dataclass
class FakeChangeSubscription(ChangeSubscription):
    """Subscription handle that counts releases."""

    callback: ChangeCallback
    release_count: int = 0

    @property
    def active(self) -> bool:
        return self.release_count == 0

    async def release(self) -> None:
        self.release_count += 1


@dataclass
class InMemoryIssueStore(IssueStore):
    """In-memory issue store for tests.

    ``failing`` names operations that raise ``StoreError``. Mutations notify
    subscribers only when ``notify`` is set.
    """

    rows: dict[str, Issue] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    subscriptions: list[FakeChangeSubscription] = field(default_factory=list)
    notify: bool = True
    _ids: itertools.count = field(default_factory=lambda: itertools.count(100))

    def seed(self, *issues: Issue) -> None:
        for issue in issues:
            self.rows[issue.id] = issue

    async def query(
        self, order_by: str = "created_at", descending: bool = True
    ) -> list[Issue]:
        self._record("query")
        return sorted(
            self.rows.values(),
            key=lambda issue: getattr(issue, order_by),
            reverse=descending,
        )

    async def insert(self, issue: NewIssue) -> None:
        self._record("insert")
        issue_id = str(next(self._ids))
        self.rows[issue_id] = Issue(
            id=issue_id,
            title=issue.title,
            description=issue.description,
            status=issue.status,
            created_at=issue.created_at,
            updated_at=issue.created_at,
            responsible_id=issue.responsible_id,
        )
        self._changed("INSERT")

    async def update(self, issue_id: str, fields: dict[str, object]) -> None:
        self._record("update")
        current = self.rows[issue_id]
        changes: dict[str, object] = {}
        if "status" in fields:
            changes["status"] = IssueStatus(fields["status"])
        if "responsible_id" in fields:
            changes["responsible_id"] = fields["responsible_id"]
        if "ai_analysis" in fields:
            changes["ai_analysis"] = fields["ai_analysis"]
        self.rows[issue_id] = dataclasses.replace(current, **changes)
        self._changed("UPDATE")

    async def delete(self, issue_id: str) -> None:
        self._record("delete")
        self.rows.pop(issue_id, None)
        self._changed("DELETE")

    async def subscribe_to_changes(
        self, table: str, callback: ChangeCallback
    ) -> ChangeSubscription:
        self._record("subscribe")
        subscription = FakeChangeSubscription(callback=callback)
        self.subscriptions.append(subscription)
        return subscription

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise StoreError(f"{operation} failed")

    def _changed(self, event: str) -> None:
        if not self.notify:
            return
        for subscription in self.subscriptions:
            if subscription.active:
                subscription.callback({"eventType": event, "table": "issues"})


@dataclass
class FakeAdviceClient(AdviceClient):
    """Advice client returning a fixed answer or raising."""

    answer: str = "Contact the customs broker today."
    error: bool = False
    prompts: list[str] = field(default_factory=list)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise AdviceError("upstream failure")
        return self.answer


@dataclass
class FakeAuthSubscription:
    """Auth listener handle."""

    provider: "FakeAuthProvider"
    listener: AuthListener

    def unsubscribe(self) -> None:
        self.provider.listeners.remove(self.listener)


@dataclass
class FakeAuthProvider(AuthProvider):
    """Auth provider with an in-memory user table."""

    users: dict[str, str] = field(default_factory=lambda: {"ops@example.com": "secret1"})
    session: AuthSession | None = None
    confirm_sign_up: bool = False
    oauth_error: bool = False
    listeners: list[AuthListener] = field(default_factory=list)
    sign_out_calls: int = 0

    async def current_session(self) -> AuthSession | None:
        return self.session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if self.users.get(email) != password:
            raise AuthError("Invalid login credentials")
        self.session = _session_for(email)
        return self.session

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        if email in self.users:
            raise AuthError("User already registered")
        self.users[email] = password
        if self.confirm_sign_up:
            return None
        self.session = _session_for(email)
        return self.session

    async def oauth_url(self, provider: str, redirect_to: str, scopes: str) -> str:
        if self.oauth_error:
            raise AuthError("Unsupported provider: provider is not enabled")
        return (
            f"https://auth.example.com/authorize?provider={provider}"
            f"&redirect_to={redirect_to}&scopes={scopes}"
        )

    async def exchange_code(self, code: str) -> AuthSession:
        if code != "good-code":
            raise AuthError("invalid flow state")
        self.session = _session_for("azure@example.com")
        return self.session

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.session = None

    def on_change(self, listener: AuthListener) -> FakeAuthSubscription:
        self.listeners.append(listener)
        return FakeAuthSubscription(provider=self, listener=listener)

    def emit(self, session: AuthSession | None) -> None:
        self.session = session
        for listener in list(self.listeners):
            listener(session)


def _session_for(email: str) -> AuthSession:
    return AuthSession(user_id=f"user-{email}", email=email, access_token="token")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        openai_api_key="openai-key",
        default_language="en",
    )


@pytest.fixture
def store() -> InMemoryIssueStore:
    return InMemoryIssueStore()


@pytest.fixture
def advice_client() -> FakeAdviceClient:
    return FakeAdviceClient()


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def synchronizer(
    store: InMemoryIssueStore, advice_client: FakeAdviceClient
) -> IssueSynchronizer:
    return IssueSynchronizer(store=store, advice_service=AdviceService(advice_client))


@pytest.fixture
def container(
    settings: Settings,
    synchronizer: IssueSynchronizer,
    auth_provider: FakeAuthProvider,
) -> AppContainer:
    auth_gate = AuthGate(provider=auth_provider, synchronizer=synchronizer)

    async def close_resources() -> None:
        await auth_gate.stop()

    return AppContainer(
        settings=settings,
        advice_service=synchronizer.advice_service,
        synchronizer=synchronizer,
        auth_gate=auth_gate,
        close_resources=close_resources,
    )
