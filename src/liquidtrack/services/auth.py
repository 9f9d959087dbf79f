"""Authentication gate in front of the issue tracker."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from liquidtrack.domain.auth import AuthSession, GateState
from liquidtrack.errors import AuthError
from liquidtrack.services.sync import IssueSynchronizer

_logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthSession | None], None]


class AuthSubscription(Protocol):
    """Handle for an auth-change listener."""

    def unsubscribe(self) -> None:
        """Stop delivering auth changes."""


class AuthProvider(Protocol):
    """Interface for the hosted authentication service.

    Rejected credentials raise ``AuthError``.
    """

    async def current_session(self) -> AuthSession | None:
        """Return the stored session, if any."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user; None when e-mail confirmation is pending."""

    async def oauth_url(self, provider: str, redirect_to: str, scopes: str) -> str:
        """Return the URL that starts an OAuth sign-in."""

    async def exchange_code(self, code: str) -> AuthSession:
        """Complete an OAuth sign-in with the returned code."""

    async def sign_out(self) -> None:
        """End the current session."""

    def on_change(self, listener: AuthListener) -> AuthSubscription:
        """Register a listener for session changes."""


@dataclass
class AuthGate:
    """Routes between the auth view and the tracker based on the session."""

    provider: AuthProvider
    synchronizer: IssueSynchronizer
    state: GateState = GateState.UNKNOWN
    session: AuthSession | None = None
    _listener: AuthSubscription | None = field(default=None, init=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    async def start(self) -> None:
        """Resolve the initial session and watch for later changes."""
        try:
            session = await self.provider.current_session()
        except AuthError:
            _logger.exception("Failed to resolve the initial session")
            session = None
        if self._listener is None:
            self._listener = self.provider.on_change(self._on_auth_change)
        await self._apply(session)

    async def stop(self) -> None:
        """Stop watching the session and tear down the tracker."""
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.unsubscribe()
        for task in list(self._tasks):
            task.cancel()
        if self.state is GateState.AUTHENTICATED:
            await self.synchronizer.deactivate()

    async def sign_in(self, email: str, password: str) -> None:
        """Sign in with a password and open the tracker."""
        session = await self.provider.sign_in(email.strip(), password)
        _logger.info("Signed in user %s", session.user_id)
        await self._apply(session)

    async def sign_up(self, email: str, password: str) -> bool:
        """Register a user; returns True when they are signed in right away."""
        session = await self.provider.sign_up(email.strip(), password)
        if session is None:
            return False
        await self._apply(session)
        return True

    async def microsoft_sign_in_url(self, redirect_to: str) -> str:
        """Return the Azure OAuth URL for the federated sign-in."""
        return await self.provider.oauth_url("azure", redirect_to, scopes="email")

    async def complete_oauth(self, code: str) -> None:
        """Finish an OAuth sign-in."""
        session = await self.provider.exchange_code(code)
        await self._apply(session)

    async def sign_out(self) -> None:
        """Sign out and return to the auth view."""
        try:
            await self.provider.sign_out()
        finally:
            await self._apply(None)

    async def wait_idle(self) -> None:
        """Wait for queued auth-change transitions to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_auth_change(self, session: AuthSession | None) -> None:
        task = asyncio.get_running_loop().create_task(self._apply(session))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _apply(self, session: AuthSession | None) -> None:
        self.session = session
        if session is not None:
            if self.state is GateState.AUTHENTICATED:
                return
            self.state = GateState.AUTHENTICATED
            await self.synchronizer.activate()
            return
        previous, self.state = self.state, GateState.UNAUTHENTICATED
        if previous is GateState.AUTHENTICATED:
            _logger.info("Session ended; tearing down issue sync")
            await self.synchronizer.deactivate()
