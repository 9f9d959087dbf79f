"""Supabase Auth adapter."""

from dataclasses import dataclass

import httpx
from supabase import AsyncClient
from supabase import AuthError as SupabaseAuthError
from supabase_auth.types import Session

from liquidtrack.domain.auth import AuthSession
from liquidtrack.errors import AuthError, ConfigurationError
from liquidtrack.services.auth import AuthListener, AuthProvider, AuthSubscription


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Supabase implementation of password and OAuth sign-in."""

    client: AsyncClient | None

    async def current_session(self) -> AuthSession | None:
        """Return the stored session, refreshing it if necessary."""
        client = self._require_client()
        try:
            session = await client.auth.get_session()
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc
        return _to_session(session)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        client = self._require_client()
        try:
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc
        session = _to_session(response.session)
        if session is None:
            raise AuthError("Sign-in did not return a session")
        return session

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user; confirmation may be required before sign-in."""
        client = self._require_client()
        try:
            response = await client.auth.sign_up({"email": email, "password": password})
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc
        return _to_session(response.session)

    async def oauth_url(self, provider: str, redirect_to: str, scopes: str) -> str:
        """Return the provider authorization URL."""
        client = self._require_client()
        try:
            response = await client.auth.sign_in_with_oauth(
                {
                    "provider": provider,
                    "options": {"redirect_to": redirect_to, "scopes": scopes},
                }
            )
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc
        return response.url

    async def exchange_code(self, code: str) -> AuthSession:
        """Exchange a PKCE authorization code for a session."""
        client = self._require_client()
        try:
            response = await client.auth.exchange_code_for_session({"auth_code": code})
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc
        session = _to_session(response.session)
        if session is None:
            raise AuthError("OAuth sign-in did not return a session")
        return session

    async def sign_out(self) -> None:
        """Sign out the current user."""
        client = self._require_client()
        try:
            await client.auth.sign_out()
        except (SupabaseAuthError, httpx.HTTPError) as exc:
            raise AuthError(str(exc)) from exc

    def on_change(self, listener: AuthListener) -> AuthSubscription:
        """Forward Supabase auth events as session changes."""
        client = self._require_client()

        def _forward(_event: str, session: Session | None) -> None:
            listener(_to_session(session))

        return client.auth.on_auth_state_change(_forward)

    def _require_client(self) -> AsyncClient:
        if self.client is None:
            raise ConfigurationError("supabase_url", "SUPABASE_URL")
        return self.client


def _to_session(session: Session | None) -> AuthSession | None:
    """Convert a Supabase session to the domain model."""
    if session is None:
        return None
    return AuthSession(
        user_id=session.user.id,
        email=session.user.email,
        access_token=session.access_token,
    )
