"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse

from liquidtrack.api.pages import (
    render_auth,
    render_loading,
    render_setup,
    render_tracker,
)
from liquidtrack.api.view_state import ViewState, filter_issues
from liquidtrack.app_logging import configure_logging
from liquidtrack.config import oauth_redirect_url
from liquidtrack.containers import AppContainer
from liquidtrack.domain.auth import GateState
from liquidtrack.domain.issues import Issue, IssueStatus
from liquidtrack.errors import AuthError, StoreError
from liquidtrack.i18n import coerce_language, text, toggle_language
from liquidtrack.services.sync import IssueSynchronizer


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    settings = container.settings
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    gate = container.auth_gate
    synchronizer = container.synchronizer
    view = ViewState(language=coerce_language(settings.default_language))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.store_configured:
            await gate.start()
        else:
            logger.warning("Supabase credentials missing; serving setup screen")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.view = view

    def back_home() -> RedirectResponse:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

    def require_tracker() -> None:
        if (
            not settings.store_configured
            or gate.state is not GateState.AUTHENTICATED
        ):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)

    def require_issue(issue_id: str) -> Issue:
        issue = synchronizer.get(issue_id)
        if issue is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return issue

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(q: str | None = None) -> HTMLResponse:
        """Render whichever view the configuration and session allow."""
        if not settings.store_configured:
            return HTMLResponse(render_setup(view))
        if q is not None:
            view.search_term = q
        if gate.state is GateState.UNKNOWN:
            return HTMLResponse(render_loading(view))
        if gate.state is GateState.UNAUTHENTICATED:
            return HTMLResponse(render_auth(view))
        return HTMLResponse(render_tracker(view, synchronizer))

    @app.post("/language")
    async def switch_language() -> RedirectResponse:
        """Toggle between English and Russian."""
        view.language = toggle_language(view.language)
        return back_home()

    @app.post("/auth/mode")
    async def switch_auth_mode() -> RedirectResponse:
        """Toggle between the sign-in and sign-up forms."""
        view.sign_up_mode = not view.sign_up_mode
        view.reset_auth_messages()
        return back_home()

    @app.post("/auth/sign-in")
    async def sign_in(
        email: str = Form(...), password: str = Form(...)
    ) -> RedirectResponse:
        """Sign in or sign up with a password, depending on the form mode."""
        if not settings.store_configured:
            return back_home()
        view.reset_auth_messages()
        try:
            if view.sign_up_mode:
                signed_in = await gate.sign_up(email, password)
                if not signed_in:
                    view.auth_notice = text(view.language, "auth.check_email")
            else:
                await gate.sign_in(email, password)
        except AuthError as exc:
            view.auth_error = str(exc) or text(view.language, "auth.error_params")
        return back_home()

    @app.get("/auth/microsoft")
    async def microsoft_sign_in() -> RedirectResponse:
        """Start the Azure OAuth sign-in."""
        if not settings.store_configured:
            return back_home()
        try:
            url = await gate.microsoft_sign_in_url(oauth_redirect_url(settings))
        except AuthError as exc:
            logger.warning("Microsoft sign-in unavailable: %s", exc)
            view.auth_error = (
                f"{text(view.language, 'auth.microsoft_failed')} Error: {exc}"
            )
            return back_home()
        return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/auth/callback")
    async def oauth_callback(code: str | None = None) -> RedirectResponse:
        """Complete the OAuth sign-in."""
        if code and settings.store_configured:
            view.reset_auth_messages()
            try:
                await gate.complete_oauth(code)
            except AuthError as exc:
                view.auth_error = str(exc)
        return back_home()

    @app.post("/auth/sign-out")
    async def sign_out() -> RedirectResponse:
        """End the session and return to the auth view."""
        require_tracker()
        try:
            await gate.sign_out()
        except AuthError:
            logger.exception("Sign-out failed")
        view.modal_open = False
        view.search_term = ""
        return back_home()

    @app.post("/issues/new")
    async def open_new_issue() -> RedirectResponse:
        """Show the creation form."""
        require_tracker()
        view.modal_open = True
        view.modal_error = False
        return back_home()

    @app.post("/issues/new/cancel")
    async def close_new_issue() -> RedirectResponse:
        """Hide the creation form."""
        view.modal_open = False
        view.modal_error = False
        return back_home()

    @app.post("/issues")
    async def create_issue(
        title: str = Form(""),
        description: str = Form(""),
        responsible_id: str = Form(...),
    ) -> RedirectResponse:
        """Create an issue from the form."""
        require_tracker()
        if not title.strip() or not description.strip():
            view.modal_open = True
            view.modal_error = True
            return back_home()
        view.modal_open = False
        view.modal_error = False
        try:
            await synchronizer.create(title, description, responsible_id)
        except StoreError:
            view.alert = text(view.language, "alerts.create_failed")
        return back_home()

    @app.post("/issues/{issue_id}/status")
    async def change_status(
        issue_id: str, new_status: str = Form(..., alias="status")
    ) -> RedirectResponse:
        """Change an issue's status."""
        require_tracker()
        require_issue(issue_id)
        try:
            parsed = IssueStatus(new_status)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST) from exc
        await synchronizer.set_status(issue_id, parsed)
        return back_home()

    @app.post("/issues/{issue_id}/responsible")
    async def change_responsible(
        issue_id: str, responsible_id: str = Form(...)
    ) -> RedirectResponse:
        """Reassign an issue."""
        require_tracker()
        require_issue(issue_id)
        await synchronizer.set_responsible(issue_id, responsible_id)
        return back_home()

    @app.post("/issues/{issue_id}/delete")
    async def delete_issue(issue_id: str, confirm: str = Form("")) -> RedirectResponse:
        """Delete an issue once the browser confirmation was accepted."""
        require_tracker()
        await synchronizer.remove(issue_id, confirm=lambda: confirm == "yes")
        return back_home()

    @app.post("/issues/{issue_id}/advice")
    async def request_advice(issue_id: str) -> RedirectResponse:
        """Generate AI advice for an issue."""
        require_tracker()
        issue = require_issue(issue_id)
        await synchronizer.request_advice(issue, view.language)
        return back_home()

    @app.get("/api/revision")
    async def revision() -> dict[str, int]:
        """Return the snapshot revision so pages can refresh after changes."""
        require_tracker()
        return {"revision": synchronizer.revision}

    @app.get("/api/issues")
    async def list_issues(q: str = "") -> dict[str, object]:
        """Return the local snapshot as JSON."""
        require_tracker()
        issues = filter_issues(synchronizer.issues, q)
        return {
            "revision": synchronizer.revision,
            "loading": synchronizer.loading,
            "error": synchronizer.error,
            "issues": [_issue_payload(issue, synchronizer) for issue in issues],
        }

    return app


def _issue_payload(
    issue: Issue, synchronizer: IssueSynchronizer
) -> dict[str, object]:
    """Serialize an issue for the JSON API."""
    return {
        "id": issue.id,
        "title": issue.title,
        "description": issue.description,
        "status": issue.status.value,
        "created_at": issue.created_at.isoformat(),
        "updated_at": issue.updated_at.isoformat(),
        "responsible_id": issue.responsible_id,
        "ai_analysis": issue.ai_analysis,
        "analyzing": synchronizer.is_analyzing(issue.id),
    }
