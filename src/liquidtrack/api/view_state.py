"""Presentation state owned by the web layer."""

from collections.abc import Iterable
from dataclasses import dataclass

from liquidtrack.domain.issues import Issue
from liquidtrack.i18n import Language


@dataclass
class ViewState:
    """UI state shared by every rendered view."""

    language: Language = "ru"
    search_term: str = ""
    modal_open: bool = False
    modal_error: bool = False
    sign_up_mode: bool = False
    auth_error: str | None = None
    auth_notice: str | None = None
    alert: str | None = None

    def take_alert(self) -> str | None:
        """Return the pending alert and clear it."""
        alert, self.alert = self.alert, None
        return alert

    def reset_auth_messages(self) -> None:
        """Forget inline auth feedback."""
        self.auth_error = None
        self.auth_notice = None


def filter_issues(issues: Iterable[Issue], term: str) -> list[Issue]:
    """Return issues whose title or description contains ``term``, ignoring case."""
    needle = term.lower()
    if not needle:
        return list(issues)
    return [
        issue
        for issue in issues
        if needle in issue.title.lower() or needle in issue.description.lower()
    ]
