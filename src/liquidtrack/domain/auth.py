"""Domain models for authentication."""

from dataclasses import dataclass
from enum import Enum


class GateState(Enum):
    """Authentication state of the application."""

    UNKNOWN = "unknown"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class AuthSession:
    """Represents a signed-in user session."""

    user_id: str
    email: str | None
    access_token: str
