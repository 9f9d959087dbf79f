"""Exceptions raised across the tracker."""


class LiquidTrackError(Exception):
    """Base class for tracker errors."""


class ConfigurationError(LiquidTrackError):
    """Raised when required credentials are missing."""

    def __init__(self, name: str, env_name: str) -> None:
        super().__init__(f"Missing required configuration element: {name}")
        self.name = name
        self.env_name = env_name


class AuthError(LiquidTrackError):
    """Raised when the authentication provider rejects a request."""


class StoreError(LiquidTrackError):
    """Raised when a remote store operation fails."""


class AdviceError(LiquidTrackError):
    """Raised by advice clients; never leaves the advice service."""
