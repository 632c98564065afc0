"""Exception hierarchy for the GitHub App client layer.

Construction problems raise ``ConfigurationError`` and are never retried.
``MintError`` wraps a failed installation-token exchange and is surfaced
to callers of the token source / pool unchanged.  ``TransportError`` is
raised when an HTTP call fails before any response was received.

Exhausted retries are not an error: the final response is returned as-is.
"""


class GitHubAppError(Exception):
    """Base exception for all ghapp errors."""


class ConfigurationError(GitHubAppError):
    """Raised when an identity, token source or pool cannot be constructed."""


class MintError(GitHubAppError):
    """Raised when minting an installation access token fails.

    Attributes:
        app_id:      GitHub App identifier the mint was attempted for.
        detail:      Human-readable failure reason.
        status_code: HTTP status from the token endpoint, when one was received.
    """

    def __init__(self, app_id: str, detail: str = "", status_code: int | None = None) -> None:
        self.app_id = app_id
        self.detail = detail
        self.status_code = status_code
        msg = f"Token mint failed for app {app_id}"
        if status_code is not None:
            msg += f" (HTTP {status_code})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class TransportError(GitHubAppError):
    """Raised when the HTTP transport fails before a response is obtained."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        self.detail = detail
        msg = f"Transport failure for {url}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
