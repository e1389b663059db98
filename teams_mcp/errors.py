"""
Error taxonomy for the Teams MCP server.

Every error carries a ``category`` so a failed tool call tells the user
whether to fix their secrets, fix the card payload, or retry later.
"""

from typing import List, Optional


class TeamsMCPError(Exception):
    """Base class for all errors raised by this package."""

    category = "error"
    label = "Error"

    def __str__(self) -> str:
        return f"{self.label}: {self.args[0] if self.args else ''}"


class ConfigurationError(TeamsMCPError):
    """A required setting is missing or malformed."""

    category = "configuration"
    label = "Configuration error"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class AuthError(TeamsMCPError):
    """Bearer token could not be obtained."""

    category = "auth"
    label = "Authentication failed"


class MissingCredentials(AuthError):

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"missing credentials: {', '.join(self.missing)}")


class TokenRequestFailed(AuthError):
    """The token endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"token request failed ({status_code}): {body}")


class InvalidTokenResponse(AuthError):
    """The token endpoint answered 2xx but the body is unusable."""

    def __init__(self, reason: str, body: str = ""):
        self.reason = reason
        self.body = body
        super().__init__(f"invalid token response: {reason}")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationIssue:
    """One rejected field, located by a path like ``body[2].facts[11]``."""

    __slots__ = ("path", "message", "expected", "actual")

    def __init__(self, path: str, message: str,
                 expected: Optional[str] = None,
                 actual: Optional[str] = None):
        self.path = path
        self.message = message
        self.expected = expected
        self.actual = actual

    def to_dict(self):
        d = {"path": self.path, "message": self.message}
        if self.expected is not None:
            d["expected"] = self.expected
        if self.actual is not None:
            d["actual"] = self.actual
        return d

    def __str__(self) -> str:
        where = self.path or "(root)"
        text = f"{where}: {self.message}"
        if self.actual is not None:
            text += f" (got {self.actual})"
        return text

    def __repr__(self) -> str:
        return f"ValidationIssue({self.path!r}, {self.message!r})"


class CardValidationError(TeamsMCPError):
    """Tool arguments or card payload do not match the card grammar."""

    category = "validation"
    label = "Invalid input"

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(str(i) for i in self.issues))

    @property
    def paths(self) -> List[str]:
        return [i.path for i in self.issues]


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class TransportError(TeamsMCPError):
    """Network failure or non-2xx answer from the messaging API."""

    category = "transport"
    label = "Teams API error"

    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
