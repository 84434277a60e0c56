"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(SecurityError):
    """Missing, invalid or expired credential, or the credential's user is gone/inactive."""


class AuthorizationError(SecurityError):
    """Raised when role, department or ownership does not admit the requester."""


class TwoFactorRequiredError(SecurityError):
    """Raised when the user has 2FA enabled and no second-factor code was sent."""


class RateLimitExceededError(SecurityError):
    """Raised when an actor exhausted the attempts allowed in the sliding window."""

    def __init__(self, message: str, retry_after_seconds: int) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class AccessResolutionError(SecurityError):
    """Unexpected failure while resolving a scoped access decision (not a denial)."""


class EncryptionError(SecurityError):
    """Raised when encryption/decryption fails (e.g. missing key, wrong key)."""
