"""Second-factor gate and TOTP verification. No FastAPI."""

import logging
from typing import Optional, Protocol

import pyotp

from performance_api.domain.models.user import User
from performance_api.security.encryption import EncryptionService
from performance_api.security.exceptions import (
    AuthenticationError,
    EncryptionError,
    TwoFactorRequiredError,
)

logger = logging.getLogger(__name__)


class TwoFactorVerifier(Protocol):
    """Extension point for second-factor strategies."""

    def verify(self, user: User, code: str) -> bool:
        ...


class TotpVerifier:
    """RFC 6238 time-based codes. Secrets are stored encrypted on the user."""

    def __init__(self, encryption: EncryptionService, issuer: str, valid_window: int = 2) -> None:
        self._encryption = encryption
        self._issuer = issuer
        self._valid_window = valid_window

    def new_secret(self) -> str:
        return pyotp.random_base32()

    def seal(self, secret: str) -> str:
        return self._encryption.encrypt(secret)

    def provisioning_uri(self, secret: str, email: str) -> str:
        return pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=self._issuer)

    def verify_secret(self, sealed_secret: Optional[str], code: str) -> bool:
        """Check code against an encrypted secret. Undecryptable secrets never verify."""
        if not sealed_secret:
            return False
        try:
            secret = self._encryption.decrypt(sealed_secret)
        except EncryptionError:
            logger.error("two_factor_secret_unreadable")
            return False
        return pyotp.TOTP(secret).verify(code, valid_window=self._valid_window)

    def verify(self, user: User, code: str) -> bool:
        return self.verify_secret(user.two_factor_secret, code)


class TwoFactorGate:
    """Require and verify X-2FA-Token for users with 2FA enabled."""

    def __init__(self, verifier: TwoFactorVerifier) -> None:
        self._verifier = verifier

    def check(self, user: User, code: Optional[str]) -> None:
        if not user.two_factor_enabled:
            return
        if not code or not code.strip():
            raise TwoFactorRequiredError("2FA token required.")
        if not self._verifier.verify(user, code.strip()):
            raise AuthenticationError("Invalid 2FA token.")
