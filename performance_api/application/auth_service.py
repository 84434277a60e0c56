"""Account application service: login, registration, profile, activation, 2FA enrolment."""

import logging
import uuid
from typing import Optional, Tuple

from performance_api.application.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTwoFactorCodeError,
    ResourceNotFoundError,
    TwoFactorStateError,
)
from performance_api.application.repositories import UserRepository
from performance_api.domain.models.user import Role, User
from performance_api.security.passwords import hash_password, verify_password
from performance_api.security.tokens import TokenService
from performance_api.security.two_factor import TotpVerifier


class AuthService:
    """
    Orchestrates the user store, token issuance and TOTP enrolment.
    No HTTP; role and 2FA gating of callers happen before these methods run.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        totp: TotpVerifier,
        logger: logging.Logger,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._totp = totp
        self._logger = logger

    async def login(self, email: str, password: str) -> Tuple[User, str, int]:
        """
        Verify credentials and issue a token. Unknown email, wrong password and
        inactive account all raise the same InvalidCredentialsError.
        """
        user = await self._users.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            self._logger.info("login_rejected", extra={"email": email.strip().lower()})
            raise InvalidCredentialsError("Invalid credentials")

        user.record_login()
        await self._users.save(user)
        token, expires_in = self._tokens.issue(user.id)
        self._logger.info("login_succeeded", extra={"account_id": user.id})
        return user, token, expires_in

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User not found")
        return user

    async def register_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: Role,
        department: str,
    ) -> User:
        normalized = email.strip().lower()
        if await self._users.get_by_email(normalized) is not None:
            raise DuplicateEmailError("User already exists with this email")
        user = User(
            id=str(uuid.uuid4()),
            name=name.strip(),
            email=normalized,
            password_hash=hash_password(password),
            role=role,
            department=department.strip(),
        )
        await self._users.add(user)
        self._logger.info("user_registered", extra={"new_user_id": user.id, "role": role.value})
        return user

    async def update_profile(
        self,
        user: User,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> User:
        if email is not None:
            normalized = email.strip().lower()
            if normalized != user.email:
                existing = await self._users.get_by_email(normalized)
                if existing is not None and existing.id != user.id:
                    raise DuplicateEmailError("Email already in use")
                user.email = normalized
        if name is not None:
            user.name = name.strip()
        if avatar is not None:
            user.avatar = avatar
        await self._users.save(user)
        return user

    async def set_active(self, user_id: str, is_active: bool) -> User:
        """Soft enable/disable. A disabled user's existing tokens stop resolving."""
        user = await self.get_user(user_id)
        user.is_active = is_active
        await self._users.save(user)
        self._logger.info(
            "user_status_changed",
            extra={"target_user_id": user_id, "is_active": is_active},
        )
        return user

    async def setup_two_factor(self, user: User) -> Tuple[str, str]:
        """Store a new pending secret (encrypted). Returns (secret, provisioning uri)."""
        if user.two_factor_enabled:
            raise TwoFactorStateError("2FA is already enabled")
        secret = self._totp.new_secret()
        user.two_factor_secret = self._totp.seal(secret)
        await self._users.save(user)
        return secret, self._totp.provisioning_uri(secret, user.email)

    async def enable_two_factor(self, user: User, code: str) -> User:
        if user.two_factor_enabled:
            raise TwoFactorStateError("2FA is already enabled")
        if not user.two_factor_secret:
            raise TwoFactorStateError("2FA setup not initiated")
        if not self._totp.verify_secret(user.two_factor_secret, code):
            raise InvalidTwoFactorCodeError("Invalid 2FA token")
        user.two_factor_enabled = True
        await self._users.save(user)
        self._logger.info("two_factor_enabled", extra={"account_id": user.id})
        return user

    async def disable_two_factor(self, user: User, code: str) -> User:
        if not user.two_factor_enabled:
            raise TwoFactorStateError("2FA is not enabled")
        if not self._totp.verify_secret(user.two_factor_secret, code):
            raise InvalidTwoFactorCodeError("Invalid 2FA token")
        user.two_factor_enabled = False
        user.two_factor_secret = None
        await self._users.save(user)
        self._logger.info("two_factor_disabled", extra={"account_id": user.id})
        return user
