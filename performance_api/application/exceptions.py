"""Application-layer exceptions. Do not reuse domain or security exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(ApplicationError):
    """Unknown email, wrong password or inactive account. Deliberately indistinguishable."""


class DuplicateEmailError(ApplicationError):
    """Raised when registering or changing to an email that is already taken."""


class ResourceNotFoundError(ApplicationError):
    """Raised when a user, task or score does not exist."""


class TwoFactorStateError(ApplicationError):
    """Raised when a 2FA operation does not fit the current enrolment state."""


class InvalidTwoFactorCodeError(ApplicationError):
    """Raised when an enrolment code does not verify against the pending secret."""
