# Application layer: services that orchestrate domain, security and storage.
# Services are imported from their modules directly; security depends on the
# repository protocols exported here.

from performance_api.application.exceptions import (
    ApplicationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTwoFactorCodeError,
    ResourceNotFoundError,
    TwoFactorStateError,
)
from performance_api.application.repositories import (
    OwnedResource,
    ResourceRepository,
    UserRepository,
)

__all__ = [
    "ApplicationError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "InvalidTwoFactorCodeError",
    "OwnedResource",
    "ResourceNotFoundError",
    "ResourceRepository",
    "TwoFactorStateError",
    "UserRepository",
]
