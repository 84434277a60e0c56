"""Security: authentication, RBAC, resource scoping, 2FA, encryption. No FastAPI."""

from performance_api.security.authentication import Authenticator
from performance_api.security.encryption import EncryptionService
from performance_api.security.rbac import RBACService
from performance_api.security.resource_access import ResourceAccessPolicy, ResourceTarget
from performance_api.security.tokens import TokenService
from performance_api.security.two_factor import TotpVerifier, TwoFactorGate, TwoFactorVerifier

__all__ = [
    "Authenticator",
    "EncryptionService",
    "RBACService",
    "ResourceAccessPolicy",
    "ResourceTarget",
    "TokenService",
    "TotpVerifier",
    "TwoFactorGate",
    "TwoFactorVerifier",
]
