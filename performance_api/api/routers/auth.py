"""Auth API router: login, current user, logout, registration, profile, 2FA enrolment."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request

from performance_api.api.dependencies import (
    audit_action,
    get_audit_intent,
    get_container,
    get_current_user,
    require_role,
    sensitive_operation_limit,
)
from performance_api.api.middleware import AuditIntent
from performance_api.container import Container
from performance_api.domain.models.user import Role, User
from performance_api.domain.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TwoFactorCodeRequest,
    TwoFactorSetupPayload,
    UserPayload,
)
from performance_api.domain.validators import validate_department, validate_password
from performance_api.governance.audit_models import AuditCategory, EntityType, Severity

router = APIRouter()


def _user_payload(user: User) -> dict:
    return UserPayload.model_validate(user).model_dump(mode="json")


@router.post(
    "/login",
    dependencies=[Depends(audit_action("User Login", EntityType.USER, AuditCategory.LOGIN))],
)
async def login(
    request: Request,
    body: LoginRequest,
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    """Exchange email/password for a bearer token. Failures are audited too."""
    if intent is not None:
        intent.details = f"Login attempt for {body.email}"
    user, token, expires_in = await container.auth_service.login(body.email, body.password)
    request.state.user = user
    if intent is not None:
        intent.entity_id = user.id
        intent.details = f"{user.name} logged in"
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "expires_in": expires_in,
        "user": _user_payload(user),
    }


@router.get("/me")
async def me(user: Annotated[User, Depends(get_current_user)]):
    return {"success": True, "data": _user_payload(user)}


@router.post(
    "/logout",
    dependencies=[Depends(audit_action("User Logout", EntityType.USER, AuditCategory.LOGOUT))],
)
async def logout(
    user: Annotated[User, Depends(get_current_user)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    """Tokens are stateless; the client discards its token."""
    if intent is not None:
        intent.entity_id = user.id
    return {"success": True, "message": "Logged out successfully"}


@router.post(
    "/register",
    status_code=201,
    dependencies=[
        Depends(get_current_user),
        Depends(require_role(Role.ADMINISTRATOR)),
        Depends(audit_action("User Registration", EntityType.USER, AuditCategory.CREATE, Severity.MEDIUM)),
    ],
)
async def register(
    body: RegisterRequest,
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    validate_password(body.password)
    validate_department(body.department)
    user = await container.auth_service.register_user(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        department=body.department,
    )
    if intent is not None:
        intent.entity_id = user.id
        intent.details = f"Registered {user.email} as {user.role.value}"
    return {"success": True, "message": "User registered successfully", "data": _user_payload(user)}


@router.put(
    "/profile",
    dependencies=[Depends(audit_action("Update Profile", EntityType.USER, AuditCategory.UPDATE))],
)
async def update_profile(
    body: ProfileUpdateRequest,
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    updated = await container.auth_service.update_profile(
        user, name=body.name, email=body.email, avatar=body.avatar
    )
    if intent is not None:
        intent.entity_id = user.id
    return {"success": True, "message": "Profile updated successfully", "data": _user_payload(updated)}


@router.post(
    "/setup-2fa",
    dependencies=[
        Depends(get_current_user),
        Depends(sensitive_operation_limit("setup-2fa")),
        Depends(audit_action("2FA Setup Initiated", EntityType.USER, AuditCategory.UPDATE, Severity.MEDIUM)),
    ],
)
async def setup_two_factor(
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    secret, uri = await container.auth_service.setup_two_factor(user)
    if intent is not None:
        intent.entity_id = user.id
    payload = TwoFactorSetupPayload(secret=secret, provisioning_uri=uri)
    return {"success": True, "data": payload.model_dump()}


@router.post(
    "/verify-2fa",
    dependencies=[Depends(audit_action("2FA Enabled", EntityType.USER, AuditCategory.UPDATE, Severity.MEDIUM))],
)
async def verify_two_factor(
    body: TwoFactorCodeRequest,
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    """Confirm enrolment with the first code from the authenticator app."""
    await container.auth_service.enable_two_factor(user, body.token)
    if intent is not None:
        intent.entity_id = user.id
    return {"success": True, "message": "2FA enabled successfully"}


@router.post(
    "/disable-2fa",
    dependencies=[
        Depends(get_current_user),
        Depends(sensitive_operation_limit("disable-2fa")),
        Depends(audit_action("2FA Disabled", EntityType.USER, AuditCategory.UPDATE, Severity.HIGH)),
    ],
)
async def disable_two_factor(
    body: TwoFactorCodeRequest,
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    await container.auth_service.disable_two_factor(user, body.token)
    if intent is not None:
        intent.entity_id = user.id
    return {"success": True, "message": "2FA disabled successfully"}
