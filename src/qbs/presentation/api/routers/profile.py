"""Profile router: the signed-in user's own account."""

import logging

from fastapi import APIRouter

from qbs.presentation.api.dependencies import (
    CurrentUser,
    CurrentUserContext,
    DBSession,
    ProfileServiceDep,
    VerificationService,
)
from qbs.presentation.api.schemas.auth import MessageResponse
from qbs.presentation.api.schemas.profile import (
    ProfileResponse,
    ProfileUpdateResponse,
    SecurityStatusResponse,
)
from qbs_identity.domain.user import User
from qbs_identity.validation import AccountDeletionInput, ProfileUpdateInput

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_response(user: User) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        country=user.country,
        is_email_verified=user.is_email_verified,
        has_password=user.has_usable_password,
        google_linked=user.google_id is not None,
        created_at=user.created_at,
        updated_at=user.updated_at,
        last_login_at=user.last_login_at,
    )


@router.get(
    "/me",
    summary="Get current user's profile",
    responses={
        200: {"description": "Profile data"},
        401: {"description": "Not authenticated"},
    },
)
async def get_profile(user: CurrentUser) -> ProfileResponse:
    return _profile_response(user)


@router.put(
    "/me",
    summary="Update profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Invalid input"},
        409: {"description": "Email already in use"},
    },
)
async def update_profile(
    request: ProfileUpdateInput,
    user: CurrentUser,
    profile_service: ProfileServiceDep,
    verification_service: VerificationService,
    session: DBSession,
) -> ProfileUpdateResponse:
    """
    Update first name, last name, email or country.

    Changing the email marks the account unverified and sends a new
    verification link to the new address.
    """
    updated, email_changed = await profile_service.update_profile(user.id, request)
    await session.commit()
    verification_service.send_pending()

    message = "Profile updated successfully"
    if email_changed:
        message += ". Please verify your new email address."
    return ProfileUpdateResponse(
        message=message,
        user=_profile_response(updated),
        email_changed=email_changed,
        email_verification_required=not updated.is_email_verified,
    )


@router.delete(
    "/me",
    summary="Delete account",
    responses={
        200: {"description": "Account deleted"},
        400: {"description": "Confirmation missing"},
        401: {"description": "Not authenticated"},
    },
)
async def delete_account(
    request: AccountDeletionInput,
    context: CurrentUserContext,
    profile_service: ProfileServiceDep,
    session: DBSession,
) -> MessageResponse:
    """Permanently delete the account. Requires confirm_delete="DELETE_MY_ACCOUNT"."""
    await profile_service.delete_account(context, request.confirm_delete)
    await session.commit()
    return MessageResponse(message="Account deleted successfully")


@router.get(
    "/security-status",
    summary="Account security overview",
    responses={
        200: {"description": "Security status"},
        401: {"description": "Not authenticated"},
    },
)
async def security_status(
    user: CurrentUser,
    profile_service: ProfileServiceDep,
) -> SecurityStatusResponse:
    status = await profile_service.security_status(user.id)
    return SecurityStatusResponse(
        email_verified=status.email_verified,
        has_password=status.has_password,
        google_linked=status.google_linked,
        account_age_days=status.account_age_days,
        last_login_at=status.last_login_at,
        last_update=status.last_update,
        security_level=status.security_level,
        recommendations=status.recommendations,
    )
