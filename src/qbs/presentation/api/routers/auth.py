"""Authentication router: registration, login, tokens, verification, OAuth."""

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Query, status
from fastapi.responses import RedirectResponse

from qbs.presentation.api.dependencies import (
    AuthService,
    CurrentUser,
    CurrentUserContext,
    DBSession,
    ResetService,
    SettingsDep,
    VerificationService,
)
from qbs.presentation.api.schemas.auth import (
    AuthResponse,
    MessageResponse,
    ProtectedResponse,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from qbs_identity.domain.user import User
from qbs_identity.infrastructure.oauth import OAuthError
from qbs_identity.validation import (
    ForgotPasswordInput,
    LoginInput,
    LogoutInput,
    RefreshTokenInput,
    RegistrationInput,
    ResendVerificationInput,
    ResetPasswordInput,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)
RESEND_VERIFICATION_MESSAGE = (
    "If an unverified account with that email exists, "
    "a new verification link has been sent."
)


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        country=user.country,
        is_email_verified=user.is_email_verified,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Invalid input"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegistrationInput,
    auth_service: AuthService,
    verification_service: VerificationService,
    session: DBSession,
) -> RegisterResponse:
    """
    Create an account with email and password.

    A welcome email with a verification link is sent in the background
    once the account is committed.
    Tokens are only returned when auto-login after registration is enabled.
    """
    result = await auth_service.register(request)
    await session.commit()
    verification_service.send_pending()

    message = "Account created successfully."
    if result.email_verification_required:
        message += " Please check your email to verify your account."

    response = RegisterResponse(
        message=message,
        user=_user_response(result.user),
        email_verification_required=result.email_verification_required,
        redirect_to=result.redirect_to,
    )
    if result.tokens is not None:
        response.access_token = result.tokens.access_token
        response.refresh_token = result.tokens.refresh_token
        response.token_type = result.tokens.token_type
        response.expires_in = result.tokens.expires_in
    return response


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Invalid input"},
        401: {"description": "Invalid credentials"},
        403: {"description": "Email not verified"},
    },
)
async def login(
    request: LoginInput,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """Authenticate with email and password and receive a token pair."""
    result = await auth_service.login(request)
    await session.commit()

    return AuthResponse(
        user=_user_response(result.user),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        token_type=result.tokens.token_type,
        expires_in=result.tokens.expires_in,
    )


@router.post(
    "/logout",
    summary="Logout user",
    responses={
        200: {"description": "Logged out successfully"},
        401: {"description": "Missing or invalid token"},
    },
)
async def logout(
    context: CurrentUserContext,
    auth_service: AuthService,
    request: LogoutInput | None = None,
) -> MessageResponse:
    """Revoke the presented access token (and a refresh token, if sent)."""
    refresh_token = request.refresh_token if request else None
    await auth_service.logout(context, refresh_token=refresh_token)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/refresh-token",
    summary="Refresh access token",
    responses={
        200: {"description": "New access token issued"},
        401: {"description": "Invalid or expired refresh token"},
    },
)
async def refresh_token(
    request: RefreshTokenInput,
    auth_service: AuthService,
) -> TokenResponse:
    result = await auth_service.refresh(request.refresh_token)
    return TokenResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        token_type=result.token_type,
        expires_in=result.expires_in,
    )


@router.get(
    "/verify-email",
    summary="Verify email address",
    responses={
        200: {"description": "Email verified"},
        400: {"description": "Invalid, expired or already used token"},
    },
)
async def verify_email(
    token: Annotated[str, Query(min_length=1)],
    verification_service: VerificationService,
    session: DBSession,
) -> MessageResponse:
    await verification_service.verify(token)
    await session.commit()
    return MessageResponse(message="Email verified successfully. You can now log in.")


@router.post(
    "/resend-verification",
    summary="Resend verification email",
    responses={200: {"description": "Generic acknowledgment"}},
)
async def resend_verification(
    request: ResendVerificationInput,
    verification_service: VerificationService,
    session: DBSession,
) -> MessageResponse:
    await verification_service.resend(request.email)
    await session.commit()
    verification_service.send_pending()
    return MessageResponse(message=RESEND_VERIFICATION_MESSAGE)


@router.post(
    "/forgot-password",
    summary="Request password reset",
    responses={
        200: {"description": "If the email exists, a reset link has been sent"},
    },
)
async def forgot_password(
    request: ForgotPasswordInput,
    reset_service: ResetService,
) -> MessageResponse:
    """Request a password reset email.

    The response is identical whether or not the address is registered.
    """
    await reset_service.request_reset(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    summary="Reset password with token",
    responses={
        200: {"description": "Password reset successfully"},
        400: {"description": "Invalid or expired token, or weak password"},
    },
)
async def reset_password(
    request: ResetPasswordInput,
    reset_service: ResetService,
    session: DBSession,
) -> MessageResponse:
    await reset_service.reset_password(request.token, request.new_password)
    await session.commit()
    return MessageResponse(message="Password has been reset successfully.")


@router.get(
    "/google",
    status_code=status.HTTP_302_FOUND,
    summary="Start Google sign-in",
    responses={
        302: {"description": "Redirect to Google consent screen"},
        503: {"description": "Google sign-in not configured"},
    },
)
async def google_login(auth_service: AuthService) -> RedirectResponse:
    url = auth_service.google_authorization_url()
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get(
    "/google/callback",
    status_code=status.HTTP_302_FOUND,
    summary="Google sign-in callback",
    responses={
        302: {"description": "Redirect to the frontend with tokens"},
        500: {"description": "Provider or account error"},
    },
)
async def google_callback(
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """
    Complete Google sign-in.

    Resolves the Google profile to an account (existing, linked by email,
    or newly created) and redirects to the frontend with a token pair.
    """
    if error:
        msg = f"Google sign-in was not completed: {error}"
        raise OAuthError(msg)
    if not code or not state:
        msg = "Missing code or state in Google callback"
        raise OAuthError(msg)

    result = await auth_service.google_login(code, state)
    await session.commit()

    params = urlencode(
        {
            "token": result.tokens.access_token,
            "refresh": result.tokens.refresh_token,
            "is_new_user": str(result.is_new_user).lower(),
            "redirect_to": result.redirect_to,
        },
    )
    frontend = settings.frontend_base_url.rstrip("/")
    logger.info(
        "Google sign-in for user %s (new=%s, linked=%s)",
        result.user.id,
        result.is_new_user,
        result.linked,
    )
    return RedirectResponse(
        f"{frontend}/social-login-success?{params}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/protected",
    summary="Protected probe",
    responses={
        200: {"description": "Token accepted"},
        401: {"description": "Missing, invalid or revoked token"},
    },
)
async def protected(user: CurrentUser) -> ProtectedResponse:
    return ProtectedResponse(
        message="This is a protected route",
        user=_user_response(user),
    )
