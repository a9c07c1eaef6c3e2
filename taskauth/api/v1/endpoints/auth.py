"""Auth API: register, login, logout, refresh, password change and reset.

Routes are thin: they translate request bodies into AuthService calls and
wrap results in the {success, message, data} envelope. Errors propagate as
AppException and are rendered by the registered exception handlers.
"""

from fastapi import APIRouter, Request

from taskauth.api.v1.dependencies import AuthServiceDep, CurrentClaims
from taskauth.core.limiter import (
    limit_login,
    limit_otp_verify,
    limit_password_reset,
    limit_register,
)
from taskauth.domain.exceptions import ValidationException
from taskauth.schemas.auth import (
    AccessTokenData,
    AuthData,
    ChangePasswordRequest,
    ExtendSessionRequest,
    ForgotPasswordData,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetTokenData,
    SessionExtendData,
    VerifyOtpRequest,
)
from taskauth.schemas.common import ApiResponse
from taskauth.schemas.user import UserResponse

router = APIRouter()


def _auth_data(result) -> AuthData:
    return AuthData(
        user=UserResponse.model_validate(result.user),
        token=result.token,
        expires_in=result.expires_in,
        refresh_token=result.refresh_token,
        session_id=result.session_id,
    )


def _require_session_id(claims) -> str:
    if not claims.session_id:
        raise ValidationException("Token is not bound to a session", field="session_id")
    return claims.session_id


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
@limit_register
async def register(request: Request, body: RegisterRequest, auth_service: AuthServiceDep):
    """Create an account and return an access token (public endpoint)."""
    result = await auth_service.register(body.name, body.email, body.password)
    return ApiResponse(message="User registered successfully", data=_auth_data(result))


@router.post("/login", response_model=ApiResponse[AuthData])
@limit_login
async def login(request: Request, body: LoginRequest, auth_service: AuthServiceDep):
    """Authenticate with e-mail and password; open a session."""
    result = await auth_service.login(body.email, body.password)
    return ApiResponse(message="Login successful", data=_auth_data(result))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(claims: CurrentClaims, auth_service: AuthServiceDep):
    """End the session bound to the bearer token."""
    await auth_service.logout(_require_session_id(claims))
    return ApiResponse(message="Logged out successfully")


@router.post("/refresh", response_model=ApiResponse[AccessTokenData])
@limit_login
async def refresh(request: Request, body: RefreshRequest, auth_service: AuthServiceDep):
    """Exchange a refresh token for a new access token."""
    token = await auth_service.refresh_access_token(body.refresh_token)
    return ApiResponse(
        message="Token refreshed successfully",
        data=AccessTokenData(
            token=token,
            expires_in=auth_service.access_token_ttl,
        ),
    )


@router.post("/session/extend", response_model=ApiResponse[SessionExtendData])
async def extend_session(
    body: ExtendSessionRequest, claims: CurrentClaims, auth_service: AuthServiceDep
):
    """Push the current session's expiry forward."""
    extended = await auth_service.extend_session(
        _require_session_id(claims), body.additional_seconds
    )
    return ApiResponse(
        message="Session extended" if extended else "Session not found",
        data=SessionExtendData(extended=extended),
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(claims: CurrentClaims, auth_service: AuthServiceDep):
    """Return the currently authenticated user. Requires Authorization."""
    user = await auth_service.get_current_user(claims.subject)
    return ApiResponse(message="Current user", data=UserResponse.model_validate(user))


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    body: ChangePasswordRequest, claims: CurrentClaims, auth_service: AuthServiceDep
):
    """Change the password of the authenticated user."""
    await auth_service.change_password(
        claims.subject, body.current_password, body.new_password
    )
    return ApiResponse(message="Password changed successfully")


@router.post("/forgot-password", response_model=ApiResponse[ForgotPasswordData])
@limit_password_reset
async def forgot_password(
    request: Request, body: ForgotPasswordRequest, auth_service: AuthServiceDep
):
    """Send a reset OTP. The response does not reveal whether the address exists."""
    result = await auth_service.forgot_password(body.email)
    return ApiResponse(
        message=result.message,
        data=ForgotPasswordData(otp_expires_at=result.otp_expires_at),
    )


@router.post("/verify-otp", response_model=ApiResponse[ResetTokenData])
@limit_otp_verify
async def verify_otp(request: Request, body: VerifyOtpRequest, auth_service: AuthServiceDep):
    """Trade a valid OTP for a single-use reset token."""
    result = await auth_service.verify_otp(body.email, body.otp)
    return ApiResponse(
        message="OTP verified successfully. You can now reset your password.",
        data=ResetTokenData(reset_token=result.reset_token, expires_at=result.expires_at),
    )


@router.post("/reset-password", response_model=ApiResponse[None])
@limit_password_reset
async def reset_password(
    request: Request, body: ResetPasswordRequest, auth_service: AuthServiceDep
):
    """Set a new password with a reset token from verify-otp."""
    await auth_service.set_new_password(body.reset_token, body.new_password)
    return ApiResponse(
        message="Password reset successfully. You can now login with your new password."
    )
