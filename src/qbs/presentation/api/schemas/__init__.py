from qbs.presentation.api.schemas.auth import (
    AuthResponse,
    MessageResponse,
    ProtectedResponse,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from qbs.presentation.api.schemas.profile import (
    ProfileResponse,
    ProfileUpdateResponse,
    SecurityStatusResponse,
)

__all__ = [
    "AuthResponse",
    "MessageResponse",
    "ProfileResponse",
    "ProfileUpdateResponse",
    "ProtectedResponse",
    "RegisterResponse",
    "SecurityStatusResponse",
    "TokenResponse",
    "UserResponse",
]
