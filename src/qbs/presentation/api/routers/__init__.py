from qbs.presentation.api.routers.auth import router as auth_router
from qbs.presentation.api.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "profile_router",
]
