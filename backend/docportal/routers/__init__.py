"""API routers for Docportal."""

from .auth import router as auth_router
from .structure import router as structure_router
from .search import router as search_router
from .categories import router as categories_router
from .documents import router as documents_router
from .users import router as users_router
from .settings import router as settings_router
from .uploads import router as uploads_router

__all__ = [
    "auth_router",
    "structure_router",
    "search_router",
    "categories_router",
    "documents_router",
    "users_router",
    "settings_router",
    "uploads_router",
]
