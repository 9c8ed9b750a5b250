"""Services for Docportal."""

from .auth import AuthService, get_auth_service
from .category import CategoryService, SubcategoryService
from .document import DocumentService
from .search import SearchService, rank_documents, normalize_text
from .setting import SettingService
from .structure import StructureService, first_guide_path
from .tree import build_tree, flatten_with_indent
from .user import UserService

__all__ = [
    "AuthService",
    "get_auth_service",
    "CategoryService",
    "SubcategoryService",
    "DocumentService",
    "SearchService",
    "rank_documents",
    "normalize_text",
    "SettingService",
    "StructureService",
    "first_guide_path",
    "build_tree",
    "flatten_with_indent",
    "UserService",
]
