"""Database models for Docportal."""

from .database import Base, get_db, init_db, close_db
from .category import Category, IconType
from .subcategory import Subcategory
from .document import Document
from .user import User
from .setting import Setting

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "Category",
    "IconType",
    "Subcategory",
    "Document",
    "User",
    "Setting",
]
