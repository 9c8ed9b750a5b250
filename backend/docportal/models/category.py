"""Category model: top level of the documentation tree."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class IconType(str, Enum):
    """How the icon column is interpreted."""
    FONTAWESOME = "fontawesome"
    IMAGE = "image"


class Category(Base):
    """Top-level documentation category."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # Font Awesome class name or image URL depending on icon_type
    icon: Mapped[str] = mapped_column(String(500), default="fa-folder", nullable=False)
    icon_type: Mapped[str] = mapped_column(
        String(20), default=IconType.FONTAWESOME.value, nullable=False
    )

    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    subcategories: Mapped[list["Subcategory"]] = relationship(  # noqa: F821
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
