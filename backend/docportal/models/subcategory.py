"""Subcategory model with self-referential nesting."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .category import IconType
from .database import Base


class Subcategory(Base):
    """Subcategory, optionally nested under another subcategory of the same category."""

    __tablename__ = "subcategories"
    # Slugs only need to be unique inside their category
    __table_args__ = (UniqueConstraint("category_id", "slug", name="uq_subcategory_category_slug"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_subcategory_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=True, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)

    icon: Mapped[str] = mapped_column(String(500), default="fa-folder-open", nullable=False)
    icon_type: Mapped[str] = mapped_column(
        String(20), default=IconType.FONTAWESOME.value, nullable=False
    )

    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    category: Mapped["Category"] = relationship(  # noqa: F821
        "Category", back_populates="subcategories"
    )
    children: Mapped[list["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    parent: Mapped[Optional["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="children",
        remote_side=[id],
    )
    documents: Mapped[list["Document"]] = relationship(  # noqa: F821
        "Document",
        back_populates="subcategory",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
