"""Category and subcategory management."""

import logging
from typing import Optional

from sqlalchemy import select

from ..errors import NotFoundError, ValidationError
from ..models.category import Category, IconType
from ..models.subcategory import Subcategory
from ..utils.slug import is_valid_slug, slugify
from .base import StoreService
from .tree import FlatSubcategory, flatten_with_indent

logger = logging.getLogger(__name__)


def _clean_required(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _resolve_slug(slug: Optional[str], fallback: str) -> str:
    """Use the given slug or derive one; either way it must be valid."""
    slug = (slug or "").strip() or slugify(fallback)
    if not is_valid_slug(slug):
        raise ValidationError(f"Invalid slug '{slug}': use lowercase letters, digits and hyphens")
    return slug


def _check_icon_type(icon_type: Optional[str]) -> str:
    icon_type = icon_type or IconType.FONTAWESOME.value
    if icon_type not in {t.value for t in IconType}:
        raise ValidationError(f"Invalid icon type '{icon_type}'")
    return icon_type


class CategoryService(StoreService):
    """Service for managing top-level categories."""

    async def get_all(self) -> list[Category]:
        """Get all categories in display order."""
        result = await self._execute(
            select(Category).order_by(Category.order_index, Category.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, category_id: int) -> Optional[Category]:
        result = await self._execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        result = await self._execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Category]:
        result = await self._execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def _check_unique(self, name: str, slug: str, category_id: Optional[int] = None) -> None:
        existing = await self.get_by_name(name)
        if existing is not None and existing.id != category_id:
            raise ValidationError(f"A category named '{name}' already exists")
        existing = await self.get_by_slug(slug)
        if existing is not None and existing.id != category_id:
            raise ValidationError(f"A category with slug '{slug}' already exists")

    async def create(
        self,
        name: str,
        display_name: Optional[str] = None,
        slug: Optional[str] = None,
        icon: Optional[str] = None,
        icon_type: Optional[str] = None,
        order_index: int = 0,
        is_hidden: bool = False,
    ) -> Category:
        """Create a new category."""
        name = _clean_required(name, "Name")
        display_name = (display_name or "").strip() or name
        slug = _resolve_slug(slug, display_name)
        await self._check_unique(name, slug)

        category = Category(
            name=name,
            display_name=display_name,
            slug=slug,
            icon=icon or "fa-folder",
            icon_type=_check_icon_type(icon_type),
            order_index=order_index or 0,
            is_hidden=bool(is_hidden),
        )
        self.db.add(category)
        await self._flush("create category")
        logger.info(f"Created category '{slug}' ({category.id})")
        return category

    async def update(
        self,
        category_id: int,
        name: Optional[str] = None,
        display_name: Optional[str] = None,
        slug: Optional[str] = None,
        icon: Optional[str] = None,
        icon_type: Optional[str] = None,
        order_index: Optional[int] = None,
        is_hidden: Optional[bool] = None,
    ) -> Optional[Category]:
        """Update a category; fields left as None are unchanged."""
        category = await self.get_by_id(category_id)
        if category is None:
            return None

        new_name = _clean_required(name, "Name") if name is not None else category.name
        new_slug = _resolve_slug(slug, new_name) if slug is not None else category.slug
        await self._check_unique(new_name, new_slug, category_id=category.id)

        category.name = new_name
        category.slug = new_slug
        if display_name is not None:
            category.display_name = _clean_required(display_name, "Display name")
        if icon is not None:
            category.icon = icon
        if icon_type is not None:
            category.icon_type = _check_icon_type(icon_type)
        if order_index is not None:
            category.order_index = order_index
        if is_hidden is not None:
            category.is_hidden = is_hidden

        await self._flush("update category")
        return category

    async def delete(self, category_id: int) -> bool:
        """Delete a category with all its subcategories and documents."""
        category = await self.get_by_id(category_id)
        if category is None:
            return False

        await self.db.delete(category)
        await self._flush("delete category")
        logger.info(f"Deleted category {category_id}")
        return True


class SubcategoryService(StoreService):
    """Service for managing (nested) subcategories."""

    def _ordered(self, query):
        return query.order_by(Subcategory.order_index, Subcategory.name)

    async def get_all(self) -> list[Subcategory]:
        """Get every subcategory of every category."""
        result = await self._execute(self._ordered(select(Subcategory)))
        return list(result.scalars().all())

    async def get_root_by_category(self, category_id: int) -> list[Subcategory]:
        """Get the root-level subcategories of a category."""
        result = await self._execute(
            self._ordered(
                select(Subcategory).where(
                    Subcategory.category_id == category_id,
                    Subcategory.parent_subcategory_id == None,  # noqa: E711
                )
            )
        )
        return list(result.scalars().all())

    async def get_by_parent(self, parent_id: int) -> list[Subcategory]:
        """Get the direct children of a subcategory."""
        result = await self._execute(
            self._ordered(select(Subcategory).where(Subcategory.parent_subcategory_id == parent_id))
        )
        return list(result.scalars().all())

    async def get_all_by_category(self, category_id: int) -> list[Subcategory]:
        """Get every subcategory of a category, all nesting levels."""
        result = await self._execute(
            self._ordered(select(Subcategory).where(Subcategory.category_id == category_id))
        )
        return list(result.scalars().all())

    async def get_all_by_category_flat(self, category_id: int) -> list[FlatSubcategory]:
        """Get a category's subcategories as an indented, pre-ordered list."""
        rows = await self.get_all_by_category(category_id)
        return flatten_with_indent(rows)

    async def get_by_id(self, subcategory_id: int) -> Optional[Subcategory]:
        result = await self._execute(select(Subcategory).where(Subcategory.id == subcategory_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, category_id: int, slug: str) -> Optional[Subcategory]:
        result = await self._execute(
            select(Subcategory).where(
                Subcategory.category_id == category_id,
                Subcategory.slug == slug,
            )
        )
        return result.scalar_one_or_none()

    async def _check_slug(self, category_id: int, slug: str, subcategory_id: Optional[int] = None) -> None:
        existing = await self.get_by_slug(category_id, slug)
        if existing is not None and existing.id != subcategory_id:
            raise ValidationError(f"Slug '{slug}' is already used in this category")

    async def _check_parent(
        self, category_id: int, parent_id: int, subcategory_id: Optional[int] = None
    ) -> None:
        """The parent must exist, share the category and not be a descendant."""
        parent = await self.get_by_id(parent_id)
        if parent is None:
            raise NotFoundError(f"Parent subcategory {parent_id} not found")
        if parent.category_id != category_id:
            raise ValidationError("Parent subcategory belongs to a different category")
        if subcategory_id is None:
            return

        parents = {
            row.id: row.parent_subcategory_id
            for row in await self.get_all_by_category(category_id)
        }
        current: Optional[int] = parent_id
        seen: set[int] = set()
        while current is not None and current not in seen:
            if current == subcategory_id:
                raise ValidationError("A subcategory cannot be nested inside itself or its descendants")
            seen.add(current)
            current = parents.get(current)

    async def create(
        self,
        category_id: int,
        name: str,
        display_name: Optional[str] = None,
        slug: Optional[str] = None,
        icon: Optional[str] = None,
        icon_type: Optional[str] = None,
        order_index: int = 0,
        is_hidden: bool = False,
        parent_subcategory_id: Optional[int] = None,
    ) -> Subcategory:
        """Create a new subcategory, at root level or below a parent."""
        category = await CategoryService(self.db).get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")

        name = _clean_required(name, "Name")
        display_name = (display_name or "").strip() or name
        slug = _resolve_slug(slug, display_name)
        await self._check_slug(category_id, slug)
        if parent_subcategory_id:
            await self._check_parent(category_id, parent_subcategory_id)

        subcategory = Subcategory(
            category_id=category_id,
            parent_subcategory_id=parent_subcategory_id or None,
            name=name,
            display_name=display_name,
            slug=slug,
            icon=icon or "fa-folder-open",
            icon_type=_check_icon_type(icon_type),
            order_index=order_index or 0,
            is_hidden=bool(is_hidden),
        )
        self.db.add(subcategory)
        await self._flush("create subcategory")
        logger.info(f"Created subcategory '{category.slug}/{slug}' ({subcategory.id})")
        return subcategory

    async def update(
        self,
        subcategory_id: int,
        name: Optional[str] = None,
        display_name: Optional[str] = None,
        slug: Optional[str] = None,
        icon: Optional[str] = None,
        icon_type: Optional[str] = None,
        order_index: Optional[int] = None,
        is_hidden: Optional[bool] = None,
        parent_subcategory_id: Optional[int] = None,
    ) -> Optional[Subcategory]:
        """
        Update a subcategory; fields left as None are unchanged.

        ``parent_subcategory_id=0`` moves the subcategory to the root level.
        """
        subcategory = await self.get_by_id(subcategory_id)
        if subcategory is None:
            return None

        if name is not None:
            subcategory.name = _clean_required(name, "Name")
        if display_name is not None:
            subcategory.display_name = _clean_required(display_name, "Display name")
        if slug is not None:
            new_slug = _resolve_slug(slug, subcategory.display_name)
            await self._check_slug(subcategory.category_id, new_slug, subcategory_id=subcategory.id)
            subcategory.slug = new_slug
        if icon is not None:
            subcategory.icon = icon
        if icon_type is not None:
            subcategory.icon_type = _check_icon_type(icon_type)
        if order_index is not None:
            subcategory.order_index = order_index
        if is_hidden is not None:
            subcategory.is_hidden = is_hidden
        if parent_subcategory_id is not None:
            if parent_subcategory_id > 0:
                await self._check_parent(
                    subcategory.category_id, parent_subcategory_id, subcategory_id=subcategory.id
                )
                subcategory.parent_subcategory_id = parent_subcategory_id
            else:
                subcategory.parent_subcategory_id = None

        await self._flush("update subcategory")
        return subcategory

    async def delete(self, subcategory_id: int) -> bool:
        """Delete a subcategory, its nested subcategories and their documents."""
        subcategory = await self.get_by_id(subcategory_id)
        if subcategory is None:
            return False

        await self.db.delete(subcategory)
        await self._flush("delete subcategory")
        logger.info(f"Deleted subcategory {subcategory_id}")
        return True
