"""Navigation structure: categories with their subcategory trees and guides."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import HiddenPolicy, get_config
from ..errors import StorageError
from .category import CategoryService, SubcategoryService
from .document import DocumentService
from .tree import Icon, SubcategoryNode, build_tree, flatten_tree, icon_from_row

logger = logging.getLogger(__name__)


@dataclass
class CategoryNode:
    id: int
    name: str
    display_name: str
    slug: str
    icon: Icon
    order_index: int
    is_hidden: bool
    subcategories: list[SubcategoryNode] = field(default_factory=list)


class StructureService:
    """
    Assembles the category -> subcategory -> guide tree for navigation.

    The structure is rebuilt from the database on every call. A failing
    query is logged and yields an empty structure so pages can still render
    a "no guides available" state; callers cannot tell the two apart from the
    return value.
    """

    def __init__(self, db: AsyncSession, hidden_policy: Optional[HiddenPolicy] = None):
        self.db = db
        self.hidden_policy = hidden_policy or get_config().structure.hidden_policy

    async def load_structure(
        self, include_hidden: bool = False, published_only: bool = True
    ) -> list[CategoryNode]:
        """Load the structure, or an empty list if the database fails."""
        try:
            return await self._load(include_hidden, published_only)
        except (StorageError, SQLAlchemyError) as e:
            logger.error(f"Error loading docs structure: {e}")
            return []

    async def _load(self, include_hidden: bool, published_only: bool) -> list[CategoryNode]:
        categories = await CategoryService(self.db).get_all()
        subcategories = await SubcategoryService(self.db).get_all()
        docs_by_subcategory = await DocumentService(self.db).get_grouped_by_subcategory(
            (sub.id for sub in subcategories), published_only=published_only
        )

        structure = []
        for category in categories:
            if category.is_hidden and not include_hidden:
                continue

            structure.append(
                CategoryNode(
                    id=category.id,
                    name=category.name,
                    display_name=category.display_name,
                    slug=category.slug,
                    icon=icon_from_row(category.icon, category.icon_type, default="fa-folder"),
                    order_index=category.order_index,
                    is_hidden=category.is_hidden,
                    subcategories=build_tree(
                        subcategories,
                        category_id=category.id,
                        include_hidden=include_hidden,
                        docs_by_subcategory=docs_by_subcategory,
                        category_slug=category.slug,
                        hidden_policy=self.hidden_policy,
                    ),
                )
            )

        logger.debug(f"Loaded structure with {len(structure)} categories")
        return structure


def first_guide_path(structure: Sequence[CategoryNode]) -> Optional[str]:
    """Path of the first guide in navigation order, if there is any."""
    for category in structure:
        for node, _ in flatten_tree(category.subcategories):
            if node.guides:
                return node.guides[0].path
    return None
