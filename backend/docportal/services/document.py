"""Document service for managing Markdown guides."""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..errors import NotFoundError, ValidationError
from ..models.category import Category
from ..models.document import Document
from ..models.subcategory import Subcategory
from ..utils.slug import is_valid_slug, slugify
from .base import StoreService

logger = logging.getLogger(__name__)


class DocumentService(StoreService):
    """Service for managing documents."""

    def _ordered(self, query):
        return query.order_by(Document.order_index, Document.title)

    async def get_all_with_names(self) -> list[Document]:
        """Get all documents (published or not) with subcategory and category loaded."""
        query = self._ordered(
            select(Document).options(
                selectinload(Document.subcategory).selectinload(Subcategory.category)
            )
        )
        result = await self._execute(query)
        return list(result.scalars().all())

    async def get_by_subcategory(self, subcategory_id: int, published_only: bool = False) -> list[Document]:
        """Get the documents of one subcategory in display order."""
        query = select(Document).where(Document.subcategory_id == subcategory_id)
        if published_only:
            query = query.where(Document.is_published == True)  # noqa: E712
        result = await self._execute(self._ordered(query))
        return list(result.scalars().all())

    async def get_grouped_by_subcategory(
        self, subcategory_ids: Iterable[int], published_only: bool = True
    ) -> dict[int, list[Document]]:
        """Get the documents of many subcategories, keyed by subcategory id."""
        ids = list(subcategory_ids)
        if not ids:
            return {}

        query = select(Document).where(Document.subcategory_id.in_(ids))
        if published_only:
            query = query.where(Document.is_published == True)  # noqa: E712
        result = await self._execute(self._ordered(query))

        grouped: dict[int, list[Document]] = {}
        for doc in result.scalars().all():
            grouped.setdefault(doc.subcategory_id, []).append(doc)
        return grouped

    async def get_by_path(
        self,
        category_slug: str,
        subcategory_slug: str,
        doc_slug: str,
        published_only: bool = True,
    ) -> Optional[Document]:
        """Resolve a /docs/<category>/<subcategory>/<doc> URL to a document."""
        query = (
            select(Document)
            .join(Subcategory, Document.subcategory_id == Subcategory.id)
            .join(Category, Subcategory.category_id == Category.id)
            .where(
                Category.slug == category_slug,
                Subcategory.slug == subcategory_slug,
                Document.slug == doc_slug,
            )
        )
        if published_only:
            query = query.where(Document.is_published == True)  # noqa: E712

        result = await self._execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, document_id: int) -> Optional[Document]:
        """Get a document by ID."""
        query = select(Document).options(
            selectinload(Document.subcategory).selectinload(Subcategory.category)
        ).where(Document.id == document_id)

        result = await self._execute(query)
        return result.scalar_one_or_none()

    async def _get_slug_owner(self, subcategory_id: int, slug: str) -> Optional[Document]:
        result = await self._execute(
            select(Document).where(
                Document.subcategory_id == subcategory_id,
                Document.slug == slug,
            )
        )
        return result.scalar_one_or_none()

    async def _resolve_slug(
        self,
        subcategory_id: int,
        slug: Optional[str],
        title: str,
        document_id: Optional[int] = None,
    ) -> str:
        """
        Validate an explicit slug, or derive a unique one from the title.

        Explicit slugs must be free within the subcategory; derived slugs get
        a numeric suffix until they are.
        """
        explicit = (slug or "").strip()
        if explicit:
            if not is_valid_slug(explicit):
                raise ValidationError(
                    f"Invalid slug '{explicit}': use lowercase letters, digits and hyphens"
                )
            existing = await self._get_slug_owner(subcategory_id, explicit)
            if existing is not None and existing.id != document_id:
                raise ValidationError(f"Slug '{explicit}' is already used in this subcategory")
            return explicit

        base_slug = slugify(title)
        if not base_slug:
            raise ValidationError("Cannot derive a slug from the title, please provide one")
        candidate = base_slug
        counter = 1
        while True:
            existing = await self._get_slug_owner(subcategory_id, candidate)
            if existing is None or existing.id == document_id:
                return candidate
            candidate = f"{base_slug}-{counter}"
            counter += 1

    async def _require_subcategory(self, subcategory_id: int) -> Subcategory:
        result = await self._execute(select(Subcategory).where(Subcategory.id == subcategory_id))
        subcategory = result.scalar_one_or_none()
        if subcategory is None:
            raise NotFoundError(f"Subcategory {subcategory_id} not found")
        return subcategory

    async def create(
        self,
        subcategory_id: int,
        title: str,
        content: str = "",
        slug: Optional[str] = None,
        description: Optional[str] = None,
        order_index: int = 0,
        is_published: bool = True,
    ) -> Document:
        """Create a new document."""
        if not title or not title.strip():
            raise ValidationError("Title is required")
        title = title.strip()

        await self._require_subcategory(subcategory_id)
        slug = await self._resolve_slug(subcategory_id, slug, title)

        document = Document(
            subcategory_id=subcategory_id,
            title=title,
            slug=slug,
            description=description,
            content=content or "",
            order_index=order_index or 0,
            is_published=is_published,
        )

        self.db.add(document)
        await self._flush("create document")
        logger.info(f"Created document '{slug}' ({document.id}) in subcategory {subcategory_id}")
        document_id = document.id
        self.db.expire(document)

        return await self.get_by_id(document_id)

    async def update(
        self,
        document_id: int,
        title: Optional[str] = None,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        content: Optional[str] = None,
        order_index: Optional[int] = None,
        is_published: Optional[bool] = None,
        subcategory_id: Optional[int] = None,
    ) -> Optional[Document]:
        """Update an existing document, optionally moving it to another subcategory."""
        document = await self.get_by_id(document_id)
        if document is None:
            return None

        if title is not None:
            if not title.strip():
                raise ValidationError("Title is required")
            document.title = title.strip()

        target_subcategory = document.subcategory_id
        if subcategory_id is not None and subcategory_id != document.subcategory_id:
            await self._require_subcategory(subcategory_id)
            target_subcategory = subcategory_id

        if slug is not None or target_subcategory != document.subcategory_id:
            document.slug = await self._resolve_slug(
                target_subcategory,
                slug if slug is not None else document.slug,
                document.title,
                document_id=document.id,
            )
        document.subcategory_id = target_subcategory

        if description is not None:
            document.description = description
        if content is not None:
            document.content = content
        if order_index is not None:
            document.order_index = order_index
        if is_published is not None:
            document.is_published = is_published

        await self._flush("update document")
        # Reload so the subcategory relationship follows a move
        self.db.expire(document)
        return await self.get_by_id(document_id)

    async def update_content(self, document_id: int, content: str) -> Optional[Document]:
        """Replace only the Markdown content (inline editing from the reader view)."""
        return await self.update(document_id, content=content)

    async def delete(self, document_id: int) -> bool:
        """Delete a document."""
        document = await self.get_by_id(document_id)
        if document is None:
            return False

        await self.db.delete(document)
        await self._flush("delete document")
        logger.info(f"Deleted document {document_id}")
        return True
