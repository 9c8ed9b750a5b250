"""Accent-insensitive keyword search over published documents."""

import logging
import unicodedata
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import select

from ..config import get_config
from ..models.category import Category
from ..models.document import Document
from ..models.subcategory import Subcategory
from .base import StoreService

logger = logging.getLogger(__name__)


@dataclass
class SearchCandidate:
    """A published document joined with its category and subcategory names."""
    title: str
    slug: str
    description: Optional[str]
    category_name: str
    category_slug: str
    subcategory_name: str
    subcategory_slug: str


@dataclass
class SearchResult:
    title: str
    category: str
    subcategory: str
    url: str


def normalize_text(text: Optional[str]) -> str:
    """Lowercase and strip diacritics (NFD, combining marks removed)."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


def document_url(category_slug: str, subcategory_slug: str, doc_slug: str) -> str:
    return f"/docs/{category_slug}/{subcategory_slug}/{doc_slug}"


def rank_documents(
    query: Optional[str],
    candidates: Sequence[SearchCandidate],
    limit: int = 20,
) -> list[SearchResult]:
    """
    Filter and order candidates for the type-ahead search box.

    A candidate matches when the normalized query occurs in its title,
    description, category name or subcategory name. Titles starting with the
    query come first; the rest of the order is by normalized title.
    """
    normalized_query = normalize_text(query)
    if not normalized_query:
        return []

    matches = []
    for candidate in candidates:
        title = normalize_text(candidate.title)
        if (
            normalized_query in title
            or normalized_query in normalize_text(candidate.description)
            or normalized_query in normalize_text(candidate.category_name)
            or normalized_query in normalize_text(candidate.subcategory_name)
        ):
            matches.append((not title.startswith(normalized_query), title, candidate))

    matches.sort(key=lambda item: (item[0], item[1]))

    return [
        SearchResult(
            title=candidate.title,
            category=candidate.category_name,
            subcategory=candidate.subcategory_name,
            url=document_url(candidate.category_slug, candidate.subcategory_slug, candidate.slug),
        )
        for _, _, candidate in matches[:limit]
    ]


class SearchService(StoreService):
    """Runs searches against the published documents in the database."""

    async def get_candidates(self) -> list[SearchCandidate]:
        """Fetch every published document with its category/subcategory names."""
        query = (
            select(
                Document.title,
                Document.slug,
                Document.description,
                Category.display_name,
                Category.slug,
                Subcategory.display_name,
                Subcategory.slug,
            )
            .join(Subcategory, Document.subcategory_id == Subcategory.id)
            .join(Category, Subcategory.category_id == Category.id)
            .where(Document.is_published == True)  # noqa: E712
            .order_by(Document.title)
        )
        candidate_limit = get_config().search.candidate_limit
        if candidate_limit:
            query = query.limit(candidate_limit)

        result = await self._execute(query)
        return [
            SearchCandidate(
                title=row[0],
                slug=row[1],
                description=row[2],
                category_name=row[3],
                category_slug=row[4],
                subcategory_name=row[5],
                subcategory_slug=row[6],
            )
            for row in result.all()
        ]

    async def search(self, query: Optional[str]) -> list[SearchResult]:
        """Search published documents; an empty query never touches the database."""
        if not query or not query.strip():
            return []

        candidates = await self.get_candidates()
        # Surrounding spaces are part of the query, as typed
        results = rank_documents(query, candidates, limit=get_config().search.result_limit)
        logger.debug(f"Search '{query}' matched {len(results)} of {len(candidates)} documents")
        return results
