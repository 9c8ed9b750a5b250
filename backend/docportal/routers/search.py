"""Search API route."""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.database import get_db
from ..services.search import SearchService


router = APIRouter(prefix="/api/search", tags=["search"])


class SearchResultSchema(BaseModel):
    title: str
    category: str
    subcategory: str
    url: str
    path: str


@router.get("", response_model=list[SearchResultSchema])
async def search(q: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """Type-ahead search over published guides."""
    results = await SearchService(db).search(q)
    return [
        SearchResultSchema(
            title=r.title,
            category=r.category,
            subcategory=r.subcategory,
            url=r.url,
            path=r.url,
        )
        for r in results
    ]
