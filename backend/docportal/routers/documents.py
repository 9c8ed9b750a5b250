"""Admin API routes for documents."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.database import get_db
from ..services.auth import Session
from ..services.document import DocumentService
from .auth import get_current_session


router = APIRouter(prefix="/api/admin/docs", tags=["admin"])


class DocumentSummary(BaseModel):
    id: int
    subcategory_id: int
    title: str
    slug: str
    description: Optional[str] = None
    order_index: int
    is_published: bool
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    path: Optional[str] = None
    updated_at: str


class DocumentSchema(DocumentSummary):
    content: str
    created_at: str


class CreateDocumentRequest(BaseModel):
    subcategory_id: int
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    content: str = ""
    order_index: int = 0
    is_published: bool = True


class UpdateDocumentRequest(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    order_index: Optional[int] = None
    is_published: Optional[bool] = None
    subcategory_id: Optional[int] = None


class QuickEditRequest(BaseModel):
    content: str


def _summary_fields(doc) -> dict:
    subcategory = doc.subcategory
    category = subcategory.category if subcategory is not None else None
    return dict(
        id=doc.id,
        subcategory_id=doc.subcategory_id,
        title=doc.title,
        slug=doc.slug,
        description=doc.description,
        order_index=doc.order_index,
        is_published=doc.is_published,
        category_id=category.id if category else None,
        category_name=category.display_name if category else None,
        subcategory_name=subcategory.display_name if subcategory else None,
        path=f"{category.slug}/{subcategory.slug}/{doc.slug}" if category else None,
        updated_at=doc.updated_at.isoformat(),
    )


def document_to_summary(doc) -> DocumentSummary:
    """Convert a Document model (with subcategory loaded) to DocumentSummary."""
    return DocumentSummary(**_summary_fields(doc))


def document_to_schema(doc) -> DocumentSchema:
    """Convert a Document model (with subcategory loaded) to DocumentSchema."""
    return DocumentSchema(
        **_summary_fields(doc),
        content=doc.content,
        created_at=doc.created_at.isoformat(),
    )


@router.get("", response_model=list[DocumentSummary])
async def get_documents(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get all documents, published or not."""
    documents = await DocumentService(db).get_all_with_names()
    return [document_to_summary(d) for d in documents]


@router.get("/content/{document_id}")
async def get_document_content(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Raw Markdown of a document, for inline editing."""
    document = await DocumentService(db).get_by_id(document_id)

    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")

    return {"content": document.content}


@router.post("/quick-edit/{document_id}")
async def quick_edit_document(
    document_id: int,
    request: QuickEditRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Replace only the content of a document."""
    document = await DocumentService(db).update_content(document_id, request.content)

    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")

    return {"success": True}


@router.get("/{document_id}", response_model=DocumentSchema)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get a document by ID."""
    document = await DocumentService(db).get_by_id(document_id)

    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")

    return document_to_schema(document)


@router.post("", response_model=DocumentSchema)
async def create_document(
    request: CreateDocumentRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Create a new document."""
    document = await DocumentService(db).create(**request.model_dump())
    return document_to_schema(document)


@router.put("/{document_id}", response_model=DocumentSchema)
async def update_document(
    document_id: int,
    request: UpdateDocumentRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Update a document."""
    document = await DocumentService(db).update(document_id, **request.model_dump())

    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")

    return document_to_schema(document)


@router.delete("/{document_id}")
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Delete a document."""
    success = await DocumentService(db).delete(document_id)

    if not success:
        raise HTTPException(status_code=404, detail="Document not found")

    return {"message": "Document deleted"}
