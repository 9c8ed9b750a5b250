"""Admin API routes for categories, subcategories and the full structure."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.database import get_db
from ..services.auth import Session
from ..services.category import CategoryService, SubcategoryService
from ..services.structure import StructureService
from .auth import get_current_session
from .structure import CategoryNodeSchema, category_to_schema


router = APIRouter(prefix="/api/admin", tags=["admin"])


class CategorySchema(BaseModel):
    id: int
    name: str
    display_name: str
    slug: str
    icon: str
    icon_type: str
    order_index: int
    is_hidden: bool
    created_at: str


class CreateCategoryRequest(BaseModel):
    name: str
    display_name: Optional[str] = None
    slug: Optional[str] = None
    icon: Optional[str] = None
    icon_type: Optional[str] = None
    order_index: int = 0
    is_hidden: bool = False


class UpdateCategoryRequest(BaseModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    slug: Optional[str] = None
    icon: Optional[str] = None
    icon_type: Optional[str] = None
    order_index: Optional[int] = None
    is_hidden: Optional[bool] = None


class SubcategorySchema(BaseModel):
    id: int
    category_id: int
    parent_subcategory_id: Optional[int] = None
    name: str
    display_name: str
    slug: str
    icon: str
    icon_type: str
    order_index: int
    is_hidden: bool
    created_at: str


class FlatSubcategorySchema(SubcategorySchema):
    level: int
    indented_name: str


class CreateSubcategoryRequest(BaseModel):
    category_id: int
    parent_subcategory_id: Optional[int] = None
    name: str
    display_name: Optional[str] = None
    slug: Optional[str] = None
    icon: Optional[str] = None
    icon_type: Optional[str] = None
    order_index: int = 0
    is_hidden: bool = False


class UpdateSubcategoryRequest(BaseModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    slug: Optional[str] = None
    icon: Optional[str] = None
    icon_type: Optional[str] = None
    order_index: Optional[int] = None
    is_hidden: Optional[bool] = None
    # 0 moves the subcategory to the root level
    parent_subcategory_id: Optional[int] = None


def category_to_row_schema(category) -> CategorySchema:
    return CategorySchema(
        id=category.id,
        name=category.name,
        display_name=category.display_name,
        slug=category.slug,
        icon=category.icon,
        icon_type=category.icon_type,
        order_index=category.order_index,
        is_hidden=category.is_hidden,
        created_at=category.created_at.isoformat(),
    )


def subcategory_to_row_schema(sub) -> SubcategorySchema:
    return SubcategorySchema(
        id=sub.id,
        category_id=sub.category_id,
        parent_subcategory_id=sub.parent_subcategory_id,
        name=sub.name,
        display_name=sub.display_name,
        slug=sub.slug,
        icon=sub.icon,
        icon_type=sub.icon_type,
        order_index=sub.order_index,
        is_hidden=sub.is_hidden,
        created_at=sub.created_at.isoformat(),
    )


@router.get("/structure", response_model=list[CategoryNodeSchema])
async def get_admin_structure(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Full structure including hidden nodes and unpublished guides."""
    structure = await StructureService(db).load_structure(include_hidden=True, published_only=False)
    return [category_to_schema(c) for c in structure]


# Categories


@router.get("/categories", response_model=list[CategorySchema])
async def get_categories(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get all categories."""
    categories = await CategoryService(db).get_all()
    return [category_to_row_schema(c) for c in categories]


@router.post("/categories", response_model=CategorySchema)
async def create_category(
    request: CreateCategoryRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Create a category."""
    category = await CategoryService(db).create(**request.model_dump())
    return category_to_row_schema(category)


@router.put("/categories/{category_id}", response_model=CategorySchema)
async def update_category(
    category_id: int,
    request: UpdateCategoryRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Update a category."""
    category = await CategoryService(db).update(category_id, **request.model_dump())

    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")

    return category_to_row_schema(category)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Delete a category with everything below it."""
    success = await CategoryService(db).delete(category_id)

    if not success:
        raise HTTPException(status_code=404, detail="Category not found")

    return {"message": "Category deleted"}


# Subcategories


@router.get("/subcategories/all", response_model=list[SubcategorySchema])
async def get_all_subcategories(
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get every subcategory of every category."""
    subcategories = await SubcategoryService(db).get_all()
    return [subcategory_to_row_schema(s) for s in subcategories]


@router.get("/subcategories/{category_id}", response_model=list[SubcategorySchema])
async def get_root_subcategories(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Get the root-level subcategories of a category."""
    subcategories = await SubcategoryService(db).get_root_by_category(category_id)
    return [subcategory_to_row_schema(s) for s in subcategories]


@router.get("/subcategories/{category_id}/flat", response_model=list[FlatSubcategorySchema])
async def get_flat_subcategories(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """All subcategories of a category, pre-ordered and indented for dropdowns."""
    flat = await SubcategoryService(db).get_all_by_category_flat(category_id)
    return [
        FlatSubcategorySchema(
            **subcategory_to_row_schema(entry.row).model_dump(),
            level=entry.level,
            indented_name=entry.indented_name,
        )
        for entry in flat
    ]


@router.post("/subcategories", response_model=SubcategorySchema)
async def create_subcategory(
    request: CreateSubcategoryRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Create a subcategory."""
    subcategory = await SubcategoryService(db).create(**request.model_dump())
    return subcategory_to_row_schema(subcategory)


@router.put("/subcategories/{subcategory_id}", response_model=SubcategorySchema)
async def update_subcategory(
    subcategory_id: int,
    request: UpdateSubcategoryRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Update a subcategory."""
    subcategory = await SubcategoryService(db).update(subcategory_id, **request.model_dump())

    if subcategory is None:
        raise HTTPException(status_code=404, detail="Subcategory not found")

    return subcategory_to_row_schema(subcategory)


@router.delete("/subcategories/{subcategory_id}")
async def delete_subcategory(
    subcategory_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
):
    """Delete a subcategory, its nested subcategories and their guides."""
    success = await SubcategoryService(db).delete(subcategory_id)

    if not success:
        raise HTTPException(status_code=404, detail="Subcategory not found")

    return {"message": "Subcategory deleted"}
