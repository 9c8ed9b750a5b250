"""Public navigation and document routes."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_config
from ..models.database import get_db
from ..services.document import DocumentService
from ..services.rendering import render_markdown
from ..services.setting import SettingService, LANDING_PAGE, LOGO_TYPE, LOGO_URL, SITE_TITLE
from ..services.structure import CategoryNode, StructureService, first_guide_path
from ..services.tree import Icon, SubcategoryNode


router = APIRouter(prefix="/api", tags=["docs"])

WELCOME_HTML = "<h1>Welcome to the documentation</h1><p>No guides are available yet.</p>"


class IconSchema(BaseModel):
    type: str
    value: str


class GuideSchema(BaseModel):
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    path: str


class SubcategoryNodeSchema(BaseModel):
    id: int
    name: str
    display_name: str
    slug: str
    icon: IconSchema
    order_index: int
    is_hidden: bool
    parent_subcategory_id: Optional[int] = None
    subcategories: list["SubcategoryNodeSchema"] = []
    guides: list[GuideSchema] = []


SubcategoryNodeSchema.model_rebuild()


class CategoryNodeSchema(BaseModel):
    id: int
    name: str
    display_name: str
    slug: str
    icon: IconSchema
    order_index: int
    is_hidden: bool
    subcategories: list[SubcategoryNodeSchema] = []


class DocumentPageSchema(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    html: str
    path: str
    updated_at: str


class HomeSchema(BaseModel):
    redirect: Optional[str] = None
    html: Optional[str] = None


class SiteSchema(BaseModel):
    name: str
    title: str
    description: str
    url: str
    logo: str
    logo_type: str
    favicon: str
    locale: str
    author: str
    keywords: list[str]


def icon_to_schema(icon: Icon) -> IconSchema:
    return IconSchema(type=icon.type, value=icon.value)


def _node_to_schema(node: SubcategoryNode) -> SubcategoryNodeSchema:
    return SubcategoryNodeSchema(
        id=node.id,
        name=node.name,
        display_name=node.display_name,
        slug=node.slug,
        icon=icon_to_schema(node.icon),
        order_index=node.order_index,
        is_hidden=node.is_hidden,
        parent_subcategory_id=node.parent_subcategory_id,
        subcategories=[],
        guides=[
            GuideSchema(
                id=g.id,
                title=g.title,
                slug=g.slug,
                description=g.description,
                path=g.path,
            )
            for g in node.guides
        ],
    )


def subcategory_to_schema(node: SubcategoryNode) -> SubcategoryNodeSchema:
    """Convert a tree node and its descendants to the API schema."""
    root = _node_to_schema(node)
    stack = [(node, root)]
    while stack:
        current, schema = stack.pop()
        for child in current.children:
            child_schema = _node_to_schema(child)
            schema.subcategories.append(child_schema)
            stack.append((child, child_schema))
    return root


def category_to_schema(node: CategoryNode) -> CategoryNodeSchema:
    return CategoryNodeSchema(
        id=node.id,
        name=node.name,
        display_name=node.display_name,
        slug=node.slug,
        icon=icon_to_schema(node.icon),
        order_index=node.order_index,
        is_hidden=node.is_hidden,
        subcategories=[subcategory_to_schema(s) for s in node.subcategories],
    )


@router.get("/site", response_model=SiteSchema)
async def get_site(db: AsyncSession = Depends(get_db)):
    """Site metadata, with the logo and title overridable from settings."""
    site = get_config().site
    settings = await SettingService(db).get_all()
    return SiteSchema(
        name=site.name,
        title=settings.get(SITE_TITLE) or site.title,
        description=site.description,
        url=site.url,
        logo=settings.get(LOGO_URL) or site.logo,
        logo_type=settings.get(LOGO_TYPE) or "image",
        favicon=site.favicon,
        locale=site.locale,
        author=site.author,
        keywords=site.keywords,
    )


@router.get("/structure", response_model=list[CategoryNodeSchema])
async def get_structure(db: AsyncSession = Depends(get_db)):
    """Public navigation: visible categories, subcategories and published guides."""
    structure = await StructureService(db).load_structure()
    return [category_to_schema(c) for c in structure]


@router.get("/home", response_model=HomeSchema)
async def get_home(db: AsyncSession = Depends(get_db)):
    """Where readers land: the first guide, or the landing page content."""
    structure = await StructureService(db).load_structure()
    path = first_guide_path(structure)
    if path:
        return HomeSchema(redirect=f"/docs/{path}")

    landing = await SettingService(db).get(LANDING_PAGE)
    if landing:
        return HomeSchema(html=render_markdown(landing))
    return HomeSchema(html=WELCOME_HTML)


@router.get("/docs/{category}/{subcategory}/{guide}", response_model=DocumentPageSchema)
async def get_document_page(
    category: str,
    subcategory: str,
    guide: str,
    db: AsyncSession = Depends(get_db),
):
    """Render a published guide."""
    document = await DocumentService(db).get_by_path(category, subcategory, guide)

    if document is None:
        raise HTTPException(status_code=404, detail="Guide not found")

    return DocumentPageSchema(
        id=document.id,
        title=document.title,
        description=document.description,
        html=render_markdown(document.content),
        path=f"{category}/{subcategory}/{guide}",
        updated_at=document.updated_at.isoformat(),
    )
