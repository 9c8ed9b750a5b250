# tests/services/test_category.py
import pytest

from docportal.errors import NotFoundError, ValidationError
from docportal.services.category import CategoryService, SubcategoryService
from docportal.services.document import DocumentService


@pytest.mark.asyncio
async def test_create_category_derives_slug(db_session):
    category = await CategoryService(db_session).create(name="guides", display_name="Guías Rápidas")
    assert category.id is not None
    assert category.slug == "guias-rapidas"
    assert category.icon == "fa-folder"
    assert category.icon_type == "fontawesome"


@pytest.mark.asyncio
async def test_create_category_validation(db_session):
    service = CategoryService(db_session)
    with pytest.raises(ValidationError):
        await service.create(name="   ")
    with pytest.raises(ValidationError):
        await service.create(name="bad", slug="Not A Slug")
    with pytest.raises(ValidationError):
        await service.create(name="icons", icon_type="svg")


@pytest.mark.asyncio
async def test_duplicate_category_rejected(db_session):
    service = CategoryService(db_session)
    await service.create(name="servers", slug="servers")
    with pytest.raises(ValidationError):
        await service.create(name="servers", slug="other")
    with pytest.raises(ValidationError):
        await service.create(name="other", slug="servers")


@pytest.mark.asyncio
async def test_update_category_keeps_unset_fields(db_session):
    service = CategoryService(db_session)
    category = await service.create(name="servers", icon="fa-server", order_index=3)

    updated = await service.update(category.id, display_name="Game Servers", is_hidden=True)
    assert updated.display_name == "Game Servers"
    assert updated.is_hidden is True
    assert updated.icon == "fa-server"
    assert updated.order_index == 3
    assert updated.slug == "servers"

    assert await service.update(9999, name="missing") is None


@pytest.mark.asyncio
async def test_categories_ordered(db_session):
    service = CategoryService(db_session)
    await service.create(name="zeta", order_index=0)
    await service.create(name="beta", order_index=1)
    await service.create(name="alpha", order_index=1)
    assert [c.name for c in await service.get_all()] == ["zeta", "alpha", "beta"]


@pytest.mark.asyncio
async def test_delete_category_cascades(sample_tree, db_session):
    """Deleting a category removes its subcategories and documents"""
    deleted = await CategoryService(db_session).delete(sample_tree["category"].id)
    await db_session.commit()

    assert deleted is True
    assert await SubcategoryService(db_session).get_all() == []
    assert await DocumentService(db_session).get_all_with_names() == []
    assert await CategoryService(db_session).delete(sample_tree["category"].id) is False


@pytest.mark.asyncio
async def test_delete_subcategory_cascades_to_descendants(sample_tree, db_session):
    await SubcategoryService(db_session).delete(sample_tree["minecraft"].id)
    await db_session.commit()

    remaining = {s.slug for s in await SubcategoryService(db_session).get_all()}
    assert remaining == {"archive", "old-notes"}

    titles = {d.title for d in await DocumentService(db_session).get_all_with_names()}
    assert titles == {"Old Notes"}


@pytest.mark.asyncio
async def test_subcategory_slug_unique_per_category(db_session):
    """The same slug may exist in two categories but not twice in one"""
    categories = CategoryService(db_session)
    subcategories = SubcategoryService(db_session)
    first = await categories.create(name="first")
    second = await categories.create(name="second")

    await subcategories.create(category_id=first.id, name="setup")
    other = await subcategories.create(category_id=second.id, name="setup")
    assert other.slug == "setup"

    with pytest.raises(ValidationError):
        await subcategories.create(category_id=first.id, name="Setup again", slug="setup")


@pytest.mark.asyncio
async def test_subcategory_requires_existing_category(db_session):
    with pytest.raises(NotFoundError):
        await SubcategoryService(db_session).create(category_id=404, name="orphan")


@pytest.mark.asyncio
async def test_parent_must_share_category(db_session):
    categories = CategoryService(db_session)
    subcategories = SubcategoryService(db_session)
    first = await categories.create(name="first")
    second = await categories.create(name="second")
    parent = await subcategories.create(category_id=first.id, name="parent")

    with pytest.raises(ValidationError):
        await subcategories.create(category_id=second.id, name="child", parent_subcategory_id=parent.id)
    with pytest.raises(NotFoundError):
        await subcategories.create(category_id=first.id, name="child", parent_subcategory_id=999)


@pytest.mark.asyncio
async def test_reparenting_into_descendant_rejected(sample_tree, db_session):
    """Moving a subcategory below itself or a descendant would create a cycle"""
    service = SubcategoryService(db_session)
    minecraft = sample_tree["minecraft"]

    with pytest.raises(ValidationError):
        await service.update(minecraft.id, parent_subcategory_id=minecraft.id)
    with pytest.raises(ValidationError):
        await service.update(minecraft.id, parent_subcategory_id=sample_tree["hidden_tools"].id)


@pytest.mark.asyncio
async def test_move_subcategory(sample_tree, db_session):
    service = SubcategoryService(db_session)
    plugins = sample_tree["plugins"]

    moved = await service.update(plugins.id, parent_subcategory_id=sample_tree["archive"].id)
    assert moved.parent_subcategory_id == sample_tree["archive"].id

    to_root = await service.update(plugins.id, parent_subcategory_id=0)
    assert to_root.parent_subcategory_id is None


@pytest.mark.asyncio
async def test_flat_listing(sample_tree, db_session):
    flat = await SubcategoryService(db_session).get_all_by_category_flat(sample_tree["category"].id)
    assert [(f.row.slug, f.level) for f in flat] == [
        ("minecraft", 0),
        ("plugins", 1),
        ("hidden-tools", 2),
        ("archive", 0),
        ("old-notes", 1),
    ]
    assert flat[2].indented_name == "    Hidden Tools"


@pytest.mark.asyncio
async def test_root_and_children_queries(sample_tree, db_session):
    service = SubcategoryService(db_session)
    roots = await service.get_root_by_category(sample_tree["category"].id)
    assert [s.slug for s in roots] == ["minecraft", "archive"]

    children = await service.get_by_parent(sample_tree["minecraft"].id)
    assert [s.slug for s in children] == ["plugins"]
