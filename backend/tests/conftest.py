# tests/conftest.py
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from docportal import config as config_module
from docportal.config import AdminConfig, Config, DatabaseConfig, SecurityConfig
from docportal.main import app
from docportal.models import Base, Category, Document, Subcategory
from docportal.models.database import _enable_foreign_keys
from docportal.services.auth import get_auth_service

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def test_config(tmp_path):
    """Point the app at a throwaway SQLite file with cheap bcrypt rounds"""
    config = Config(
        database=DatabaseConfig(path=str(tmp_path / "docportal-test.db")),
        security=SecurityConfig(bcrypt_rounds=4),
        admin=AdminConfig(username=ADMIN_USERNAME, password=ADMIN_PASSWORD, email="admin@example.com"),
    )
    config_module.set_config(config)
    yield config
    config_module.set_config(None)


@pytest_asyncio.fixture
async def db_session(test_config):
    """Async session on a fresh database with foreign keys enforced"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{test_config.database.path}")
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def sample_tree(db_session):
    """
    Category "games" with:
      minecraft            (visible)
        plugins            (visible)
          hidden-tools     (hidden)
            secret-guide   (published)
      archive              (hidden)
        old-notes          (visible, child of a hidden parent)
    """
    games = Category(name="games", display_name="Games", slug="games", order_index=0)
    db_session.add(games)
    await db_session.flush()

    minecraft = Subcategory(category_id=games.id, name="minecraft", display_name="Minecraft",
                            slug="minecraft", order_index=0)
    archive = Subcategory(category_id=games.id, name="archive", display_name="Archive",
                          slug="archive", order_index=1, is_hidden=True)
    db_session.add_all([minecraft, archive])
    await db_session.flush()

    plugins = Subcategory(category_id=games.id, parent_subcategory_id=minecraft.id, name="plugins",
                          display_name="Plugins", slug="plugins")
    old_notes = Subcategory(category_id=games.id, parent_subcategory_id=archive.id, name="old-notes",
                            display_name="Old Notes", slug="old-notes")
    db_session.add_all([plugins, old_notes])
    await db_session.flush()

    hidden_tools = Subcategory(category_id=games.id, parent_subcategory_id=plugins.id, name="hidden-tools",
                               display_name="Hidden Tools", slug="hidden-tools", is_hidden=True)
    db_session.add(hidden_tools)
    await db_session.flush()

    docs = [
        Document(subcategory_id=minecraft.id, title="Minecraft Server Setup", slug="server-setup",
                 description="Install and start a server", content="# Setup", order_index=0),
        Document(subcategory_id=minecraft.id, title="Draft", slug="draft", content="wip",
                 order_index=1, is_published=False),
        Document(subcategory_id=plugins.id, title="Installing Plugins", slug="installing",
                 content="Drop jars into plugins/"),
        Document(subcategory_id=hidden_tools.id, title="Secret Guide", slug="secret-guide",
                 content="hidden"),
        Document(subcategory_id=old_notes.id, title="Old Notes", slug="notes", content="old"),
    ]
    db_session.add_all(docs)
    await db_session.commit()

    return {
        "category": games,
        "minecraft": minecraft,
        "archive": archive,
        "plugins": plugins,
        "old_notes": old_notes,
        "hidden_tools": hidden_tools,
        "docs": docs,
    }


@pytest.fixture
def client(test_config):
    """Test client running the full app lifespan against the test database"""
    get_auth_service()._sessions.clear()
    with TestClient(app) as test_client:
        yield test_client
    get_auth_service()._sessions.clear()


@pytest.fixture
def admin_client(client):
    """Test client logged in as the default admin"""
    response = client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def api_tree(admin_client):
    """Seed a small structure through the admin API"""
    category = admin_client.post(
        "/api/admin/categories",
        json={"name": "servers", "display_name": "Servers", "slug": "servers", "icon": "fa-server"},
    ).json()
    setup = admin_client.post(
        "/api/admin/subcategories",
        json={"category_id": category["id"], "name": "setup", "display_name": "Setup", "slug": "setup"},
    ).json()
    advanced = admin_client.post(
        "/api/admin/subcategories",
        json={
            "category_id": category["id"],
            "parent_subcategory_id": setup["id"],
            "name": "advanced",
            "display_name": "Advanced",
            "slug": "advanced",
            "is_hidden": True,
        },
    ).json()
    guide = admin_client.post(
        "/api/admin/docs",
        json={
            "subcategory_id": setup["id"],
            "title": "Médoc Quickstart",
            "slug": "quickstart",
            "description": "First steps",
            "content": "# Quickstart\n\nRun `start.sh`.",
        },
    ).json()
    hidden_guide = admin_client.post(
        "/api/admin/docs",
        json={
            "subcategory_id": advanced["id"],
            "title": "Tuning",
            "slug": "tuning",
            "content": "Tune it",
        },
    ).json()
    return {
        "category": category,
        "setup": setup,
        "advanced": advanced,
        "guide": guide,
        "hidden_guide": hidden_guide,
    }
