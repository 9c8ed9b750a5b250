"""Configuration loader for Docportal."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False


class DatabaseConfig(BaseModel):
    path: str = "/app/data/docportal.db"


class SessionConfig(BaseModel):
    # Seven days of inactivity
    timeout_minutes: int = 7 * 24 * 60
    secret_key: str = "change-me-in-production"
    cookie_name: str = "session_id"
    secure_cookie: bool = False


class SecurityConfig(BaseModel):
    bcrypt_rounds: int = 10


class AdminConfig(BaseModel):
    """Default admin account created on first start."""
    username: str = "admin"
    password: str = "admin123"
    email: str = "admin@example.com"


class LoggingConfig(BaseModel):
    level: str = "info"


class SiteConfig(BaseModel):
    """Portal metadata used by the frontend for SEO and social tags."""
    name: str = "Docportal"
    title: str = "Documentation"
    description: str = "Guides and documentation."
    url: str = "http://localhost:3000"
    logo: str = "/images/logo.png"
    favicon: str = "/images/favicon.ico"
    locale: str = "en_US"
    author: str = ""
    keywords: list[str] = []


class SearchConfig(BaseModel):
    result_limit: int = 20
    # Maximum number of published documents fetched as candidates (None = all)
    candidate_limit: Optional[int] = None


class HiddenPolicy(str, Enum):
    """What happens to the visible descendants of a hidden subcategory."""
    PRUNE = "prune"
    PROMOTE = "promote"


class StructureConfig(BaseModel):
    hidden_policy: HiddenPolicy = HiddenPolicy.PRUNE


class UploadsConfig(BaseModel):
    max_file_size: int = 5 * 1024 * 1024
    allowed_extensions: list[str] = [".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico"]


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    session: SessionConfig = SessionConfig()
    security: SecurityConfig = SecurityConfig()
    admin: AdminConfig = AdminConfig()
    logging: LoggingConfig = LoggingConfig()
    site: SiteConfig = SiteConfig()
    search: SearchConfig = SearchConfig()
    structure: StructureConfig = StructureConfig()
    uploads: UploadsConfig = UploadsConfig()


_config: Optional[Config] = None


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file and environment variables."""
    global _config

    if _config is not None:
        return _config

    # Determine config path
    if config_path is None:
        config_path = os.environ.get("DOCPORTAL_CONFIG", "/app/config.yml")

    config_data = {}

    # Load from file if exists
    if Path(config_path).exists():
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

    config = Config(**config_data)

    # Override with environment variables
    if os.environ.get("DOCPORTAL_SESSION_SECRET"):
        config.session.secret_key = os.environ["DOCPORTAL_SESSION_SECRET"]

    if os.environ.get("DOCPORTAL_DB_PATH"):
        config.database.path = os.environ["DOCPORTAL_DB_PATH"]

    if os.environ.get("DOCPORTAL_LOG_LEVEL"):
        config.logging.level = os.environ["DOCPORTAL_LOG_LEVEL"]

    if os.environ.get("DOCPORTAL_ADMIN_PASSWORD"):
        config.admin.password = os.environ["DOCPORTAL_ADMIN_PASSWORD"]

    if os.environ.get("DOCPORTAL_PORT"):
        config.server.port = int(os.environ["DOCPORTAL_PORT"])

    if os.environ.get("DOCPORTAL_SECURE_COOKIE"):
        config.session.secure_cookie = os.environ["DOCPORTAL_SECURE_COOKIE"].lower() == "true"

    if os.environ.get("DOCPORTAL_HIDDEN_POLICY"):
        config.structure.hidden_policy = HiddenPolicy(os.environ["DOCPORTAL_HIDDEN_POLICY"].lower())

    _config = config
    return config


def get_config() -> Config:
    """Get the loaded configuration."""
    global _config
    if _config is None:
        return load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the loaded configuration (None forces a reload on next access)."""
    global _config
    _config = config
