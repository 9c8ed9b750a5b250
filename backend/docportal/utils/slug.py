"""Slug helpers."""

import re
import unicodedata

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Convert text to URL-friendly slug."""
    # Drop accents so "Guía" becomes "guia"
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s_]+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    """Lowercase ASCII letters and digits separated by single hyphens."""
    return bool(slug) and SLUG_PATTERN.match(slug) is not None
