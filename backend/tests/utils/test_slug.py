# tests/utils/test_slug.py
import pytest

from docportal.utils.slug import is_valid_slug, slugify


@pytest.mark.parametrize("text,expected", [
    ("Minecraft Server Setup", "minecraft-server-setup"),
    ("Guía rápida: ¡Empieza aquí!", "guia-rapida-empieza-aqui"),
    ("  spaces   and__underscores ", "spaces-and-underscores"),
    ("already-a-slug", "already-a-slug"),
    ("!!!", ""),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


@pytest.mark.parametrize("slug,valid", [
    ("setup", True),
    ("server-setup-2", True),
    ("Setup", False),
    ("double--hyphen", False),
    ("-leading", False),
    ("with space", False),
    ("", False),
])
def test_is_valid_slug(slug, valid):
    assert is_valid_slug(slug) is valid
