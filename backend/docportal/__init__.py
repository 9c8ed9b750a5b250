"""Docportal: a small self-hosted documentation portal."""

__version__ = "1.0.0"
