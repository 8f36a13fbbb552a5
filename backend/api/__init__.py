"""API route handlers."""
from . import preferences

__all__ = ["preferences"]
