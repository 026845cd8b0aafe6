"""
Routes package for the Today I Learned board.
"""

from til.routes.facts import router as facts_router
from til.routes.facts import categories_router
from til.routes.pages import router as pages_router

__all__ = ["facts_router", "categories_router", "pages_router"]
