"""
API package.

Routers mounted under the versioned base path.
"""

from .anicrush import router as anicrush_router
from .hianime import router as hianime_router

__all__ = ["anicrush_router", "hianime_router"]
