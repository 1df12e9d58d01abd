"""
API route modules.
"""

from .fixtures_routes import router as fixtures_router
from .simulations_routes import router as simulations_router
from .standings_routes import router as standings_router

__all__ = ["fixtures_router", "simulations_router", "standings_router"]
