"""
API module.
"""

from .routes import fixtures_router, simulations_router, standings_router
from .dependencies import build_config, build_rng, domain_errors

__all__ = [
    "fixtures_router",
    "simulations_router",
    "standings_router",
    "build_config",
    "build_rng",
    "domain_errors",
]
