"""
Helpers shared by the API routes.
"""

import logging
import random
from contextlib import contextmanager
from typing import Dict, Optional

from fastapi import HTTPException, status

from ..simulator import SimulationConfig
from ..simulator.exceptions import ChampionshipError, InvalidInputError, MissingReferenceError


logger = logging.getLogger(__name__)

# Process-wide defaults, overridable through the environment
BASE_CONFIG = SimulationConfig.from_env()


def build_rng(seed: Optional[int]) -> random.Random:
    """Seeded generator for reproducible runs, fresh entropy otherwise."""
    return random.Random(seed)


def build_config(overrides: Dict[str, float]) -> SimulationConfig:
    """Apply per-request overrides on top of the process defaults."""
    if not overrides:
        return BASE_CONFIG
    cast = {name: SimulationConfig.cast_option(name, value) for name, value in overrides.items()}
    return BASE_CONFIG.with_overrides(**cast)


@contextmanager
def domain_errors():
    """Translate engine errors into HTTP errors."""
    try:
        yield
    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except MissingReferenceError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except ChampionshipError as e:
        logger.error(f"Unhandled championship error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
