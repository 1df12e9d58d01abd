"""
Tunable simulation options.

Every option has a default and can be overridden per call, or for the whole
process through environment variables (see ``SimulationConfig.from_env``).
"""

import os
from dataclasses import dataclass, fields, replace

from .exceptions import InvalidInputError


# Environment variable -> option name
ENV_OPTIONS = {
    "HOME_ADVANTAGE": "home_advantage",
    "RANDOMNESS": "randomness",
    "MIN_GOAL_BASE": "min_goal_base",
    "MID_GOAL_BASE": "mid_goal_base",
    "MAX_GOAL_BASE": "max_goal_base",
    "GOALS_ABOVE_MAX": "goals_above_max",
    "GOALS_ABOVE_MID": "goals_above_mid",
    "GOALS_ABOVE_MIN": "goals_above_min",
    "GOALS_OTHERWISE": "goals_otherwise",
    "FORMATION_IMPACT": "formation_impact",
    "TREND_IMPACT": "trend_impact",
    "PENALTY_HOME_SUCCESS": "penalty_home_success",
    "PENALTY_AWAY_SUCCESS": "penalty_away_success",
    "PENALTY_MAX_ROUNDS": "penalty_max_rounds",
}


@dataclass(frozen=True)
class SimulationConfig:
    """Match engine tunables."""

    home_advantage: float = 1.10
    randomness: float = 0.20

    # Strength thresholds and the highest goal count drawn above each one
    min_goal_base: float = 0.8
    mid_goal_base: float = 1.2
    max_goal_base: float = 1.5
    goals_above_max: int = 4
    goals_above_mid: int = 3
    goals_above_min: int = 2
    goals_otherwise: int = 1

    formation_impact: float = 0.10
    trend_impact: float = 0.05

    penalty_home_success: float = 0.80
    penalty_away_success: float = 0.75
    penalty_max_rounds: int = 15

    def __post_init__(self):
        if not 0 <= self.randomness <= 1:
            raise InvalidInputError(f"randomness must be within [0, 1], got {self.randomness}")
        if not self.min_goal_base <= self.mid_goal_base <= self.max_goal_base:
            raise InvalidInputError(
                "Goal thresholds must satisfy min_goal_base <= mid_goal_base <= max_goal_base"
            )
        for name in ("goals_above_max", "goals_above_mid", "goals_above_min", "goals_otherwise"):
            if getattr(self, name) < 0:
                raise InvalidInputError(f"{name} cannot be negative")
        for name in ("penalty_home_success", "penalty_away_success"):
            if not 0 <= getattr(self, name) <= 1:
                raise InvalidInputError(f"{name} must be a probability")
        if self.penalty_max_rounds < 1:
            raise InvalidInputError("penalty_max_rounds must be at least 1")

    @classmethod
    def option_names(cls) -> set:
        return {f.name for f in fields(cls)}

    @classmethod
    def cast_option(cls, name: str, value):
        """Convert a raw value (string or number) to the type of option ``name``."""
        types = {f.name: f.type for f in fields(cls)}
        if name not in types:
            raise InvalidInputError(f"Unknown simulation option: {name}")
        try:
            if types[name] in (int, "int"):
                number = float(value)
                if not number.is_integer():
                    raise ValueError(value)
                return int(number)
            return float(value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Option {name}={value!r} is not a valid number")

    @classmethod
    def from_env(cls) -> 'SimulationConfig':
        """Build a config from environment variables, falling back to defaults."""
        overrides = {}
        for env_name, option in ENV_OPTIONS.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            overrides[option] = cls.cast_option(option, raw)
        return cls(**overrides)

    def with_overrides(self, **overrides) -> 'SimulationConfig':
        """Return a copy with the given options replaced."""
        unknown = set(overrides) - self.option_names()
        if unknown:
            raise InvalidInputError(f"Unknown simulation options: {', '.join(sorted(unknown))}")
        return replace(self, **overrides)


DEFAULT_CONFIG = SimulationConfig()
