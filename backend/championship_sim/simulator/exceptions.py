"""
Errors raised by the championship engine.
"""


class ChampionshipError(Exception):
    """Base class for engine errors."""
    pass


class InvalidInputError(ChampionshipError, ValueError):
    """Raised when the caller supplies data the engine cannot work with."""
    pass


class OddTeamCountError(InvalidInputError):
    """Raised when a league fixture is requested for an odd number of teams."""

    def __init__(self, team_count: int):
        super().__init__(f"League fixtures need an even number of teams, got {team_count}")
        self.team_count = team_count


class BelowMinimumTeamsError(InvalidInputError):
    """Raised when a cup has fewer teams than the smallest allowed group."""

    def __init__(self, team_count: int, minimum: int):
        super().__init__(f"A cup needs at least {minimum} teams, got {team_count}")
        self.team_count = team_count
        self.minimum = minimum


class MissingReferenceError(ChampionshipError, LookupError):
    """Raised when a match or group points at a team, group or match that does not exist."""
    pass
