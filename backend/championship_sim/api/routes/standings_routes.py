"""
Standings API routes.
"""

from fastapi import APIRouter

from ..dependencies import domain_errors
from ..schemas import (
    GroupSchema,
    GroupStandingsResponse,
    GroupTableSchema,
    StandingEntrySchema,
    StandingsRequest,
    StandingsResponse,
)
from ...simulator import calculate_group_standings, calculate_standings


router = APIRouter(prefix="/standings", tags=["standings"])


@router.post("", response_model=StandingsResponse)
async def get_standings(request: StandingsRequest) -> StandingsResponse:
    """Overall table of every team, from the finished matches."""
    championship = request.championship.to_domain()

    with domain_errors():
        table = calculate_standings(
            championship.teams,
            [m.to_domain() for m in request.matches],
            championship.settings
        )

    return StandingsResponse(
        standings=[StandingEntrySchema.model_validate(e.to_dict()) for e in table]
    )


@router.post("/groups", response_model=GroupStandingsResponse)
async def get_group_standings(request: StandingsRequest) -> GroupStandingsResponse:
    """One table per group of a cup."""
    championship = request.championship.to_domain()

    with domain_errors():
        tables = calculate_group_standings(championship, [m.to_domain() for m in request.matches])

    return GroupStandingsResponse(groups=[
        GroupTableSchema(
            group=GroupSchema.model_validate(group.to_dict()),
            standings=[StandingEntrySchema.model_validate(e.to_dict()) for e in table]
        )
        for group, table in zip(championship.groups, tables)
    ])
