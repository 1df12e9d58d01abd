"""
Knockout bracket graph.

The bracket is a directed acyclic graph keyed by match id: every knockout
match except the final and the third-place match points at the match its
winner advances to, and at the slot (home or away) the winner takes there.
"""

from typing import Dict, Iterable, List, Optional

from ..core.football import PHASE_ORDER, BracketPath, Phase
from .exceptions import MissingReferenceError
from .models import BracketLink, Match


class BracketGraph:
    """Adjacency map of winner advancement links."""

    def __init__(
        self,
        links: Optional[Dict[str, BracketLink]] = None,
        third_place_match_id: Optional[str] = None,
        semifinal_ids: Optional[List[str]] = None
    ):
        self.links: Dict[str, BracketLink] = dict(links or {})
        self.third_place_match_id = third_place_match_id
        self.semifinal_ids: List[str] = list(semifinal_ids or [])

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> 'BracketGraph':
        """
        Rebuild the graph from the ``next_match_id``/``path`` fields of a match list.

        Raises:
            MissingReferenceError: If a link points at a match that does not exist
                or does not move forward through the phases
        """
        by_id = {m.id: m for m in matches}
        links = {}
        third_place_id = None
        semifinal_ids = []

        for match in by_id.values():
            if match.phase == Phase.THIRD:
                third_place_id = match.id
            elif match.phase == Phase.SEMIS:
                semifinal_ids.append(match.id)

            if match.next_match_id is None:
                continue

            target = by_id.get(match.next_match_id)
            if target is None:
                raise MissingReferenceError(
                    f"Match {match.id} advances into unknown match {match.next_match_id}"
                )
            if PHASE_ORDER.index(target.phase) <= PHASE_ORDER.index(match.phase):
                raise MissingReferenceError(
                    f"Match {match.id} ({match.phase.value}) cannot advance into "
                    f"{target.id} ({target.phase.value})"
                )

            links[match.id] = BracketLink(
                match_id=match.id,
                next_match_id=match.next_match_id,
                path=BracketPath(match.path) if match.path else BracketPath.HOME
            )

        return cls(links, third_place_id, semifinal_ids)

    def link(self, match_id: str) -> Optional[BracketLink]:
        return self.links.get(match_id)

    def feeders(self, match_id: str) -> List[BracketLink]:
        """Links into ``match_id``, home feeder first."""
        incoming = [link for link in self.links.values() if link.next_match_id == match_id]
        return sorted(incoming, key=lambda link: link.path != BracketPath.HOME)

    def __len__(self) -> int:
        return len(self.links)

    def to_dict(self) -> dict:
        return {
            "links": {
                match_id: {"next_match_id": link.next_match_id, "path": link.path.value}
                for match_id, link in self.links.items()
            },
            "third_place_match_id": self.third_place_match_id,
            "semifinal_ids": list(self.semifinal_ids)
        }
