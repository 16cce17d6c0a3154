import logging
from dataclasses import replace

from crease.engine.errors import InningsTransitionError
from crease.engine.scorecard import Innings, Match

logger = logging.getLogger(__name__)


class InningsTransitionManager:
    """Builds the second innings once the first is over"""

    def begin_second_innings(self, match: Match) -> Match:
        if match.innings2 is not None or match.current_innings != 1:
            raise InningsTransitionError(f"Match {match.id} already has a second innings")

        first = match.innings1
        innings2 = Innings.open(
            batting=match.team(first.bowling_team_id),
            bowling=match.team(first.batting_team_id),
        )
        target = first.score + 1
        logger.info(
            "Match %s: first innings closed at %d/%d (%.1f), target %d",
            match.id, first.score, first.wickets, first.overs, target,
        )
        return replace(
            match,
            innings2=innings2,
            current_innings=2,
            target=target,
            striker_id=None,
            non_striker_id=None,
            current_bowler_id=None,
        )
