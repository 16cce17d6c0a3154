import logging
from dataclasses import replace

from crease.engine.scorecard import Match, MatchStatus

logger = logging.getLogger(__name__)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


class ResultDeterminer:
    """
    Decides the outcome of a finished (or abandoned) match.

    Pure and idempotent: a match that is already completed comes back as is.
    """

    def determine(self, match: Match) -> Match:
        if match.is_completed:
            return match

        innings1 = match.innings1
        innings2 = match.innings2
        winner_id = None

        if innings2 is None:
            result = "Match abandoned."
        elif innings2.score > innings1.score:
            winner_id = innings2.batting_team_id
            wickets_left = innings2.squad_size - 1 - innings2.wickets
            result = f"{match.team(winner_id).name} won by {_plural(wickets_left, 'wicket')}."
        elif innings2.score < innings1.score:
            winner_id = innings1.batting_team_id
            margin = innings1.score - innings2.score
            result = f"{match.team(winner_id).name} won by {_plural(margin, 'run')}."
        else:
            result = "Match tied."

        logger.info("Match %s completed: %s", match.id, result)
        return replace(
            match,
            status=MatchStatus.COMPLETED,
            result=result,
            winner_id=winner_id,
        )
