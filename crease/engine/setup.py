"""
Match setup - teams, overs and toss, before the opening lineup is chosen
"""
import uuid
from typing import Optional

from crease.engine.errors import ValidationError
from crease.engine.scorecard import Innings, Match, TeamSheet, TossDecision


def batting_first(team_a: TeamSheet, team_b: TeamSheet, toss_winner_id: str,
                  toss_decision: TossDecision) -> tuple[TeamSheet, TeamSheet]:
    """(batting side, bowling side) for the first innings"""
    winner, loser = (team_a, team_b) if toss_winner_id == team_a.team_id else (team_b, team_a)
    if toss_decision == TossDecision.BAT:
        return winner, loser
    return loser, winner


def new_match(
    team_a: TeamSheet,
    team_b: TeamSheet,
    overs: int,
    toss_winner_id: str,
    toss_decision: TossDecision,
    match_id: Optional[str] = None,
) -> Match:
    """Create an upcoming match with the first innings ready for its openers"""
    errors = []
    if team_a.team_id == team_b.team_id:
        errors.append("Please select two different teams")
    if toss_winner_id not in (team_a.team_id, team_b.team_id):
        errors.append("Toss winner must be one of the playing teams")
    if overs <= 0:
        errors.append(f"Overs must be positive, got {overs}")
    for team in (team_a, team_b):
        if len(set(team.player_ids)) < 2:
            errors.append(f"{team.name} needs at least 2 players")
    if errors:
        raise ValidationError("; ".join(errors))

    batting, bowling = batting_first(team_a, team_b, toss_winner_id, toss_decision)
    return Match(
        id=match_id or uuid.uuid4().hex,
        team_a=team_a,
        team_b=team_b,
        overs=overs,
        toss_winner_id=toss_winner_id,
        toss_decision=toss_decision,
        innings1=Innings.open(batting=batting, bowling=bowling),
    )
