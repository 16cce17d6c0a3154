import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional, Dict

from crease.database import get_db
from crease.engine import MatchScorer, new_match
from crease.engine.errors import ConsistencyError, ScoringError, ValidationError
from crease.engine.scorecard import Match
from crease.sync import DatabaseSync, list_matches, load_match
from crease.api.schemas import (
    BowlerRequest,
    CreateMatchRequest,
    DeliveryRequest,
    LineupRequest,
    MatchSchema,
    MatchStateResponse,
    MatchSummaryResponse,
    PenaltyRunsRequest,
    RetireRequest,
    WicketRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["Live Scoring"])

# In-memory store for matches being scored, one writer each
active_matches: Dict[str, MatchScorer] = {}

match_sync = DatabaseSync()


def _get_scorer(match_id: str) -> MatchScorer:
    scorer = active_matches.get(match_id)
    if scorer is None:
        raise HTTPException(status_code=404, detail="Active match session not found")
    return scorer


def _get_match_state_response(match: Match, signals=(), can_undo: bool = False) -> MatchStateResponse:
    innings = match.innings
    current_over = innings.current_over
    return MatchStateResponse(
        match=MatchSchema.from_snapshot(match),
        innings=match.current_innings,
        score=f"{innings.score}/{innings.wickets}",
        overs=innings.overs,
        run_rate=round(innings.run_rate, 2),
        required_rate=round(match.required_rate, 2) if match.required_rate is not None else None,
        target=match.target,
        balls_remaining=match.balls_remaining,
        this_over=[b.display for b in current_over.balls] if current_over else [],
        status=match.status.value,
        result=match.result,
        signals=sorted(s.value for s in signals),
        can_undo=can_undo,
    )


def _score(scorer: MatchScorer, action, *args) -> MatchStateResponse:
    """Run one scorer action, translating engine errors to HTTP errors"""
    try:
        transition = action(*args)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConsistencyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _get_match_state_response(transition.match, transition.signals, len(scorer.history) > 0)


@router.post("")
def create_match(request: CreateMatchRequest):
    """Set up a match after the toss. Scoring starts once the openers are chosen"""
    try:
        match = new_match(
            team_a=request.team_a.to_snapshot(),
            team_b=request.team_b.to_snapshot(),
            overs=request.overs,
            toss_winner_id=request.toss_winner_id,
            toss_decision=request.toss_decision,
            match_id=request.match_id,
        )
    except ScoringError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if match.id in active_matches:
        raise HTTPException(status_code=409, detail="Match already exists")

    scorer = MatchScorer(match, sync=match_sync)
    active_matches[match.id] = scorer
    scorer.publish()
    logger.info("Match %s created: %s vs %s, %d overs", match.id, match.team_a.name, match.team_b.name, match.overs)
    return _get_match_state_response(match)


@router.get("", response_model=list[MatchSummaryResponse])
def get_matches(db: Session = Depends(get_db)):
    """Stored matches, most recently updated first"""
    return list_matches(db)


@router.get("/{match_id}")
def get_match_state(match_id: str, db: Session = Depends(get_db)):
    scorer = active_matches.get(match_id)
    if scorer is not None:
        return _get_match_state_response(scorer.match, can_undo=len(scorer.history) > 0)

    # Not being scored here: serve the stored copy read-only
    match = load_match(db, match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return _get_match_state_response(match)


@router.post("/{match_id}/lineup")
def select_lineup(match_id: str, request: LineupRequest):
    """Choose openers and bowler, or fill a crease slot left empty by a wicket"""
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.select_lineup, request.to_event())


@router.post("/{match_id}/bowler")
def select_bowler(match_id: str, request: BowlerRequest):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.select_bowler, request.bowler_id)


@router.post("/{match_id}/ball")
def record_ball(match_id: str, request: DeliveryRequest):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.deliver, request.to_event())


@router.post("/{match_id}/wicket")
def record_wicket(match_id: str, request: WicketRequest):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.confirm_wicket, request.to_event())


@router.post("/{match_id}/retire")
def retire_batsman(match_id: str, request: RetireRequest):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.retire, request.to_event())


@router.post("/{match_id}/penalty")
def award_penalty(match_id: str, request: Optional[PenaltyRunsRequest] = None):
    scorer = _get_scorer(match_id)
    request = request or PenaltyRunsRequest()
    return _score(scorer, scorer.award_penalty, request.to_event())


@router.post("/{match_id}/swap")
def swap_batsmen(match_id: str):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.swap_batsmen)


@router.post("/{match_id}/abandon")
def abandon_match(match_id: str):
    scorer = _get_scorer(match_id)
    return _score(scorer, scorer.abandon)


@router.post("/{match_id}/undo")
def undo_last_action(match_id: str):
    scorer = _get_scorer(match_id)
    if scorer.undo() is None:
        raise HTTPException(status_code=400, detail="No actions to undo")
    return _get_match_state_response(scorer.match, can_undo=len(scorer.history) > 0)
