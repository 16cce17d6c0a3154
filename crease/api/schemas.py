"""
Pydantic schemas for API request/response models.

The snapshot schemas mirror the engine's scorecard types field for field and
are also the stored form of a match, so a snapshot must survive
MatchSchema.from_snapshot(m).to_snapshot() unchanged.
"""
from pydantic import BaseModel, Field
from typing import Optional

from crease.config import settings
from crease.engine.events import (
    DeliveryEvent,
    Dismissal,
    ExtraEvent,
    LineupSelection,
    PenaltyRequest,
    RetirementRequest,
    RetirementType,
    WicketConfirmation,
)
from crease.engine.scorecard import (
    Ball,
    BallExtra,
    BatsmanScore,
    BatsmanStatus,
    BowlerScore,
    DismissalType,
    Extras,
    ExtraType,
    Innings,
    Match,
    MatchStatus,
    Over,
    TeamSheet,
    TossDecision,
    Wicket,
)


# Snapshot Schemas
class TeamSheetSchema(BaseModel):
    team_id: str
    name: str
    short_name: str = ""
    player_ids: list[str] = Field(default_factory=list)

    class Config:
        from_attributes = True

    def to_snapshot(self) -> TeamSheet:
        return TeamSheet(
            team_id=self.team_id,
            name=self.name,
            short_name=self.short_name,
            player_ids=tuple(self.player_ids),
        )


class ExtrasSchema(BaseModel):
    total: int = 0
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalties: int = 0

    class Config:
        from_attributes = True

    def to_snapshot(self) -> Extras:
        return Extras(**self.model_dump())


class WicketSchema(BaseModel):
    kind: DismissalType
    player_out_id: str
    bowler_id: Optional[str] = None
    fielder_id: Optional[str] = None
    over: int
    ball: int
    total_score: int

    class Config:
        from_attributes = True

    def to_snapshot(self) -> Wicket:
        return Wicket(
            kind=self.kind,
            player_out_id=self.player_out_id,
            bowler_id=self.bowler_id,
            fielder_id=self.fielder_id,
            over=self.over,
            ball=self.ball,
            total_score=self.total_score,
        )


class BallExtraSchema(BaseModel):
    kind: ExtraType
    runs: int

    class Config:
        from_attributes = True


class BallSchema(BaseModel):
    ball_number: int
    bowler_id: str
    batsman_id: str
    runs: int = 0
    wicket: Optional[WicketSchema] = None
    extra: Optional[BallExtraSchema] = None
    timestamp: float = 0.0

    class Config:
        from_attributes = True

    def to_snapshot(self) -> Ball:
        return Ball(
            ball_number=self.ball_number,
            bowler_id=self.bowler_id,
            batsman_id=self.batsman_id,
            runs=self.runs,
            wicket=self.wicket.to_snapshot() if self.wicket else None,
            extra=BallExtra(kind=self.extra.kind, runs=self.extra.runs) if self.extra else None,
            timestamp=self.timestamp,
        )


class OverSchema(BaseModel):
    over_number: int
    bowler_id: str
    balls: list[BallSchema] = Field(default_factory=list)
    runs_scored: int = 0

    class Config:
        from_attributes = True

    def to_snapshot(self) -> Over:
        return Over(
            over_number=self.over_number,
            bowler_id=self.bowler_id,
            balls=tuple(b.to_snapshot() for b in self.balls),
            runs_scored=self.runs_scored,
        )


class BatsmanScoreSchema(BaseModel):
    player_id: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    status: BatsmanStatus = BatsmanStatus.DID_NOT_BAT
    wicket: Optional[WicketSchema] = None

    class Config:
        from_attributes = True

    def to_snapshot(self) -> BatsmanScore:
        return BatsmanScore(
            player_id=self.player_id,
            runs=self.runs,
            balls=self.balls,
            fours=self.fours,
            sixes=self.sixes,
            is_out=self.is_out,
            status=self.status,
            wicket=self.wicket.to_snapshot() if self.wicket else None,
        )


class BowlerScoreSchema(BaseModel):
    player_id: str
    overs: float = 0.0
    maidens: int = 0
    runs: int = 0
    wickets: int = 0

    class Config:
        from_attributes = True

    def to_snapshot(self) -> BowlerScore:
        return BowlerScore(**self.model_dump())


class InningsSchema(BaseModel):
    batting_team_id: str
    bowling_team_id: str
    score: int = 0
    wickets: int = 0
    overs: float = 0.0
    batsmen: list[BatsmanScoreSchema] = Field(default_factory=list)
    bowlers: list[BowlerScoreSchema] = Field(default_factory=list)
    fall_of_wickets: list[WicketSchema] = Field(default_factory=list)
    overs_history: list[OverSchema] = Field(default_factory=list)
    extras: ExtrasSchema = Field(default_factory=ExtrasSchema)
    squad_size: int = 0

    class Config:
        from_attributes = True

    def to_snapshot(self) -> Innings:
        return Innings(
            batting_team_id=self.batting_team_id,
            bowling_team_id=self.bowling_team_id,
            score=self.score,
            wickets=self.wickets,
            overs=self.overs,
            batsmen=tuple(b.to_snapshot() for b in self.batsmen),
            bowlers=tuple(b.to_snapshot() for b in self.bowlers),
            fall_of_wickets=tuple(w.to_snapshot() for w in self.fall_of_wickets),
            overs_history=tuple(o.to_snapshot() for o in self.overs_history),
            extras=self.extras.to_snapshot(),
            squad_size=self.squad_size,
        )


class MatchSchema(BaseModel):
    id: str
    team_a: TeamSheetSchema
    team_b: TeamSheetSchema
    overs: int
    toss_winner_id: str
    toss_decision: TossDecision
    status: MatchStatus
    innings1: InningsSchema
    innings2: Optional[InningsSchema] = None
    current_innings: int = 1
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    current_bowler_id: Optional[str] = None
    target: Optional[int] = None
    result: Optional[str] = None
    winner_id: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_snapshot(cls, match: Match) -> "MatchSchema":
        return cls.model_validate(match, from_attributes=True)

    def to_snapshot(self) -> Match:
        return Match(
            id=self.id,
            team_a=self.team_a.to_snapshot(),
            team_b=self.team_b.to_snapshot(),
            overs=self.overs,
            toss_winner_id=self.toss_winner_id,
            toss_decision=self.toss_decision,
            status=self.status,
            innings1=self.innings1.to_snapshot(),
            innings2=self.innings2.to_snapshot() if self.innings2 else None,
            current_innings=self.current_innings,
            striker_id=self.striker_id,
            non_striker_id=self.non_striker_id,
            current_bowler_id=self.current_bowler_id,
            target=self.target,
            result=self.result,
            winner_id=self.winner_id,
        )


# Request Schemas
class CreateMatchRequest(BaseModel):
    team_a: TeamSheetSchema
    team_b: TeamSheetSchema
    overs: int = settings.DEFAULT_OVERS
    toss_winner_id: str
    toss_decision: TossDecision  # "bat" or "bowl"
    match_id: Optional[str] = None


class LineupRequest(BaseModel):
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None

    def to_event(self) -> LineupSelection:
        return LineupSelection(
            striker_id=self.striker_id,
            non_striker_id=self.non_striker_id,
            bowler_id=self.bowler_id,
        )


class BowlerRequest(BaseModel):
    bowler_id: str


class DismissalRequest(BaseModel):
    kind: DismissalType
    player_out_id: str
    fielder_id: Optional[str] = None


class DeliveryRequest(BaseModel):
    runs_off_bat: int = 0
    extra_kind: Optional[ExtraType] = None
    extra_runs: int = 0
    wicket: Optional[DismissalRequest] = None
    new_batsman_id: Optional[str] = None

    def to_event(self) -> DeliveryEvent:
        return DeliveryEvent(
            runs_off_bat=self.runs_off_bat,
            extra=ExtraEvent(kind=self.extra_kind, extra_runs=self.extra_runs) if self.extra_kind else None,
            wicket=Dismissal(
                kind=self.wicket.kind,
                player_out_id=self.wicket.player_out_id,
                fielder_id=self.wicket.fielder_id,
            ) if self.wicket else None,
            new_batsman_id=self.new_batsman_id,
        )


class WicketRequest(BaseModel):
    kind: DismissalType
    player_out_id: str
    fielder_id: Optional[str] = None
    runs_on_ball: int = 0
    next_batsman_id: Optional[str] = None
    extra_kind: Optional[ExtraType] = None  # wicket off a wide or no-ball

    def to_event(self) -> WicketConfirmation:
        return WicketConfirmation(
            kind=self.kind,
            player_out_id=self.player_out_id,
            fielder_id=self.fielder_id,
            runs_on_ball=self.runs_on_ball,
            next_batsman_id=self.next_batsman_id,
            extra_kind=self.extra_kind,
        )


class RetireRequest(BaseModel):
    player_out_id: str
    kind: RetirementType = RetirementType.RETIRED_HURT
    next_batsman_id: Optional[str] = None

    def to_event(self) -> RetirementRequest:
        return RetirementRequest(
            player_out_id=self.player_out_id,
            kind=self.kind,
            next_batsman_id=self.next_batsman_id,
        )


class PenaltyRunsRequest(BaseModel):
    runs: int = 5

    def to_event(self) -> PenaltyRequest:
        return PenaltyRequest(runs=self.runs)


# Response Schemas
class MatchStateResponse(BaseModel):
    match: MatchSchema
    innings: int
    score: str  # "151/4"
    overs: float
    run_rate: float
    required_rate: Optional[float] = None
    target: Optional[int] = None
    balls_remaining: int
    this_over: list[str]
    status: str
    result: Optional[str] = None
    signals: list[str] = Field(default_factory=list)
    can_undo: bool = False


class MatchSummaryResponse(BaseModel):
    id: str
    team_a_name: str
    team_b_name: str
    status: MatchStatus
    result_summary: Optional[str] = None

    class Config:
        from_attributes = True
