"""
Match snapshot types.

Every type here is frozen. A transition builds new values with
dataclasses.replace and leaves untouched sub-structures (tuples of balls,
overs, batsmen) shared with the previous snapshot.
"""
import enum
from dataclasses import dataclass, field, replace
from typing import Optional

BALLS_PER_OVER = 6


class MatchStatus(enum.Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class BatsmanStatus(enum.Enum):
    DID_NOT_BAT = "did not bat"
    NOT_OUT = "not out"
    OUT = "out"
    RETIRED_HURT = "retired hurt"


class ExtraType(enum.Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


class DismissalType(enum.Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"
    RETIRED_OUT = "retired_out"

    @property
    def credits_bowler(self) -> bool:
        return self in BOWLER_CREDITED

    @property
    def requires_fielder(self) -> bool:
        return self in FIELDER_REQUIRED


BOWLER_CREDITED = frozenset({
    DismissalType.BOWLED,
    DismissalType.CAUGHT,
    DismissalType.LBW,
    DismissalType.STUMPED,
    DismissalType.HIT_WICKET,
})

FIELDER_REQUIRED = frozenset({
    DismissalType.CAUGHT,
    DismissalType.STUMPED,
    DismissalType.RUN_OUT,
})


def overs_from_balls(legal_balls: int) -> float:
    """Encode a legal ball count as overs: 22 balls -> 3.4"""
    return round(legal_balls // BALLS_PER_OVER + (legal_balls % BALLS_PER_OVER) / 10, 1)


def balls_from_overs(overs: float) -> int:
    """Decode the overs notation back to legal balls: 3.4 -> 22"""
    tenths = round(overs * 10)
    return (tenths // 10) * BALLS_PER_OVER + tenths % 10


@dataclass(frozen=True)
class TeamSheet:
    """A team as the scorer sees it: identity plus the players who may take part"""
    team_id: str
    name: str
    short_name: str = ""
    player_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Extras:
    total: int = 0
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalties: int = 0


@dataclass(frozen=True)
class Wicket:
    kind: DismissalType
    player_out_id: str
    bowler_id: Optional[str]
    over: int
    ball: int
    total_score: int
    fielder_id: Optional[str] = None


@dataclass(frozen=True)
class BallExtra:
    kind: ExtraType
    runs: int  # everything credited to extras on this delivery


@dataclass(frozen=True)
class Ball:
    ball_number: int
    bowler_id: str
    batsman_id: str
    runs: int = 0  # credited to the batsman
    wicket: Optional[Wicket] = None
    extra: Optional[BallExtra] = None
    timestamp: float = 0.0

    @property
    def is_legal(self) -> bool:
        return self.extra is None or self.extra.kind not in (ExtraType.WIDE, ExtraType.NO_BALL)

    @property
    def total_runs(self) -> int:
        return self.runs + (self.extra.runs if self.extra else 0)

    @property
    def display(self) -> str:
        if self.wicket:
            return "W"
        if self.extra is None:
            return str(self.runs)
        if self.extra.kind == ExtraType.WIDE:
            extra_runs = self.extra.runs - 1
            return f"{extra_runs}Wd" if extra_runs else "Wd"
        if self.extra.kind == ExtraType.NO_BALL:
            return f"{self.runs}Nb" if self.runs else "Nb"
        suffix = "B" if self.extra.kind == ExtraType.BYE else "Lb"
        return f"{self.extra.runs}{suffix}"


@dataclass(frozen=True)
class Over:
    over_number: int
    bowler_id: str
    balls: tuple[Ball, ...] = ()
    runs_scored: int = 0

    @property
    def legal_balls(self) -> int:
        return sum(1 for b in self.balls if b.is_legal)


@dataclass(frozen=True)
class BatsmanScore:
    player_id: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    status: BatsmanStatus = BatsmanStatus.DID_NOT_BAT
    wicket: Optional[Wicket] = None

    @property
    def strike_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * 100

    @property
    def can_come_in(self) -> bool:
        return self.status in (BatsmanStatus.DID_NOT_BAT, BatsmanStatus.RETIRED_HURT)


@dataclass(frozen=True)
class BowlerScore:
    player_id: str
    overs: float = 0.0
    maidens: int = 0
    runs: int = 0
    wickets: int = 0

    @property
    def economy(self) -> float:
        balls = balls_from_overs(self.overs)
        if balls == 0:
            return 0.0
        return (self.runs / balls) * BALLS_PER_OVER


@dataclass(frozen=True)
class Innings:
    batting_team_id: str
    bowling_team_id: str
    score: int = 0
    wickets: int = 0
    overs: float = 0.0
    batsmen: tuple[BatsmanScore, ...] = ()
    bowlers: tuple[BowlerScore, ...] = ()
    fall_of_wickets: tuple[Wicket, ...] = ()
    overs_history: tuple[Over, ...] = ()
    extras: Extras = field(default_factory=Extras)
    squad_size: int = 0  # fixed from the team sheet when the innings opens

    @classmethod
    def open(cls, batting: TeamSheet, bowling: TeamSheet) -> "Innings":
        return cls(
            batting_team_id=batting.team_id,
            bowling_team_id=bowling.team_id,
            squad_size=len(batting.player_ids),
            batsmen=tuple(BatsmanScore(player_id=p) for p in batting.player_ids),
        )

    @property
    def legal_balls(self) -> int:
        return balls_from_overs(self.overs)

    @property
    def max_wickets(self) -> int:
        return self.squad_size - 1

    @property
    def run_rate(self) -> float:
        if self.legal_balls == 0:
            return 0.0
        return (self.score / self.legal_balls) * BALLS_PER_OVER

    @property
    def current_over(self) -> Optional[Over]:
        number = self.legal_balls // BALLS_PER_OVER
        if self.overs_history and self.overs_history[-1].over_number == number:
            return self.overs_history[-1]
        return None

    @property
    def last_completed_over(self) -> Optional[Over]:
        for over in reversed(self.overs_history):
            if over.legal_balls >= BALLS_PER_OVER:
                return over
        return None

    def batsman(self, player_id: str) -> Optional[BatsmanScore]:
        return next((b for b in self.batsmen if b.player_id == player_id), None)

    def bowler(self, player_id: str) -> Optional[BowlerScore]:
        return next((b for b in self.bowlers if b.player_id == player_id), None)

    def with_batsman(self, entry: BatsmanScore) -> "Innings":
        """Replace the entry for entry.player_id, appending it if new"""
        batsmen = list(self.batsmen)
        for i, existing in enumerate(batsmen):
            if existing.player_id == entry.player_id:
                batsmen[i] = entry
                break
        else:
            batsmen.append(entry)
        return replace(self, batsmen=tuple(batsmen))

    def with_bowler(self, entry: BowlerScore) -> "Innings":
        bowlers = list(self.bowlers)
        for i, existing in enumerate(bowlers):
            if existing.player_id == entry.player_id:
                bowlers[i] = entry
                break
        else:
            bowlers.append(entry)
        return replace(self, bowlers=tuple(bowlers))


@dataclass(frozen=True)
class Crease:
    """The two crease slots. Either may be None while a batsman is awaited"""
    striker_id: Optional[str]
    non_striker_id: Optional[str]

    def swap(self) -> "Crease":
        return Crease(self.non_striker_id, self.striker_id)

    def holds(self, player_id: str) -> bool:
        return player_id is not None and player_id in (self.striker_id, self.non_striker_id)

    def vacate(self, player_id: str, replacement_id: Optional[str] = None) -> "Crease":
        if player_id == self.striker_id:
            return Crease(replacement_id, self.non_striker_id)
        return Crease(self.striker_id, replacement_id)


@dataclass(frozen=True)
class Match:
    id: str
    team_a: TeamSheet
    team_b: TeamSheet
    overs: int
    toss_winner_id: str
    toss_decision: TossDecision
    innings1: Innings
    status: MatchStatus = MatchStatus.UPCOMING
    innings2: Optional[Innings] = None
    current_innings: int = 1
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    current_bowler_id: Optional[str] = None
    target: Optional[int] = None
    result: Optional[str] = None
    winner_id: Optional[str] = None

    @property
    def innings(self) -> Innings:
        """The innings currently in progress"""
        if self.current_innings == 2 and self.innings2 is not None:
            return self.innings2
        return self.innings1

    @property
    def crease(self) -> Crease:
        return Crease(self.striker_id, self.non_striker_id)

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def balls_remaining(self) -> int:
        return max(self.overs * BALLS_PER_OVER - self.innings.legal_balls, 0)

    @property
    def required_rate(self) -> Optional[float]:
        if self.target is None or self.current_innings != 2:
            return None
        needed = self.target - self.innings.score
        if needed <= 0:
            return 0.0
        if self.balls_remaining == 0:
            return None
        return (needed / self.balls_remaining) * BALLS_PER_OVER

    def team(self, team_id: str) -> TeamSheet:
        if team_id == self.team_a.team_id:
            return self.team_a
        if team_id == self.team_b.team_id:
            return self.team_b
        raise KeyError(team_id)

    def with_innings(self, innings: Innings) -> "Match":
        """Replace whichever innings is in progress"""
        if self.current_innings == 2:
            return replace(self, innings2=innings)
        return replace(self, innings1=innings)

    def with_crease(self, crease: Crease) -> "Match":
        return replace(self, striker_id=crease.striker_id, non_striker_id=crease.non_striker_id)
