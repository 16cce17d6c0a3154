"""
Operator events accepted by the scoring engine, and the signals it emits back.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from crease.engine.scorecard import DismissalType, ExtraType


class RetirementType(enum.Enum):
    RETIRED_HURT = "retired_hurt"
    RETIRED_OUT = "retired_out"


class Signal(enum.Enum):
    OVER_COMPLETE = "over_complete"  # pick the next bowler
    BATSMAN_REQUIRED = "batsman_required"  # a crease slot was left empty
    INNINGS_COMPLETE = "innings_complete"  # second innings awaits its openers
    MATCH_COMPLETE = "match_complete"  # result available


@dataclass(frozen=True)
class ExtraEvent:
    kind: ExtraType
    extra_runs: int = 0  # only meaningful on a wide


@dataclass(frozen=True)
class Dismissal:
    kind: DismissalType
    player_out_id: str
    fielder_id: Optional[str] = None


@dataclass(frozen=True)
class DeliveryEvent:
    runs_off_bat: int = 0
    extra: Optional[ExtraEvent] = None
    wicket: Optional[Dismissal] = None
    new_batsman_id: Optional[str] = None


@dataclass(frozen=True)
class WicketConfirmation:
    kind: DismissalType
    player_out_id: str
    fielder_id: Optional[str] = None
    runs_on_ball: int = 0
    next_batsman_id: Optional[str] = None
    extra_kind: Optional[ExtraType] = None

    def to_delivery(self) -> DeliveryEvent:
        """Fold into a delivery. Runs on a wide are run as extras, not off the bat"""
        if self.extra_kind == ExtraType.WIDE:
            runs_off_bat = 0
            extra = ExtraEvent(kind=ExtraType.WIDE, extra_runs=self.runs_on_ball)
        else:
            runs_off_bat = self.runs_on_ball
            extra = ExtraEvent(kind=self.extra_kind) if self.extra_kind else None
        return DeliveryEvent(
            runs_off_bat=runs_off_bat,
            extra=extra,
            wicket=Dismissal(kind=self.kind, player_out_id=self.player_out_id, fielder_id=self.fielder_id),
            new_batsman_id=self.next_batsman_id,
        )


@dataclass(frozen=True)
class RetirementRequest:
    player_out_id: str
    kind: RetirementType = RetirementType.RETIRED_HURT
    next_batsman_id: Optional[str] = None


@dataclass(frozen=True)
class PenaltyRequest:
    runs: int = 5


@dataclass(frozen=True)
class LineupSelection:
    """Fills crease and bowler slots. Omitted fields keep their current value"""
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
