"""
Wicket Recorder - dismissals during play and retirements between deliveries
"""
import logging
from dataclasses import replace
from typing import Optional

from crease.engine.errors import (
    IncompleteLineupError,
    IneligibleBatsmanError,
    MissingFielderError,
    ReplacementRequiredError,
    UnknownBatsmanError,
    ValidationError,
)
from crease.engine.events import Dismissal, RetirementRequest, RetirementType
from crease.engine.scorecard import (
    BALLS_PER_OVER,
    BatsmanScore,
    BatsmanStatus,
    BowlerScore,
    Crease,
    DismissalType,
    Innings,
    Match,
    Wicket,
)

logger = logging.getLogger(__name__)


class WicketRecorder:
    """
    Applies dismissals and retirements to an innings.

    In-play dismissals arrive through the DeliveryProcessor and happen on a
    delivery. Retirements are recorded on their own and never consume a ball.
    """

    def validate_dismissal(self, innings: Innings, crease: Crease, dismissal: Dismissal,
                           new_batsman_id: Optional[str] = None):
        if dismissal.kind == DismissalType.RETIRED_OUT:
            raise ValidationError("Retirements are recorded separately from deliveries")
        if dismissal.kind.requires_fielder and not dismissal.fielder_id:
            raise MissingFielderError(dismissal.kind)
        if not crease.holds(dismissal.player_out_id):
            raise UnknownBatsmanError(dismissal.player_out_id)
        if new_batsman_id:
            self.check_replacement(innings, crease, new_batsman_id)

    def check_replacement(self, innings: Innings, crease: Crease, player_id: str):
        if crease.holds(player_id):
            raise IneligibleBatsmanError(player_id, "already at the crease")
        entry = innings.batsman(player_id)
        if entry is None:
            raise IneligibleBatsmanError(player_id, "not on the batting side's team sheet")
        if not entry.can_come_in:
            raise IneligibleBatsmanError(player_id, entry.status.value)

    def record_dismissal(
        self,
        innings: Innings,
        crease: Crease,
        dismissal: Dismissal,
        bowler_id: str,
        over: int,
        ball: int,
        new_batsman_id: Optional[str] = None,
    ) -> tuple[Innings, Crease]:
        """Mark the batsman out and fill (or empty) the crease slot they leave"""
        wicket = Wicket(
            kind=dismissal.kind,
            player_out_id=dismissal.player_out_id,
            bowler_id=bowler_id,
            fielder_id=dismissal.fielder_id,
            over=over,
            ball=ball,
            total_score=innings.score,
        )
        innings = self._mark_out(innings, wicket)

        if dismissal.kind.credits_bowler:
            spell = innings.bowler(bowler_id) or BowlerScore(player_id=bowler_id)
            innings = innings.with_bowler(replace(spell, wickets=spell.wickets + 1))

        return self._send_in(innings, crease, dismissal.player_out_id, new_batsman_id)

    def retire(self, match: Match, request: RetirementRequest) -> Match:
        """
        Retire a batsman at the crease.

        Retired hurt may come back later. Retired out counts as a wicket with
        no bowler credited. A replacement must be named whenever wickets
        remain and someone is left to come in.
        """
        crease = match.crease
        missing = [name for name, slot in (("striker", crease.striker_id),
                                           ("non-striker", crease.non_striker_id)) if slot is None]
        if missing:
            raise IncompleteLineupError(missing)
        if not crease.holds(request.player_out_id):
            raise UnknownBatsmanError(request.player_out_id)

        innings = match.innings
        if request.next_batsman_id:
            self.check_replacement(innings, crease, request.next_batsman_id)
        elif self.replacement_required(innings, crease, request.player_out_id):
            raise ReplacementRequiredError()

        if request.kind == RetirementType.RETIRED_HURT:
            entry = innings.batsman(request.player_out_id) or BatsmanScore(player_id=request.player_out_id)
            innings = innings.with_batsman(replace(entry, status=BatsmanStatus.RETIRED_HURT))
        else:
            legal_balls = innings.legal_balls
            wicket = Wicket(
                kind=DismissalType.RETIRED_OUT,
                player_out_id=request.player_out_id,
                bowler_id=None,
                over=legal_balls // BALLS_PER_OVER,
                ball=legal_balls % BALLS_PER_OVER,
                total_score=innings.score,
            )
            innings = self._mark_out(innings, wicket)

        innings, crease = self._send_in(innings, crease, request.player_out_id, request.next_batsman_id)
        logger.debug("%s %s", request.player_out_id, request.kind.value)
        return match.with_innings(innings).with_crease(crease)

    def replacement_required(self, innings: Innings, crease: Crease, leaving_id: str) -> bool:
        if innings.wickets >= innings.max_wickets - 1:
            return False
        return any(
            b.can_come_in and b.player_id != leaving_id and not crease.holds(b.player_id)
            for b in innings.batsmen
        )

    def _mark_out(self, innings: Innings, wicket: Wicket) -> Innings:
        entry = innings.batsman(wicket.player_out_id) or BatsmanScore(player_id=wicket.player_out_id)
        innings = innings.with_batsman(
            replace(entry, is_out=True, status=BatsmanStatus.OUT, wicket=wicket)
        )
        return replace(
            innings,
            wickets=innings.wickets + 1,
            fall_of_wickets=innings.fall_of_wickets + (wicket,),
        )

    def _send_in(self, innings: Innings, crease: Crease, leaving_id: str,
                 new_batsman_id: Optional[str]) -> tuple[Innings, Crease]:
        if new_batsman_id:
            entry = innings.batsman(new_batsman_id) or BatsmanScore(player_id=new_batsman_id)
            innings = innings.with_batsman(replace(entry, status=BatsmanStatus.NOT_OUT))
        return innings, crease.vacate(leaving_id, new_batsman_id)
