"""
Tests for dismissals, replacements and retirements.
"""
import pytest

from crease.engine.errors import (
    IncompleteLineupError,
    IneligibleBatsmanError,
    IneligibleBowlerError,
    MissingFielderError,
    ReplacementRequiredError,
    UnknownBatsmanError,
    ValidationError,
)
from crease.engine.events import (
    DeliveryEvent,
    Dismissal,
    ExtraEvent,
    LineupSelection,
    RetirementRequest,
    RetirementType,
    Signal,
)
from crease.engine.scorecard import BatsmanStatus, DismissalType, ExtraType


def wicket(kind: DismissalType, player_out_id: str = "a1", fielder_id=None, new_batsman_id=None, **kwargs):
    return DeliveryEvent(
        wicket=Dismissal(kind=kind, player_out_id=player_out_id, fielder_id=fielder_id),
        new_batsman_id=new_batsman_id,
        **kwargs,
    )


class TestDismissals:
    """Wickets taken on a delivery"""

    def test_bowled_with_replacement(self, processor, live_match):
        transition = processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="a3"))
        match = transition.match
        innings = match.innings

        assert innings.wickets == 1
        assert innings.overs == 0.1
        a1 = innings.batsman("a1")
        assert a1.is_out
        assert a1.status == BatsmanStatus.OUT
        assert a1.wicket.bowler_id == "b1"
        assert innings.bowler("b1").wickets == 1
        assert match.striker_id == "a3"
        assert innings.batsman("a3").status == BatsmanStatus.NOT_OUT
        assert transition.ball.display == "W"
        assert not transition.has(Signal.BATSMAN_REQUIRED)

    def test_fall_of_wicket_records_position(self, processor, live_match):
        match = processor.process(live_match, DeliveryEvent(runs_off_bat=2)).match
        match = processor.process(match, wicket(DismissalType.LBW, new_batsman_id="a3")).match
        fow = match.innings.fall_of_wickets[0]

        assert (fow.player_out_id, fow.over, fow.ball, fow.total_score) == ("a1", 0, 2, 2)

    def test_caught_requires_fielder(self, processor, live_match):
        with pytest.raises(MissingFielderError):
            processor.process(live_match, wicket(DismissalType.CAUGHT, new_batsman_id="a3"))

    def test_stumped_records_fielder(self, processor, live_match):
        event = wicket(DismissalType.STUMPED, fielder_id="b6", new_batsman_id="a3")
        match = processor.process(live_match, event).match
        assert match.innings.batsman("a1").wicket.fielder_id == "b6"
        assert match.innings.bowler("b1").wickets == 1

    def test_run_out_not_credited_to_bowler(self, processor, live_match):
        event = wicket(DismissalType.RUN_OUT, player_out_id="a2", fielder_id="b3", new_batsman_id="a3", runs_off_bat=1)
        match = processor.process(live_match, event).match
        innings = match.innings

        assert innings.wickets == 1
        assert innings.bowler("b1").wickets == 0
        assert innings.batsman("a1").runs == 1
        assert innings.score == 1
        # a2 was run out at the non-striker's end; a3 takes that slot, then the single swaps ends
        assert (match.striker_id, match.non_striker_id) == ("a3", "a1")

    def test_player_not_at_crease(self, processor, live_match):
        with pytest.raises(UnknownBatsmanError):
            processor.process(live_match, wicket(DismissalType.BOWLED, player_out_id="a5"))

    def test_replacement_already_out(self, processor, live_match):
        match = processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="a3")).match
        with pytest.raises(IneligibleBatsmanError):
            processor.process(match, wicket(DismissalType.BOWLED, player_out_id="a3", new_batsman_id="a1"))

    def test_replacement_already_batting(self, processor, live_match):
        with pytest.raises(IneligibleBatsmanError):
            processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="a2"))

    def test_new_batsman_without_wicket(self, processor, live_match):
        with pytest.raises(ValidationError):
            processor.process(live_match, DeliveryEvent(new_batsman_id="a3"))

    def test_retired_out_is_not_a_delivery(self, processor, live_match):
        with pytest.raises(ValidationError):
            processor.process(live_match, wicket(DismissalType.RETIRED_OUT))

    def test_empty_slot_signals_batsman_required(self, processor, live_match):
        transition = processor.process(live_match, wicket(DismissalType.BOWLED))
        match = transition.match

        assert transition.has(Signal.BATSMAN_REQUIRED)
        assert match.striker_id is None
        with pytest.raises(IncompleteLineupError) as exc:
            processor.process(match, DeliveryEvent())
        assert exc.value.missing == ["striker"]

        match = processor.select_lineup(match, LineupSelection(striker_id="a4")).match
        assert match.striker_id == "a4"
        assert match.innings.batsman("a4").status == BatsmanStatus.NOT_OUT

    def test_stumped_off_a_wide(self, processor, live_match):
        event = wicket(
            DismissalType.STUMPED, fielder_id="b6", new_batsman_id="a3",
            extra=ExtraEvent(kind=ExtraType.WIDE),
        )
        match = processor.process(live_match, event).match
        assert match.innings.score == 1
        assert match.innings.overs == 0.0
        assert match.innings.wickets == 1

    def test_all_out_ends_innings(self, processor, live_match):
        match = live_match
        incoming = ["a3", "a4", "a5", "a6"]
        for player_id in incoming:
            match = processor.process(match, wicket(DismissalType.BOWLED, player_out_id=match.striker_id,
                                                    new_batsman_id=player_id)).match
        transition = processor.process(match, wicket(DismissalType.BOWLED, player_out_id=match.striker_id))

        assert transition.has(Signal.INNINGS_COMPLETE)
        assert transition.match.innings1.wickets == 5
        assert transition.match.current_innings == 2


class TestRetirement:
    """Retirements between deliveries"""

    def test_retired_hurt_keeps_wickets(self, processor, live_match):
        request = RetirementRequest(player_out_id="a1", next_batsman_id="a3")
        match = processor.retire(live_match, request).match
        innings = match.innings

        assert innings.wickets == 0
        assert innings.overs == 0.0
        assert innings.batsman("a1").status == BatsmanStatus.RETIRED_HURT
        assert match.striker_id == "a3"

    def test_retired_hurt_can_return(self, processor, live_match):
        match = processor.retire(live_match, RetirementRequest(player_out_id="a1", next_batsman_id="a3")).match
        match = processor.process(match, wicket(DismissalType.BOWLED, player_out_id="a3", new_batsman_id="a1")).match
        assert match.striker_id == "a1"
        assert match.innings.batsman("a1").status == BatsmanStatus.NOT_OUT

    def test_retired_out_counts_as_wicket(self, processor, live_match):
        request = RetirementRequest(player_out_id="a2", kind=RetirementType.RETIRED_OUT, next_batsman_id="a3")
        match = processor.retire(live_match, request).match
        innings = match.innings

        assert innings.wickets == 1
        assert innings.batsman("a2").wicket.kind == DismissalType.RETIRED_OUT
        assert innings.batsman("a2").wicket.bowler_id is None
        assert innings.bowler("b1") is None
        assert match.non_striker_id == "a3"

    def test_replacement_required(self, processor, live_match):
        with pytest.raises(ReplacementRequiredError):
            processor.retire(live_match, RetirementRequest(player_out_id="a1"))

    def test_retirement_needs_full_crease(self, processor, live_match):
        match = processor.process(live_match, wicket(DismissalType.BOWLED)).match
        with pytest.raises(IncompleteLineupError):
            processor.retire(match, RetirementRequest(player_out_id="a2", next_batsman_id="a3"))

    def test_retire_player_not_batting(self, processor, live_match):
        with pytest.raises(UnknownBatsmanError):
            processor.retire(live_match, RetirementRequest(player_out_id="a4", next_batsman_id="a3"))

    def test_last_pair_retires_without_replacement(self, processor, live_match):
        """With four down only one wicket is left, so no replacement is demanded"""
        match = live_match
        for player_id in ["a3", "a4", "a5", "a6"]:
            match = processor.process(match, wicket(DismissalType.BOWLED, player_out_id=match.striker_id,
                                                    new_batsman_id=player_id)).match
        retired_id = match.striker_id
        transition = processor.retire(match, RetirementRequest(player_out_id=retired_id))

        assert transition.has(Signal.BATSMAN_REQUIRED)
        with pytest.raises(IncompleteLineupError):
            processor.process(transition.match, DeliveryEvent())

        # the retired batsman is the only one left and may resume
        match = processor.select_lineup(transition.match, LineupSelection(striker_id=retired_id)).match
        assert match.innings.batsman(retired_id).status == BatsmanStatus.NOT_OUT
        match = processor.process(match, DeliveryEvent(runs_off_bat=2)).match
        assert match.innings.score == 2
        assert match.innings.overs == 0.5

    def test_wickets_agree_with_fall_of_wickets(self, processor, live_match):
        match = processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="a3")).match
        request = RetirementRequest(player_out_id="a2", kind=RetirementType.RETIRED_OUT, next_batsman_id="a4")
        match = processor.retire(match, request).match
        innings = match.innings

        out = [b for b in innings.batsmen if b.status == BatsmanStatus.OUT]
        assert innings.wickets == len(innings.fall_of_wickets) == len(out) == 2


class TestTeamSheets:
    """Only players from the right side may bat or bowl"""

    def test_replacement_from_outside_the_squad(self, processor, live_match):
        with pytest.raises(IneligibleBatsmanError):
            processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="zz"))
        assert live_match.innings.max_wickets == 5

    def test_fielder_cannot_open_the_batting(self, processor, match):
        with pytest.raises(IneligibleBatsmanError):
            processor.select_lineup(match, LineupSelection(striker_id="b2", non_striker_id="a1", bowler_id="b1"))

    def test_batsman_cannot_bowl(self, processor, match):
        with pytest.raises(IneligibleBowlerError):
            processor.select_lineup(match, LineupSelection(striker_id="a1", non_striker_id="a2", bowler_id="a3"))

    def test_retirement_replacement_from_other_side(self, processor, live_match):
        with pytest.raises(IneligibleBatsmanError):
            processor.retire(live_match, RetirementRequest(player_out_id="a1", next_batsman_id="b3"))

    def test_squad_size_fixed_during_play(self, processor, live_match):
        match = processor.process(live_match, wicket(DismissalType.BOWLED, new_batsman_id="a3")).match
        match = processor.select_lineup(match, LineupSelection(bowler_id="b2")).match
        assert match.innings.squad_size == 6
        assert match.innings.max_wickets == 5
