"""
Tests for the match scorer: commit, undo and best-effort sync.
"""
import logging

import pytest

from crease.engine import HistoryLog, MatchScorer
from crease.engine.errors import InvalidRunsError
from crease.engine.events import (
    DeliveryEvent,
    LineupSelection,
    PenaltyRequest,
    Signal,
    WicketConfirmation,
)
from crease.engine.scorecard import DismissalType, ExtraType


class RecordingSync:
    def __init__(self):
        self.pushed = []

    def push(self, match):
        self.pushed.append(match)


class FailingSync:
    def push(self, match):
        raise ConnectionError("database unreachable")


class TestHistoryLog:
    def test_undo_order(self, match, live_match):
        log = HistoryLog()
        log.push(match)
        log.push(live_match)
        assert len(log) == 2
        assert log.undo() is live_match
        assert log.undo() is match
        assert log.undo() is None


class TestMatchScorer:
    """Single writer for one match"""

    def test_deliver_updates_match(self, live_match):
        scorer = MatchScorer(live_match)
        transition = scorer.deliver(DeliveryEvent(runs_off_bat=4))
        assert scorer.match is transition.match
        assert scorer.match.innings.score == 4
        assert len(scorer.history) == 1

    def test_undo_restores_previous_snapshot(self, live_match):
        scorer = MatchScorer(live_match)
        scorer.deliver(DeliveryEvent(runs_off_bat=1))
        after_one = scorer.match
        scorer.deliver(DeliveryEvent(runs_off_bat=6))

        assert scorer.undo() is after_one
        assert scorer.match.innings.score == 1
        assert scorer.undo() is live_match
        assert scorer.undo() is None
        assert scorer.match is live_match

    def test_refused_event_not_recorded(self, live_match):
        scorer = MatchScorer(live_match)
        with pytest.raises(InvalidRunsError):
            scorer.deliver(DeliveryEvent(runs_off_bat=-2))
        assert scorer.match is live_match
        assert len(scorer.history) == 0

    def test_confirm_wicket_off_a_wide(self, live_match):
        """Runs completed on a wide are credited as wides"""
        scorer = MatchScorer(live_match)
        confirmation = WicketConfirmation(
            kind=DismissalType.RUN_OUT,
            player_out_id="a1",
            fielder_id="b4",
            runs_on_ball=1,
            next_batsman_id="a3",
            extra_kind=ExtraType.WIDE,
        )
        scorer.confirm_wicket(confirmation)
        innings = scorer.match.innings

        assert innings.score == 2
        assert innings.extras.wides == 2
        assert innings.wickets == 1
        assert innings.batsman("a1").runs == 0

    def test_select_bowler(self, live_match):
        scorer = MatchScorer(live_match)
        for _ in range(6):
            transition = scorer.deliver(DeliveryEvent())
        assert transition.has(Signal.OVER_COMPLETE)

        scorer.select_bowler("b2")
        assert scorer.match.current_bowler_id == "b2"

    def test_sync_called_after_each_commit(self, match):
        sync = RecordingSync()
        scorer = MatchScorer(match, sync=sync)
        scorer.select_lineup(LineupSelection("a1", "a2", "b1"))
        scorer.deliver(DeliveryEvent(runs_off_bat=2))
        scorer.award_penalty(PenaltyRequest())

        assert [m.innings.score for m in sync.pushed] == [0, 2, 7]
        assert sync.pushed[-1] is scorer.match

    def test_sync_failure_is_logged_not_raised(self, live_match, caplog):
        scorer = MatchScorer(live_match, sync=FailingSync())
        with caplog.at_level(logging.WARNING, logger="crease.engine.scorer"):
            transition = scorer.deliver(DeliveryEvent(runs_off_bat=4))

        assert scorer.match is transition.match
        assert scorer.match.innings.score == 4
        assert "sync failed" in caplog.text

    def test_undo_republishes(self, live_match):
        sync = RecordingSync()
        scorer = MatchScorer(live_match, sync=sync)
        scorer.deliver(DeliveryEvent(runs_off_bat=4))
        scorer.undo()
        assert sync.pushed[-1] is live_match

    def test_abandon(self, live_match):
        scorer = MatchScorer(live_match)
        transition = scorer.abandon()
        assert transition.has(Signal.MATCH_COMPLETE)
        assert scorer.match.result == "Match abandoned."
