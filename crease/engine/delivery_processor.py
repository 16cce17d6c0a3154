"""
Delivery Processor - turns one operator event into the next match snapshot.

The processor never mutates its input. Every check that can refuse an event
runs before any new value is built, so a refused event leaves nothing behind.
"""
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Optional

from crease.engine.errors import (
    ConsecutiveOverError,
    IncompleteLineupError,
    IneligibleBowlerError,
    InvalidRunsError,
    MatchCompletedError,
    SameBatsmanError,
    ValidationError,
)
from crease.engine.events import DeliveryEvent, LineupSelection, PenaltyRequest, RetirementRequest, Signal
from crease.engine.innings_transition import InningsTransitionManager
from crease.engine.over_tracker import OverTracker
from crease.engine.result import ResultDeterminer
from crease.engine.scorecard import (
    BALLS_PER_OVER,
    Ball,
    BallExtra,
    BatsmanScore,
    BatsmanStatus,
    BowlerScore,
    Crease,
    Extras,
    ExtraType,
    Match,
    MatchStatus,
    balls_from_overs,
    overs_from_balls,
)
from crease.engine.wicket_recorder import WicketRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtraRule:
    """How one kind of delivery is scored"""
    is_legal: bool
    penalty: int  # automatic run for the delivery itself
    credits_batsman: bool  # runs off the bat go to the striker
    credits_extras: bool  # running runs go to extras
    bat_runs_to_bowler: bool
    extras_to_bowler: bool
    rotates_strike: bool  # odd running runs change ends
    extras_field: Optional[str] = None

    def split(self, running: int) -> tuple[int, int]:
        """(batsman runs, extras runs) for a delivery with this many running runs"""
        batsman_runs = running if self.credits_batsman else 0
        extra_runs = self.penalty + (running if self.credits_extras else 0)
        return batsman_runs, extra_runs

    def conceded(self, ball: Ball) -> int:
        runs = ball.runs if self.bat_runs_to_bowler else 0
        if self.extras_to_bowler and ball.extra:
            runs += ball.extra.runs
        return runs


EXTRA_RULES = {
    None: ExtraRule(
        is_legal=True,
        penalty=0,
        credits_batsman=True,
        credits_extras=False,
        bat_runs_to_bowler=True,
        extras_to_bowler=False,
        rotates_strike=True,
    ),
    ExtraType.WIDE: ExtraRule(
        is_legal=False,
        penalty=1,
        credits_batsman=False,
        credits_extras=True,
        bat_runs_to_bowler=False,
        extras_to_bowler=True,
        rotates_strike=False,
        extras_field="wides",
    ),
    ExtraType.NO_BALL: ExtraRule(
        is_legal=False,
        penalty=1,
        credits_batsman=True,
        credits_extras=False,
        bat_runs_to_bowler=False,
        extras_to_bowler=True,
        rotates_strike=False,
        extras_field="no_balls",
    ),
    ExtraType.BYE: ExtraRule(
        is_legal=True,
        penalty=0,
        credits_batsman=False,
        credits_extras=True,
        bat_runs_to_bowler=False,
        extras_to_bowler=False,
        rotates_strike=True,
        extras_field="byes",
    ),
    ExtraType.LEG_BYE: ExtraRule(
        is_legal=True,
        penalty=0,
        credits_batsman=False,
        credits_extras=True,
        bat_runs_to_bowler=False,
        extras_to_bowler=False,
        rotates_strike=True,
        extras_field="leg_byes",
    ),
}

_unscored = set(ExtraType) - set(EXTRA_RULES)
if _unscored:
    raise RuntimeError(f"No scoring rule for {sorted(k.value for k in _unscored)}")


def rule_for(ball: Ball) -> ExtraRule:
    return EXTRA_RULES[ball.extra.kind if ball.extra else None]


@dataclass(frozen=True)
class Transition:
    """A committed step: the new snapshot plus what the operator must do next"""
    match: Match
    signals: frozenset = field(default_factory=frozenset)
    ball: Optional[Ball] = None

    def has(self, signal: Signal) -> bool:
        return signal in self.signals


class DeliveryProcessor:
    """
    The scoring state machine.

    Processes deliveries, penalty runs and lineup changes, then runs the
    end-of-innings and end-of-match checks and hands off to the
    InningsTransitionManager or ResultDeterminer as needed.
    """

    def __init__(
        self,
        wickets: Optional[WicketRecorder] = None,
        transitions: Optional[InningsTransitionManager] = None,
        results: Optional[ResultDeterminer] = None,
    ):
        self.wickets = wickets or WicketRecorder()
        self.transitions = transitions or InningsTransitionManager()
        self.results = results or ResultDeterminer()

    def process(self, match: Match, event: DeliveryEvent) -> Transition:
        """Score one delivery"""
        self._check_not_completed(match)
        self._check_lineup(match)

        kind = event.extra.kind if event.extra else None
        rule = EXTRA_RULES[kind]
        running = self._running_runs(event, kind)

        innings = match.innings
        crease = match.crease
        if event.wicket:
            self.wickets.validate_dismissal(innings, crease, event.wicket, event.new_batsman_id)
        elif event.new_batsman_id:
            raise ValidationError("A new batsman can only come in after a wicket")

        bowler_id = match.current_bowler_id
        striker_id = crease.striker_id
        tracker = OverTracker.resume(innings, bowler_id)
        batsman_runs, extra_runs = rule.split(running)
        ball_number = tracker.next_ball_number

        # Striker
        batsman = innings.batsman(striker_id) or BatsmanScore(player_id=striker_id, status=BatsmanStatus.NOT_OUT)
        innings = innings.with_batsman(replace(
            batsman,
            runs=batsman.runs + batsman_runs,
            balls=batsman.balls + (1 if rule.is_legal else 0),
            fours=batsman.fours + (1 if batsman_runs == 4 else 0),
            sixes=batsman.sixes + (1 if batsman_runs == 6 else 0),
        ))

        # Team total and extras
        innings = replace(
            innings,
            score=innings.score + batsman_runs + extra_runs,
            extras=self._credit_extras(innings.extras, rule, extra_runs),
        )

        # Bowler figures, before the wicket so a credited dismissal lands on them
        ball = Ball(
            ball_number=ball_number,
            bowler_id=bowler_id,
            batsman_id=striker_id,
            runs=batsman_runs,
            extra=BallExtra(kind=kind, runs=extra_runs) if kind else None,
            timestamp=time.time(),
        )
        spell = innings.bowler(bowler_id) or BowlerScore(player_id=bowler_id)
        spell_balls = balls_from_overs(spell.overs) + (1 if rule.is_legal else 0)
        innings = innings.with_bowler(replace(
            spell,
            runs=spell.runs + rule.conceded(ball),
            overs=overs_from_balls(spell_balls),
        ))

        if event.wicket:
            innings, crease = self.wickets.record_dismissal(
                innings, crease, event.wicket,
                bowler_id=bowler_id,
                over=tracker.over_number,
                ball=ball_number,
                new_batsman_id=event.new_batsman_id,
            )
            ball = replace(ball, wicket=innings.fall_of_wickets[-1])

        tracker = tracker.append(ball)
        innings = replace(innings, overs_history=tracker.write(innings.overs_history))
        if rule.is_legal:
            innings = replace(innings, overs=overs_from_balls(innings.legal_balls + 1))

        # Strike rotation: odd running runs, then the change of ends at the over
        if rule.rotates_strike and running % 2 == 1:
            crease = crease.swap()

        signals = set()
        bowler_slot = bowler_id
        if tracker.is_complete:
            crease = crease.swap()
            bowler_slot = None
            signals.add(Signal.OVER_COMPLETE)
            # a maiden needs the whole over from one bowler
            balls = tracker.over.balls
            if all(b.bowler_id == bowler_id for b in balls) and sum(rule_for(b).conceded(b) for b in balls) == 0:
                spell = innings.bowler(bowler_id)
                innings = innings.with_bowler(replace(spell, maidens=spell.maidens + 1))

        new_match = replace(match.with_innings(innings).with_crease(crease), current_bowler_id=bowler_slot)
        logger.debug(
            "Match %s: %s %d/%d (%.1f)",
            match.id, ball.display, innings.score, innings.wickets, innings.overs,
        )
        return self.settle(new_match, signals, ball)

    def award_penalty(self, match: Match, request: PenaltyRequest) -> Transition:
        """Penalty runs go straight to the total; no player credited, no ball bowled"""
        self._check_not_completed(match)
        if request.runs <= 0:
            raise InvalidRunsError("Penalty runs must be positive")
        innings = match.innings
        extras = innings.extras
        innings = replace(
            innings,
            score=innings.score + request.runs,
            extras=replace(extras, total=extras.total + request.runs, penalties=extras.penalties + request.runs),
        )
        return self.settle(match.with_innings(innings), set())

    def retire(self, match: Match, request: RetirementRequest) -> Transition:
        self._check_not_completed(match)
        return self.settle(self.wickets.retire(match, request), set())

    def select_lineup(self, match: Match, selection: LineupSelection) -> Transition:
        """
        Fill crease and bowler slots.

        Before the first ball of an innings all three must be chosen and the
        openers may still be changed. Afterwards only empty crease slots may
        be filled; the bowler may be changed at any time but not to whoever
        bowled the previous over.
        """
        self._check_not_completed(match)
        innings = match.innings
        current = match.crease
        fresh = not innings.overs_history

        striker_id = self._fill_slot("striker", current.striker_id, selection.striker_id, fresh)
        non_striker_id = self._fill_slot("non-striker", current.non_striker_id, selection.non_striker_id, fresh)
        bowler_id = selection.bowler_id or match.current_bowler_id

        if fresh:
            missing = [name for name, slot in (("striker", striker_id),
                                               ("non-striker", non_striker_id),
                                               ("bowler", bowler_id)) if slot is None]
            if missing:
                raise IncompleteLineupError(missing)
        if striker_id is not None and striker_id == non_striker_id:
            raise SameBatsmanError()

        for player_id in {striker_id, non_striker_id} - {current.striker_id, current.non_striker_id, None}:
            self.wickets.check_replacement(innings, current, player_id)

        if selection.bowler_id and selection.bowler_id not in match.team(innings.bowling_team_id).player_ids:
            raise IneligibleBowlerError(selection.bowler_id, "not on the fielding side's team sheet")
        if selection.bowler_id and innings.current_over is None:
            previous = innings.last_completed_over
            if previous is not None and previous.balls[-1].bowler_id == selection.bowler_id:
                raise ConsecutiveOverError(selection.bowler_id)

        chosen = Crease(striker_id, non_striker_id)
        for player_id in (current.striker_id, current.non_striker_id):
            # an opener stood down before a ball was bowled
            if player_id is not None and not chosen.holds(player_id):
                entry = innings.batsman(player_id) or BatsmanScore(player_id=player_id)
                innings = innings.with_batsman(replace(entry, status=BatsmanStatus.DID_NOT_BAT))
        for player_id in (striker_id, non_striker_id):
            if player_id is not None and not current.holds(player_id):
                entry = innings.batsman(player_id) or BatsmanScore(player_id=player_id)
                innings = innings.with_batsman(replace(entry, status=BatsmanStatus.NOT_OUT))

        new_match = replace(
            match.with_innings(innings).with_crease(Crease(striker_id, non_striker_id)),
            current_bowler_id=bowler_id,
            status=MatchStatus.LIVE,
        )
        return Transition(new_match, frozenset(self._pending(new_match)))

    def swap_batsmen(self, match: Match) -> Transition:
        self._check_not_completed(match)
        return Transition(match.with_crease(match.crease.swap()))

    def abandon(self, match: Match) -> Transition:
        self._check_not_completed(match)
        if match.innings2 is not None:
            raise ValidationError("The second innings is under way; the match must be played to a result")
        return Transition(self.results.determine(match), frozenset({Signal.MATCH_COMPLETE}))

    def settle(self, match: Match, signals: set, ball: Optional[Ball] = None) -> Transition:
        """End-of-transition checks: a successful chase first, then all out or overs used up"""
        innings = match.innings

        if match.current_innings == 2 and match.target is not None and innings.score >= match.target:
            return Transition(self.results.determine(match), frozenset({Signal.MATCH_COMPLETE}), ball)

        all_out = innings.wickets >= innings.max_wickets
        overs_done = innings.legal_balls >= match.overs * BALLS_PER_OVER
        if all_out or overs_done:
            if match.current_innings == 1:
                return Transition(
                    self.transitions.begin_second_innings(match),
                    frozenset({Signal.INNINGS_COMPLETE}),
                    ball,
                )
            return Transition(self.results.determine(match), frozenset({Signal.MATCH_COMPLETE}), ball)

        return Transition(match, frozenset(set(signals) | self._pending(match)), ball)

    def _pending(self, match: Match) -> set:
        signals = set()
        if match.status == MatchStatus.LIVE and (match.striker_id is None) != (match.non_striker_id is None):
            signals.add(Signal.BATSMAN_REQUIRED)
        return signals

    def _fill_slot(self, name: str, current: Optional[str], selected: Optional[str],
                   replaceable: bool = False) -> Optional[str]:
        if selected is None or selected == current:
            return current
        if current is not None and not replaceable:
            raise ValidationError(f"The {name} slot is already taken by {current}")
        return selected

    def _running_runs(self, event: DeliveryEvent, kind: Optional[ExtraType]) -> int:
        extra_runs = event.extra.extra_runs if event.extra else 0
        if event.runs_off_bat < 0 or extra_runs < 0:
            raise InvalidRunsError("Runs cannot be negative")
        if kind == ExtraType.WIDE:
            if event.runs_off_bat:
                raise InvalidRunsError("A wide cannot carry runs off the bat")
            return extra_runs
        if extra_runs:
            raise InvalidRunsError("Extra runs only apply to wides")
        return event.runs_off_bat

    def _credit_extras(self, extras: Extras, rule: ExtraRule, runs: int) -> Extras:
        if rule.extras_field is None or runs == 0:
            return extras
        return replace(
            extras,
            total=extras.total + runs,
            **{rule.extras_field: getattr(extras, rule.extras_field) + runs},
        )

    def _check_not_completed(self, match: Match):
        if match.is_completed:
            raise MatchCompletedError(match.id)

    def _check_lineup(self, match: Match):
        missing = [name for name, slot in (("striker", match.striker_id),
                                           ("non-striker", match.non_striker_id),
                                           ("bowler", match.current_bowler_id)) if slot is None]
        if missing:
            raise IncompleteLineupError(missing)
