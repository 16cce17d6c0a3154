"""
Match Scorer - the single writer for one live match.

Every operator action goes through here: the processor builds the next
snapshot, the previous one goes on the undo stack, the reference is swapped
and the sync collaborator is told. Sync is best effort; a failure is logged
and the committed snapshot stands.
"""
import logging
from typing import Optional

from crease.engine.delivery_processor import DeliveryProcessor, Transition
from crease.engine.events import (
    DeliveryEvent,
    LineupSelection,
    PenaltyRequest,
    RetirementRequest,
    Signal,
    WicketConfirmation,
)
from crease.engine.history import HistoryLog
from crease.engine.scorecard import Match

logger = logging.getLogger(__name__)


class MatchScorer:
    """
    Owns the current snapshot of one match.

    sync is any object with a push(match) method. It is called once after
    each committed change and never retried.
    """

    def __init__(self, match: Match, processor: Optional[DeliveryProcessor] = None, sync=None):
        self.match = match
        self.processor = processor or DeliveryProcessor()
        self.history = HistoryLog()
        self.sync = sync

    def deliver(self, event: DeliveryEvent) -> Transition:
        return self._commit(self.processor.process(self.match, event))

    def confirm_wicket(self, confirmation: WicketConfirmation) -> Transition:
        return self.deliver(confirmation.to_delivery())

    def retire(self, request: RetirementRequest) -> Transition:
        return self._commit(self.processor.retire(self.match, request))

    def award_penalty(self, request: PenaltyRequest) -> Transition:
        return self._commit(self.processor.award_penalty(self.match, request))

    def select_lineup(self, selection: LineupSelection) -> Transition:
        return self._commit(self.processor.select_lineup(self.match, selection))

    def select_bowler(self, bowler_id: str) -> Transition:
        return self.select_lineup(LineupSelection(bowler_id=bowler_id))

    def swap_batsmen(self) -> Transition:
        return self._commit(self.processor.swap_batsmen(self.match))

    def abandon(self) -> Transition:
        return self._commit(self.processor.abandon(self.match))

    def undo(self) -> Optional[Match]:
        """Restore the snapshot before the last action. No-op when there is nothing to undo"""
        previous = self.history.undo()
        if previous is None:
            logger.debug("Match %s: nothing to undo", self.match.id)
            return None
        self.match = previous
        self.publish()
        return previous

    def _commit(self, transition: Transition) -> Transition:
        self.history.push(self.match)
        self.match = transition.match
        if transition.has(Signal.INNINGS_COMPLETE):
            logger.info("Match %s: second innings awaiting openers", self.match.id)
        self.publish()
        return transition

    def publish(self):
        if self.sync is None:
            return
        try:
            self.sync.push(self.match)
        except Exception:
            logger.warning("Match %s: sync failed, continuing with local state", self.match.id, exc_info=True)
