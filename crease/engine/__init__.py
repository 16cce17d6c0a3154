from crease.engine.delivery_processor import DeliveryProcessor, Transition
from crease.engine.history import HistoryLog
from crease.engine.innings_transition import InningsTransitionManager
from crease.engine.over_tracker import OverTracker
from crease.engine.result import ResultDeterminer
from crease.engine.scorer import MatchScorer
from crease.engine.setup import new_match
from crease.engine.wicket_recorder import WicketRecorder

__all__ = [
    "DeliveryProcessor",
    "Transition",
    "HistoryLog",
    "InningsTransitionManager",
    "OverTracker",
    "ResultDeterminer",
    "MatchScorer",
    "new_match",
    "WicketRecorder",
]
