"""
Scoring engine exceptions.

ValidationError means the operator submitted something incomplete or against
the rules and can correct it and resubmit. ConsistencyError means the caller
referenced a player or state that does not exist where it claims, which is a
defect on the calling side. In both cases the match snapshot is unchanged.
"""


class ScoringError(Exception):
    """Base class for all scoring engine errors"""


class ValidationError(ScoringError):
    pass


class ConsistencyError(ScoringError):
    pass


class IncompleteLineupError(ValidationError):
    """Striker, non-striker or bowler has not been selected"""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Player selection is incomplete: {', '.join(missing)} not set")


class MissingFielderError(ValidationError):
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"A fielder is required for a {kind.value} dismissal")


class ReplacementRequiredError(ValidationError):
    def __init__(self):
        super().__init__("Please select the next batsman")


class InvalidRunsError(ValidationError):
    pass


class SameBatsmanError(ValidationError):
    def __init__(self):
        super().__init__("Striker and non-striker must be different players")


class ConsecutiveOverError(ValidationError):
    def __init__(self, bowler_id: str):
        self.bowler_id = bowler_id
        super().__init__(f"Bowler {bowler_id} bowled the previous over")


class UnknownBatsmanError(ConsistencyError):
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player {player_id} is not at the crease")


class IneligibleBatsmanError(ConsistencyError):
    def __init__(self, player_id: str, reason: str):
        self.player_id = player_id
        super().__init__(f"Player {player_id} cannot bat: {reason}")


class IneligibleBowlerError(ConsistencyError):
    def __init__(self, player_id: str, reason: str):
        self.player_id = player_id
        super().__init__(f"Player {player_id} cannot bowl: {reason}")


class MatchCompletedError(ConsistencyError):
    def __init__(self, match_id: str):
        super().__init__(f"Match {match_id} is already completed")


class InningsTransitionError(ConsistencyError):
    pass
