from dataclasses import dataclass, replace

from crease.engine.scorecard import BALLS_PER_OVER, Ball, Innings, Over


@dataclass(frozen=True)
class OverTracker:
    """
    The in-progress over of an innings.

    The over is keyed by its 0-based number, which is the count of overs
    already completed. Wides and no-balls are kept in the ball list for
    display but do not count toward the six legal deliveries.
    """
    over: Over

    @classmethod
    def resume(cls, innings: Innings, bowler_id: str) -> "OverTracker":
        over = innings.current_over
        if over is None:
            over = Over(over_number=innings.legal_balls // BALLS_PER_OVER, bowler_id=bowler_id)
        return cls(over=over)

    @property
    def over_number(self) -> int:
        return self.over.over_number

    @property
    def legal_balls(self) -> int:
        return self.over.legal_balls

    @property
    def next_ball_number(self) -> int:
        return self.legal_balls + 1

    @property
    def is_complete(self) -> bool:
        return self.legal_balls >= BALLS_PER_OVER

    def append(self, ball: Ball) -> "OverTracker":
        return OverTracker(
            over=replace(
                self.over,
                balls=self.over.balls + (ball,),
                runs_scored=self.over.runs_scored + ball.total_runs,
            )
        )

    def write(self, overs_history: tuple[Over, ...]) -> tuple[Over, ...]:
        """Put the tracked over back into an innings' history"""
        if overs_history and overs_history[-1].over_number == self.over_number:
            return overs_history[:-1] + (self.over,)
        return overs_history + (self.over,)
