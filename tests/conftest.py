"""
Pytest fixtures for Crease: team sheets, a fresh match and a match in play.
"""
import os
import tempfile
from pathlib import Path

import pytest

# Keep the test run away from the real database before crease.database is imported.
TEST_SESSION_ROOT = Path(tempfile.mkdtemp(prefix="crease_pytest_"))
os.environ.setdefault("DATABASE_PATH", (TEST_SESSION_ROOT / "crease_test.db").as_posix())

from crease.engine import DeliveryProcessor, new_match
from crease.engine.events import LineupSelection
from crease.engine.scorecard import TeamSheet, TossDecision


def create_team_sheet(team_id: str, name: str, players: int = 6) -> TeamSheet:
    """Team sheet with player ids <team_id>1 .. <team_id>N"""
    return TeamSheet(
        team_id=team_id,
        name=name,
        short_name=name[:3].upper(),
        player_ids=tuple(f"{team_id}{i}" for i in range(1, players + 1)),
    )


@pytest.fixture
def team_a():
    return create_team_sheet("a", "Avonside")


@pytest.fixture
def team_b():
    return create_team_sheet("b", "Brookfield")


@pytest.fixture
def processor():
    return DeliveryProcessor()


@pytest.fixture
def match(team_a, team_b):
    """Upcoming 2-over match; Avonside won the toss and bat first"""
    return new_match(team_a, team_b, overs=2, toss_winner_id="a",
                     toss_decision=TossDecision.BAT, match_id="m1")


@pytest.fixture
def live_match(processor, match):
    """a1 on strike, a2 at the other end, b1 to bowl"""
    selection = LineupSelection(striker_id="a1", non_striker_id="a2", bowler_id="b1")
    return processor.select_lineup(match, selection).match
