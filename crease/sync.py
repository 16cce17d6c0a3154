"""
Match sync - writes committed snapshots to the database.

The scorer calls push() once per committed change and does not retry, so
a failure here only means the stored copy lags behind the live one.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from crease.api.schemas import MatchSchema
from crease.database import get_session
from crease.engine.scorecard import Match
from crease.models.match import MatchRecord

logger = logging.getLogger(__name__)


class DatabaseSync:
    """Upserts a MatchRecord for every snapshot it is given"""

    def __init__(self, session_factory=get_session):
        self.session_factory = session_factory

    def push(self, match: Match):
        session = self.session_factory()
        try:
            record = session.get(MatchRecord, match.id)
            if record is None:
                record = MatchRecord(id=match.id)
                session.add(record)
            record.team_a_name = match.team_a.name
            record.team_b_name = match.team_b.name
            record.status = match.status
            record.result_summary = match.result
            record.snapshot = MatchSchema.from_snapshot(match).model_dump_json()
            session.commit()
            logger.debug("Match %s synced (%s)", match.id, match.status.value)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def load_match(session: Session, match_id: str) -> Optional[Match]:
    """Read a stored snapshot back, or None if the match was never synced"""
    record = session.get(MatchRecord, match_id)
    if record is None:
        return None
    return MatchSchema.model_validate_json(record.snapshot).to_snapshot()


def list_matches(session: Session) -> list[MatchRecord]:
    return session.query(MatchRecord).order_by(MatchRecord.updated_at.desc()).all()
