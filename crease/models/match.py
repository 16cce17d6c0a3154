from typing import Optional
from sqlalchemy import String, Enum, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from crease.database import Base
from crease.engine.scorecard import MatchStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchRecord(Base):
    """Last synced snapshot of a match, stored whole as JSON"""
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Teams
    team_a_name: Mapped[str] = mapped_column(String(100))
    team_b_name: Mapped[str] = mapped_column(String(100))

    # Status
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.UPCOMING)
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Snapshot in the wire format (crease.api.schemas.MatchSchema)
    snapshot: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<MatchRecord {self.team_a_name} vs {self.team_b_name} ({self.status.value})>"
