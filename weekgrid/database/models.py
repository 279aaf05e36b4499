"""SQLAlchemy database models for weekgrid."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from weekgrid.database.database import Base
from weekgrid.models.constants import DEFAULT_SCHEDULE_TYPE


class ScheduleDB(Base):
    """Database model for a Schedule.

    The aggregate is stored whole as a JSON snapshot; it is always replaced, never
    patched, so a single payload column is enough.
    """

    __tablename__ = "schedules"

    # Primary key (schedule ids are normalized to strings)
    id = Column(String, primary_key=True)
    schedule_type = Column(String, nullable=False, default=DEFAULT_SCHEDULE_TYPE)

    # ScheduleSnapshot.model_dump(mode="json")
    payload = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to a ScheduleSnapshot."""
        from weekgrid.models.schedule import ScheduleSnapshot
        return ScheduleSnapshot.model_validate(self.payload)

    @classmethod
    def from_pydantic(cls, snapshot):
        """Create database model from a ScheduleSnapshot."""
        return cls(
            id=str(snapshot.schedule_id),
            schedule_type=snapshot.schedule_type,
            payload=snapshot.model_dump(mode="json"),
        )
