"""Repository for Schedule database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from weekgrid.database.models import ScheduleDB
from weekgrid.database.store import store_key
from weekgrid.models.schedule import Schedule, ScheduleId

logger = logging.getLogger(__name__)


class ScheduleRepository:
    """SQL-backed ScheduleStore."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        """Get a schedule by ID."""
        row = self.db.query(ScheduleDB).filter(ScheduleDB.id == store_key(schedule_id)).first()
        return Schedule.from_snapshot(row.to_pydantic()) if row else None

    def put(self, schedule: Schedule) -> Schedule:
        """Insert or replace a schedule (last writer wins)."""
        snapshot = schedule.snapshot()
        try:
            row = self.db.query(ScheduleDB).filter(ScheduleDB.id == store_key(schedule.schedule_id)).first()
            if row is None:
                self.db.add(ScheduleDB.from_pydantic(snapshot))
            else:
                row.schedule_type = snapshot.schedule_type
                row.payload = snapshot.model_dump(mode="json")
                row.updated_at = datetime.utcnow()
            self.db.commit()
            logger.debug(f"Saved schedule {schedule.schedule_id}")
            return schedule
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save schedule {schedule.schedule_id}: {type(e).__name__}: {str(e)}")
            raise

    def list_ids(self) -> List[str]:
        """All stored schedule IDs, oldest first."""
        rows = self.db.query(ScheduleDB.id).order_by(ScheduleDB.created_at).all()
        return [row[0] for row in rows]

    def delete(self, schedule_id: ScheduleId) -> bool:
        """Delete a schedule. Returns True if a row was removed."""
        try:
            deleted_count = self.db.query(ScheduleDB).filter(ScheduleDB.id == store_key(schedule_id)).delete()
            self.db.commit()
            logger.debug(f"Deleted schedule {schedule_id}")
            return deleted_count > 0
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete schedule {schedule_id}: {type(e).__name__}: {str(e)}")
            raise
