"""
Activity service for GigPack.
Records and lists gig activity feed entries.
"""
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from app.extensions import db
from app.models.activity import GigActivityLog, ActivityType


class ActivityService:
    """Service for the gig activity feed."""

    @staticmethod
    def log(gig_id: int, activity_type: ActivityType, description: str,
            user_id: Optional[int] = None,
            details: Optional[Dict[str, Any]] = None) -> Optional[GigActivityLog]:
        """
        Record an activity entry.

        Best-effort: a store error is rolled back and logged as a warning, and
        None is returned.
        """
        try:
            entry = GigActivityLog(
                gig_id=gig_id,
                user_id=user_id,
                activity_type=activity_type.value,
                description=description,
                details=details,
            )
            db.session.add(entry)
            db.session.commit()
            return entry
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(f'Activity log error for gig {gig_id}: {e}')
            return None

    @staticmethod
    def recent_for_gig(gig_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Latest activity entries for a gig, newest first.

        Args:
            gig_id: Gig ID
            limit: Maximum number of entries

        Returns:
            List of activity dictionaries
        """
        entries = (
            GigActivityLog.query
            .options(joinedload(GigActivityLog.user))
            .filter(GigActivityLog.gig_id == gig_id)
            .order_by(GigActivityLog.created_at.desc(), GigActivityLog.id.desc())
            .limit(limit)
            .all()
        )
        return [entry.to_dict() for entry in entries]
