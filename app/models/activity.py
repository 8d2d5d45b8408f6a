"""
Gig activity log - a feed of changes made to a gig.
"""
from datetime import datetime
import enum

from app.extensions import db


class ActivityType(enum.Enum):
    """Kinds of gig activity shown in feeds."""
    SETLIST_ADDED = 'setlist_added'
    SETLIST_REMOVED = 'setlist_removed'
    SETLIST_UPDATED = 'setlist_updated'
    SETLIST_REORDERED = 'setlist_reordered'
    FILE_UPLOADED = 'file_uploaded'
    FILE_REMOVED = 'file_removed'
    FILE_UPDATED = 'file_updated'
    ROLE_ASSIGNED = 'role_assigned'
    ROLE_REMOVED = 'role_removed'
    ROLE_STATUS_CHANGED = 'role_status_changed'
    GIG_UPDATED = 'gig_updated'
    NOTES_UPDATED = 'notes_updated'
    SCHEDULE_UPDATED = 'schedule_updated'
    GIG_CREATED = 'gig_created'


class GigActivityLog(db.Model):
    """One activity entry for a gig."""

    __tablename__ = 'gig_activity_log'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    user_id = db.Column(db.Integer, db.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)
    activity_type = db.Column(db.String(50), nullable=False, index=True)
    description = db.Column(db.String(500), nullable=False)
    details = db.Column('metadata', db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = db.relationship('Profile')

    def __repr__(self):
        return f'<GigActivityLog {self.activity_type} gig={self.gig_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'gig_id': self.gig_id,
            'user_id': self.user_id,
            'activity_type': self.activity_type,
            'description': self.description,
            'metadata': self.details or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'user': {
                'name': self.user.name,
                'avatar_url': self.user.avatar_url,
            } if self.user else None,
        }
