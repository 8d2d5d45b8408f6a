"""
GigShare model - opaque tokens granting read-only access to a GigPack.
"""
from datetime import datetime
import secrets

from app.extensions import db


class GigShare(db.Model):
    """Public share link for one gig."""

    __tablename__ = 'gig_shares'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    token = db.Column(db.String(64), unique=True, index=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    gig = db.relationship('Gig', back_populates='shares')

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.token:
            self.token = self.generate_token()

    def __repr__(self):
        return f'<GigShare gig={self.gig_id} active={self.is_active}>'

    @staticmethod
    def generate_token():
        """Generate a secure random token for share links."""
        return secrets.token_urlsafe(32)

    def is_expired(self, now=None):
        if self.expires_at is None:
            return False
        return self.expires_at < (now or datetime.utcnow())

    def is_usable(self, now=None):
        """Active and not past its expiry."""
        return bool(self.is_active) and not self.is_expired(now)

    def revoke(self):
        self.is_active = False

    def to_dict(self):
        return {
            'token': self.token,
            'gig_id': self.gig_id,
            'is_active': self.is_active,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
