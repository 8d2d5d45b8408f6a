"""
GigRole model - one position in a gig's lineup.
Role rows are referenced by invitations, notifications and payments through
their id, so GigPack saves update them in place instead of replacing them.
"""
from datetime import datetime
import enum

from app.extensions import db


class InvitationStatus(enum.Enum):
    """Invitation workflow state of a lineup role."""
    PENDING = 'pending'        # Not yet sent
    INVITED = 'invited'        # Sent, waiting for an answer
    ACCEPTED = 'accepted'
    DECLINED = 'declined'
    NEEDS_SUB = 'needs_sub'    # Musician asked for a substitute
    REPLACED = 'replaced'


class RolePaymentStatus(enum.Enum):
    """Payment state of a lineup role."""
    UNPAID = 'unpaid'
    PAID = 'paid'


class GigRole(db.Model):
    """A lineup slot: role name plus an optional musician."""

    __tablename__ = 'gig_roles'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )

    role_name = db.Column(db.String(100), nullable=True)
    musician_name = db.Column(db.String(200), nullable=True)

    # Linked identities (a registered user or a personal contact of the owner)
    musician_id = db.Column(
        db.Integer, db.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True
    )
    contact_id = db.Column(
        db.Integer, db.ForeignKey('musician_contacts.id', ondelete='SET NULL'), nullable=True
    )

    invitation_status = db.Column(
        db.Enum(InvitationStatus, values_callable=lambda x: [e.value for e in x]),
        default=InvitationStatus.PENDING,
        nullable=False,
        index=True
    )

    # Payment
    agreed_fee = db.Column(db.Numeric(10, 2), nullable=True)
    currency = db.Column(db.String(3), nullable=True)
    payment_status = db.Column(
        db.Enum(RolePaymentStatus, values_callable=lambda x: [e.value for e in x]),
        default=RolePaymentStatus.UNPAID,
        nullable=False
    )
    paid_at = db.Column(db.DateTime, nullable=True)

    notes = db.Column(db.Text, nullable=True)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow, nullable=True)

    # Relationships
    gig = db.relationship('Gig', back_populates='roles')
    musician = db.relationship('Profile', foreign_keys=[musician_id])
    contact = db.relationship('MusicianContact')

    def __repr__(self):
        return f'<GigRole {self.role_name}: {self.musician_name}>'

    @property
    def is_paid(self):
        return self.payment_status == RolePaymentStatus.PAID
