"""
Gig model and its freely-replaceable child rows.
Schedule items, materials and packing items are owned exclusively by a gig and
are never referenced by id from elsewhere, so saves replace them wholesale.
"""
from datetime import datetime
import enum

from app.extensions import db


class GigStatus(enum.Enum):
    """Booking status of a gig."""
    DRAFT = 'draft'
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class MaterialKind(enum.Enum):
    """Kind of reference material linked to a gig."""
    REHEARSAL = 'rehearsal'
    PERFORMANCE = 'performance'
    CHARTS = 'charts'
    REFERENCE = 'reference'
    OTHER = 'other'


class ContactSourceType(enum.Enum):
    """Where a gig contact entry came from."""
    MANUAL = 'manual'
    LINEUP = 'lineup'
    CONTACT = 'contact'


class Gig(db.Model):
    """A booked gig. Root of the GigPack aggregate."""

    __tablename__ = 'gigs'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), default=GigStatus.CONFIRMED.value, nullable=True)
    band_name = db.Column(db.String(200), nullable=True)
    gig_type = db.Column(db.String(50), nullable=True)

    # Timing ("HH:MM" strings as edited in the GigPack editor)
    date = db.Column(db.Date, nullable=True, index=True)
    call_time = db.Column(db.String(5), nullable=True)
    on_stage_time = db.Column(db.String(5), nullable=True)
    start_time = db.Column(db.Time, nullable=True)
    end_time = db.Column(db.Time, nullable=True)

    # Venue - venue_* supersedes the legacy location_* columns
    venue_name = db.Column(db.String(200), nullable=True)
    venue_address = db.Column(db.String(300), nullable=True)
    location_name = db.Column(db.String(200), nullable=True)
    location_address = db.Column(db.String(300), nullable=True)
    venue_maps_url = db.Column(db.String(500), nullable=True)

    # Branding - hero_image_url supersedes the legacy cover_image_path
    hero_image_url = db.Column(db.String(500), nullable=True)
    cover_image_path = db.Column(db.String(500), nullable=True)
    band_logo_url = db.Column(db.String(500), nullable=True)
    accent_color = db.Column(db.String(20), nullable=True)
    theme = db.Column(db.String(30), nullable=True)
    poster_skin = db.Column(db.String(20), nullable=True)

    # Notes
    dress_code = db.Column(db.Text, nullable=True)
    backline_notes = db.Column(db.Text, nullable=True)
    parking_notes = db.Column(db.Text, nullable=True)
    payment_notes = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    internal_notes = db.Column(db.Text, nullable=True)

    # Legacy flat setlist text and attached PDF
    setlist = db.Column(db.Text, nullable=True)
    setlist_pdf_url = db.Column(db.String(500), nullable=True)

    # External (imported) gigs
    is_external = db.Column(db.Boolean, default=False, nullable=False)
    external_event_url = db.Column(db.String(500), nullable=True)
    schedule_notes = db.Column(db.JSON, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships (ordered by id so fetch order is deterministic)
    owner = db.relationship('Profile', foreign_keys=[owner_id])
    schedule_items = db.relationship(
        'GigScheduleItem', order_by='GigScheduleItem.id',
        cascade='all, delete-orphan'
    )
    materials = db.relationship(
        'GigMaterial', order_by='GigMaterial.id',
        cascade='all, delete-orphan'
    )
    packing_items = db.relationship(
        'GigPackingItem', order_by='GigPackingItem.id',
        cascade='all, delete-orphan'
    )
    contacts = db.relationship(
        'GigContact', order_by='GigContact.id',
        cascade='all, delete-orphan'
    )
    roles = db.relationship(
        'GigRole', order_by='GigRole.id', back_populates='gig',
        cascade='all, delete-orphan'
    )
    setlist_sections = db.relationship(
        'SetlistSection', order_by='SetlistSection.id', back_populates='gig',
        cascade='all, delete-orphan'
    )
    shares = db.relationship(
        'GigShare', order_by='GigShare.id', back_populates='gig',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Gig {self.id} {self.title!r}>'

    @property
    def is_archived(self):
        return self.status == GigStatus.CANCELLED.value

    def is_owned_by(self, profile):
        return profile is not None and self.owner_id == profile.id

    def can_view(self, profile):
        """Owner and linked lineup musicians can view the full GigPack."""
        if profile is None:
            return False
        if self.is_owned_by(profile):
            return True
        return any(role.musician_id == profile.id for role in self.roles)

    def to_dict(self):
        """Convert the raw gig row to a JSON-safe dictionary."""
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'status': self.status,
            'band_name': self.band_name,
            'gig_type': self.gig_type,
            'date': self.date.isoformat() if self.date else None,
            'call_time': self.call_time,
            'on_stage_time': self.on_stage_time,
            'venue_name': self.venue_name,
            'venue_address': self.venue_address,
            'venue_maps_url': self.venue_maps_url,
            'hero_image_url': self.hero_image_url,
            'band_logo_url': self.band_logo_url,
            'accent_color': self.accent_color,
            'theme': self.theme,
            'poster_skin': self.poster_skin,
            'dress_code': self.dress_code,
            'backline_notes': self.backline_notes,
            'parking_notes': self.parking_notes,
            'payment_notes': self.payment_notes,
            'internal_notes': self.internal_notes,
            'setlist': self.setlist,
            'is_external': self.is_external,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class GigScheduleItem(db.Model):
    """One entry in the day-of timeline (soundcheck, doors, set 1...)."""

    __tablename__ = 'gig_schedule_items'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    time = db.Column(db.String(5), nullable=True)
    label = db.Column(db.String(200), nullable=False)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    def __repr__(self):
        return f'<GigScheduleItem {self.time} {self.label}>'


class GigMaterial(db.Model):
    """Link to a rehearsal recording, chart or other reference material."""

    __tablename__ = 'gig_materials'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    label = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(1000), nullable=False)
    kind = db.Column(
        db.Enum(MaterialKind, values_callable=lambda x: [e.value for e in x]),
        default=MaterialKind.OTHER,
        nullable=True
    )
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    def __repr__(self):
        return f'<GigMaterial {self.label}>'


class GigPackingItem(db.Model):
    """One line of the packing checklist."""

    __tablename__ = 'gig_packing_items'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    label = db.Column(db.String(200), nullable=False)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    def __repr__(self):
        return f'<GigPackingItem {self.label}>'


class GigContact(db.Model):
    """Manager-only contact sheet entry (venue manager, promoter, sound tech)."""

    __tablename__ = 'gig_contacts'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    label = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    source_type = db.Column(
        db.Enum(ContactSourceType, values_callable=lambda x: [e.value for e in x]),
        default=ContactSourceType.MANUAL,
        nullable=False
    )
    source_id = db.Column(db.String(64), nullable=True)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    def __repr__(self):
        return f'<GigContact {self.label}: {self.name}>'
