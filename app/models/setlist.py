"""
Structured setlist models (sections owning ordered songs).
"""
from app.extensions import db


class SetlistSection(db.Model):
    """A named block of songs: "Set 1", "Encore", "Extras"."""

    __tablename__ = 'setlist_sections'

    id = db.Column(db.Integer, primary_key=True)
    gig_id = db.Column(
        db.Integer, db.ForeignKey('gigs.id', ondelete='CASCADE'), nullable=False, index=True
    )
    name = db.Column(db.String(100), nullable=False)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    gig = db.relationship('Gig', back_populates='setlist_sections')
    items = db.relationship(
        'SetlistItem', order_by='SetlistItem.id', back_populates='section',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<SetlistSection {self.name}>'


class SetlistItem(db.Model):
    """One song in a setlist section."""

    __tablename__ = 'setlist_items'

    id = db.Column(db.Integer, primary_key=True)
    section_id = db.Column(
        db.Integer, db.ForeignKey('setlist_sections.id', ondelete='CASCADE'),
        nullable=False, index=True
    )
    title = db.Column(db.String(200), nullable=False)
    artist = db.Column(db.String(200), nullable=True)
    key = db.Column(db.String(20), nullable=True)
    # Either a number ("120") or a feel ("ballad")
    tempo = db.Column(db.String(30), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    reference_url = db.Column(db.String(1000), nullable=True)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    section = db.relationship('SetlistSection', back_populates='items')

    def __repr__(self):
        return f'<SetlistItem {self.title}>'
