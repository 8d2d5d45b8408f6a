"""
SQLAlchemy models for GigPack.
All models are imported here for easy access.
"""
from app.models.profile import Profile, MusicianContact
from app.models.gig import (
    Gig,
    GigStatus,
    GigScheduleItem,
    GigMaterial,
    MaterialKind,
    GigPackingItem,
    GigContact,
    ContactSourceType,
)
from app.models.lineup import GigRole, InvitationStatus, RolePaymentStatus
from app.models.setlist import SetlistSection, SetlistItem
from app.models.share import GigShare
from app.models.activity import GigActivityLog, ActivityType

__all__ = [
    'Profile', 'MusicianContact',
    'Gig', 'GigStatus', 'GigScheduleItem', 'GigMaterial', 'MaterialKind',
    'GigPackingItem', 'GigContact', 'ContactSourceType',
    'GigRole', 'InvitationStatus', 'RolePaymentStatus',
    'SetlistSection', 'SetlistItem',
    'GigShare',
    'GigActivityLog', 'ActivityType',
]
