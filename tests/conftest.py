# =============================================================================
# GigPack - Pytest Fixtures Configuration
# =============================================================================

import pytest
from datetime import date

from app import create_app
from app.extensions import db
from app.models.gig import Gig, GigScheduleItem, GigMaterial, GigPackingItem, GigContact, MaterialKind
from app.models.lineup import GigRole, InvitationStatus
from app.models.profile import Profile, MusicianContact
from app.models.setlist import SetlistSection, SetlistItem
from app.models.share import GigShare


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture(scope='function')
def app():
    """Create and configure test application with SQLite in-memory database."""
    application = create_app('testing')

    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Test client for HTTP requests."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """CLI test runner."""
    return app.test_cli_runner()


# =============================================================================
# Profile Fixtures
# =============================================================================

def _create_profile(**kwargs):
    profile = Profile(**kwargs)
    db.session.add(profile)
    db.session.commit()
    profile_id = profile.id
    db.session.expire_all()
    return db.session.get(Profile, profile_id)


@pytest.fixture
def owner(app):
    """Gig owner (band leader)."""
    return _create_profile(name='Dana Leader', email='dana@example.com', phone='+1 555 0100')


@pytest.fixture
def drummer(app):
    """Registered musician."""
    return _create_profile(
        name='Sam Drums',
        email='sam@example.com',
        phone='+1 555 0101',
        avatar_url='https://cdn.example.com/sam.png',
    )


@pytest.fixture
def outsider(app):
    """Registered user with no link to the gig."""
    return _create_profile(name='Alex Stranger', email='alex@example.com')


@pytest.fixture
def bass_contact(app, owner):
    """Owner's address book entry for an unregistered bassist."""
    contact = MusicianContact(owner_id=owner.id, name='Lee Bass', email='lee@example.com', phone='+1 555 0102')
    db.session.add(contact)
    db.session.commit()
    return contact


# =============================================================================
# Gig Fixtures
# =============================================================================

@pytest.fixture
def gig(app, owner, drummer, bass_contact):
    """A fully populated gig."""
    gig = Gig(
        owner_id=owner.id,
        title='Friday at the Blue Note',
        status='confirmed',
        band_name='The Test Band',
        date=date(2026, 11, 20),
        call_time='18:00',
        on_stage_time='20:30',
        venue_name='Blue Note',
        venue_address='131 W 3rd St',
        dress_code='All black',
        payment_notes='Cash on the night',
        internal_notes='Promoter pays late',
        notes='Load in through the back',
    )
    db.session.add(gig)
    db.session.flush()

    db.session.add_all([
        GigScheduleItem(gig_id=gig.id, time='18:00', label='Load in', sort_order=0),
        GigScheduleItem(gig_id=gig.id, time='19:00', label='Soundcheck', sort_order=1),
        GigMaterial(gig_id=gig.id, label='Rehearsal mix', url='https://example.com/mix.mp3',
                    kind=MaterialKind.REHEARSAL, sort_order=0),
        GigPackingItem(gig_id=gig.id, label='In-ear monitors', sort_order=0),
        GigContact(gig_id=gig.id, label='Promoter', name='Pat Promoter', phone='+1 555 0199', sort_order=0),
        GigRole(gig_id=gig.id, role_name='Drums', musician_name='Sam Drums', musician_id=drummer.id,
                invitation_status=InvitationStatus.ACCEPTED, agreed_fee=250, sort_order=0),
        GigRole(gig_id=gig.id, role_name='Bass', musician_name='Lee Bass', contact_id=bass_contact.id,
                invitation_status=InvitationStatus.INVITED, sort_order=1),
    ])

    section = SetlistSection(gig_id=gig.id, name='Set 1', sort_order=0)
    section.items.append(SetlistItem(title='So What', artist='Miles Davis', key='Dm', tempo='136', sort_order=0))
    section.items.append(SetlistItem(title='Blue in Green', sort_order=1))
    db.session.add(section)
    db.session.commit()

    gig_id = gig.id
    db.session.expire_all()
    return db.session.get(Gig, gig_id)


@pytest.fixture
def share(app, gig):
    """Active share link for the gig."""
    share = GigShare(gig_id=gig.id, is_active=True)
    db.session.add(share)
    db.session.commit()
    return share

