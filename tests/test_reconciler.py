# =============================================================================
# GigPack - Save / Reconciliation Tests
# =============================================================================

from datetime import date, datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models.activity import GigActivityLog
from app.models.gig import Gig
from app.models.lineup import GigRole, InvitationStatus, RolePaymentStatus
from app.services.gigpack_service import GigPackService, GigNotFoundError


EDITED_COLLECTIONS = {
    'schedule': [
        {'time': '17:00', 'label': 'Load in'},
        {'time': None, 'label': 'Doors'},
        {'time': '21:00', 'label': 'Set 1'},
    ],
    'materials': [
        {'label': 'Charts', 'url': 'https://example.com/charts.pdf', 'kind': 'charts'},
        {'label': 'Live take', 'url': 'https://example.com/live.mp3', 'kind': 'reference'},
    ],
    'packing_checklist': [{'label': 'Cables'}, {'label': 'Spare sticks'}],
    'setlist_structured': [
        {'name': 'Opener', 'songs': [{'title': 'Intro', 'artist': None, 'key': 'E', 'tempo': '110',
                                      'notes': 'Count in x2', 'reference_url': None}]},
        {'name': 'Main', 'songs': [
            {'title': 'Tune A', 'artist': 'Band', 'key': None, 'tempo': None, 'notes': None, 'reference_url': None},
            {'title': 'Tune B', 'artist': None, 'key': 'Bb', 'tempo': None, 'notes': None,
             'reference_url': 'https://example.com/b'},
        ]},
    ],
}


def _strip_ids(items):
    return [{key: value for key, value in item.items() if key != 'id'} for item in items]


def _roles(gig_id):
    return GigRole.query.filter_by(gig_id=gig_id).order_by(GigRole.sort_order, GigRole.id).all()


class TestScalarFields:
    """Tests for writing gig columns."""

    def test_present_fields_are_written(self, gig):
        GigPackService.save_gigpack(gig.id, {'title': 'Renamed', 'date': '2026-12-31', 'dress_code': None})
        refreshed = db.session.get(Gig, gig.id)
        assert refreshed.title == 'Renamed'
        assert refreshed.date == date(2026, 12, 31)
        assert refreshed.dress_code is None

    def test_absent_fields_are_untouched(self, gig):
        GigPackService.save_gigpack(gig.id, {'title': 'Renamed'})
        refreshed = db.session.get(Gig, gig.id)
        assert refreshed.venue_name == 'Blue Note'
        assert refreshed.internal_notes == 'Promoter pays late'

    def test_timestamp_date_is_truncated(self, gig):
        GigPackService.save_gigpack(gig.id, {'date': '2027-01-05T00:00:00.000Z'})
        assert db.session.get(Gig, gig.id).date == date(2027, 1, 5)

    def test_updated_at_refreshed(self, gig):
        gig.updated_at = datetime(2020, 1, 1)
        db.session.commit()
        GigPackService.save_gigpack(gig.id, {})
        assert db.session.get(Gig, gig.id).updated_at > datetime(2020, 1, 1)

    def test_missing_gig_raises(self, app):
        with pytest.raises(GigNotFoundError):
            GigPackService.save_gigpack(9999, {'title': 'Ghost'})

    def test_update_logs_activity(self, gig, owner):
        GigPackService.save_gigpack(gig.id, {'title': 'Renamed', 'schedule': []}, actor_id=owner.id)
        entry = GigActivityLog.query.filter_by(gig_id=gig.id).one()
        assert entry.activity_type == 'gig_updated'
        assert entry.user_id == owner.id
        assert entry.details == {'fields': ['title']}


class TestCreate:
    """Tests for inserting a new gig."""

    def test_insert_defaults(self, owner):
        gig = GigPackService.save_gigpack(None, {'title': 'New gig'}, is_new=True, owner_id=owner.id)
        assert gig.id is not None
        assert gig.owner_id == owner.id
        assert gig.status == 'confirmed'
        assert gig.created_at is not None

    def test_insert_with_status(self, owner):
        gig = GigPackService.save_gigpack(None, {'title': 'Hold', 'status': 'pending'},
                                          is_new=True, owner_id=owner.id)
        assert gig.status == 'pending'

    def test_insert_with_collections(self, owner):
        data = {'title': 'Full gig', **EDITED_COLLECTIONS,
                'lineup': [{'role': 'Drums', 'musician_name': 'Alice'}]}
        gig = GigPackService.save_gigpack(None, data, is_new=True, owner_id=owner.id)
        pack = GigPackService.get_gigpack(gig.id)
        assert len(pack['schedule']) == 3
        assert pack['lineup'][0]['musician_name'] == 'Alice'
        assert pack['lineup'][0]['invitation_status'] == 'pending'

    def test_insert_logs_creation(self, owner):
        gig = GigPackService.save_gigpack(None, {'title': 'New gig'}, is_new=True, owner_id=owner.id)
        entry = GigActivityLog.query.filter_by(gig_id=gig.id).one()
        assert entry.activity_type == 'gig_created'
        assert entry.user_id == owner.id

    def test_insert_requires_owner(self, app):
        with pytest.raises(ValueError):
            GigPackService.save_gigpack(None, {'title': 'Orphan'}, is_new=True)

    def test_insert_requires_title(self, owner):
        with pytest.raises(ValueError):
            GigPackService.save_gigpack(None, {}, is_new=True, owner_id=owner.id)
        assert Gig.query.count() == 0


class TestReplaceableCollections:
    """Tests for schedule, materials, packing checklist and setlist resync."""

    def test_round_trip_reproduces_values(self, gig):
        GigPackService.save_gigpack(gig.id, dict(EDITED_COLLECTIONS))
        pack = GigPackService.get_gigpack(gig.id)

        assert _strip_ids(pack['schedule']) == EDITED_COLLECTIONS['schedule']
        assert _strip_ids(pack['materials']) == EDITED_COLLECTIONS['materials']
        assert _strip_ids(pack['packing_checklist']) == EDITED_COLLECTIONS['packing_checklist']
        sections = [
            {'name': section['name'], 'songs': _strip_ids(section['songs'])}
            for section in pack['setlist_structured']
        ]
        assert sections == EDITED_COLLECTIONS['setlist_structured']

    def test_sort_order_is_array_index(self, gig):
        GigPackService.save_gigpack(gig.id, {'schedule': EDITED_COLLECTIONS['schedule']})
        items = db.session.get(Gig, gig.id).schedule_items
        assert sorted(item.sort_order for item in items) == [0, 1, 2]

    def test_absent_or_null_collections_untouched(self, gig):
        GigPackService.save_gigpack(gig.id, {'title': 'x', 'materials': None})
        pack = GigPackService.get_gigpack(gig.id)
        assert len(pack['schedule']) == 2
        assert len(pack['materials']) == 1
        assert len(pack['lineup']) == 2

    def test_empty_list_clears_collection(self, gig):
        GigPackService.save_gigpack(gig.id, {'packing_checklist': [], 'setlist_structured': []})
        pack = GigPackService.get_gigpack(gig.id)
        assert pack['packing_checklist'] is None
        assert pack['setlist_structured'] == []

    def test_setlist_items_of_replaced_sections_are_removed(self, gig):
        from app.models.setlist import SetlistItem, SetlistSection
        GigPackService.save_gigpack(gig.id, {'setlist_structured': [{'name': 'Only', 'songs': []}]})
        assert SetlistSection.query.count() == 1
        assert SetlistItem.query.count() == 0


class TestLineupReconciliation:
    """Tests for name-keyed lineup reconciliation."""

    def test_same_role_keeps_row_and_state(self, gig):
        drums_id = _roles(gig.id)[0].id
        GigPackService.save_gigpack(gig.id, {'lineup': [
            {'role': 'Drums', 'musician_name': 'Alice'},
            {'role': 'Bass', 'musician_name': 'Lee Bass'},
        ]})

        drums = db.session.get(GigRole, drums_id)
        assert drums.musician_name == 'Alice'
        assert drums.invitation_status == InvitationStatus.ACCEPTED
        assert float(drums.agreed_fee) == 250.0

    def test_renamed_role_is_replaced(self, gig):
        drums_id = _roles(gig.id)[0].id
        GigPackService.save_gigpack(gig.id, {'lineup': [
            {'role': 'Percussion', 'musician_name': 'Alice'},
            {'role': 'Bass', 'musician_name': 'Lee Bass'},
        ]})

        assert db.session.get(GigRole, drums_id) is None
        percussion = GigRole.query.filter_by(gig_id=gig.id, role_name='Percussion').one()
        assert percussion.invitation_status == InvitationStatus.PENDING
        assert percussion.payment_status == RolePaymentStatus.UNPAID
        assert percussion.musician_name == 'Alice'

    def test_role_match_is_case_sensitive(self, gig):
        drums_id = _roles(gig.id)[0].id
        GigPackService.save_gigpack(gig.id, {'lineup': [{'role': 'drums'}]})
        assert db.session.get(GigRole, drums_id) is None
        assert [role.role_name for role in _roles(gig.id)] == ['drums']

    def test_removed_roles_are_deleted(self, gig):
        GigPackService.save_gigpack(gig.id, {'lineup': [{'role': 'Bass', 'musician_name': 'Lee Bass'}]})
        roles = _roles(gig.id)
        assert [role.role_name for role in roles] == ['Bass']
        assert roles[0].invitation_status == InvitationStatus.INVITED

    def test_reorder_updates_sort_order_only(self, gig):
        before = {role.role_name: role.id for role in _roles(gig.id)}
        GigPackService.save_gigpack(gig.id, {'lineup': [
            {'role': 'Bass', 'musician_name': 'Lee Bass'},
            {'role': 'Drums', 'musician_name': 'Sam Drums'},
        ]})
        roles = _roles(gig.id)
        assert [role.role_name for role in roles] == ['Bass', 'Drums']
        assert {role.role_name: role.id for role in roles} == before

    def test_duplicate_role_names_match_in_fetch_order(self, gig):
        GigPackService.save_gigpack(gig.id, {'lineup': [
            {'role': 'Guitar', 'musician_name': 'First'},
            {'role': 'Guitar', 'musician_name': 'Second'},
        ]})
        first_id, second_id = [role.id for role in _roles(gig.id)]
        db.session.get(GigRole, first_id).invitation_status = InvitationStatus.ACCEPTED
        db.session.commit()

        GigPackService.save_gigpack(gig.id, {'lineup': [{'role': 'Guitar', 'musician_name': 'Only'}]})

        remaining = _roles(gig.id)
        assert [role.id for role in remaining] == [first_id]
        assert remaining[0].musician_name == 'Only'
        assert remaining[0].invitation_status == InvitationStatus.ACCEPTED
        assert db.session.get(GigRole, second_id) is None

    def test_absent_member_keys_leave_values(self, gig):
        drums = _roles(gig.id)[0]
        drums.notes = 'Bring brushes'
        db.session.commit()

        GigPackService.save_gigpack(gig.id, {'lineup': [{'role': 'Drums'}, {'role': 'Bass'}]})
        drums = _roles(gig.id)[0]
        assert drums.musician_name == 'Sam Drums'
        assert drums.notes == 'Bring brushes'

    def test_links_survive_edit(self, gig, drummer, bass_contact):
        GigPackService.save_gigpack(gig.id, {'lineup': [
            {'role': 'Drums', 'musician_name': 'Sam D.'},
            {'role': 'Bass', 'musician_name': 'Lee B.'},
        ]})
        drums, bass = _roles(gig.id)
        assert drums.musician_id == drummer.id
        assert bass.contact_id == bass_contact.id


class TestTransactionModes:
    """Tests for atomic and per-collection commit saves."""

    EDIT = {
        'title': 'Half saved',
        'schedule': [{'time': '12:00', 'label': 'Brunch set'}],
        'lineup': [{'role': 'Trumpet'}],
    }

    def test_atomic_save_rolls_back_everything(self, app, gig):
        app.config['GIGPACK_ATOMIC_SAVE'] = True
        gig_id = gig.id

        with patch.object(GigPackService, '_reconcile_lineup', side_effect=SQLAlchemyError('boom')):
            with pytest.raises(SQLAlchemyError):
                GigPackService.save_gigpack(gig_id, dict(self.EDIT))

        pack = GigPackService.get_gigpack(gig_id)
        assert pack['title'] == 'Friday at the Blue Note'
        assert [item['label'] for item in pack['schedule']] == ['Load in', 'Soundcheck']
        assert [member['role'] for member in pack['lineup']] == ['Drums', 'Bass']

    def test_legacy_save_keeps_earlier_collections(self, app, gig):
        app.config['GIGPACK_ATOMIC_SAVE'] = False
        gig_id = gig.id

        with patch.object(GigPackService, '_reconcile_lineup', side_effect=SQLAlchemyError('boom')):
            with pytest.raises(SQLAlchemyError):
                GigPackService.save_gigpack(gig_id, dict(self.EDIT))

        pack = GigPackService.get_gigpack(gig_id)
        assert pack['title'] == 'Half saved'
        assert [item['label'] for item in pack['schedule']] == ['Brunch set']
        assert [member['role'] for member in pack['lineup']] == ['Drums', 'Bass']

    def test_failed_save_logs_no_activity(self, app, gig):
        with patch.object(GigPackService, '_reconcile_lineup', side_effect=SQLAlchemyError('boom')):
            with pytest.raises(SQLAlchemyError):
                GigPackService.save_gigpack(gig.id, dict(self.EDIT))
        assert GigActivityLog.query.count() == 0
