# =============================================================================
# GigPack - Row Transform Tests
# =============================================================================

from datetime import time
from types import SimpleNamespace

from app.utils.gigpack_transforms import (
    sort_by_sort_order,
    first_present,
    format_time,
    transform_schedule_items,
    schedule_from_notes,
    append_end_time,
    transform_materials,
    transform_setlist_structured,
    format_setlist_line,
    synthesize_setlist_text,
    resolve_setlist_text,
    collect_profile_lookups,
    transform_lineup,
)


def row(**kwargs):
    return SimpleNamespace(**kwargs)


def role_row(**kwargs):
    fields = {
        'id': 1, 'role_name': 'Drums', 'musician_name': None, 'musician_id': None,
        'contact_id': None, 'contact': None, 'invitation_status': None,
        'agreed_fee': None, 'notes': None, 'sort_order': 0,
    }
    fields.update(kwargs)
    return SimpleNamespace(**fields)


class TestSortBySortOrder:
    """Tests for sort_by_sort_order()."""

    def test_sorts_ascending(self):
        rows = [row(id=1, sort_order=2), row(id=2, sort_order=0), row(id=3, sort_order=1)]
        assert [r.id for r in sort_by_sort_order(rows)] == [2, 3, 1]

    def test_null_counts_as_zero_and_keeps_fetch_order(self):
        rows = [row(id=1, sort_order=1), row(id=2, sort_order=None), row(id=3, sort_order=0)]
        assert [r.id for r in sort_by_sort_order(rows)] == [2, 3, 1]

    def test_equal_keys_keep_fetch_order(self):
        rows = [row(id=5, sort_order=0), row(id=3, sort_order=0), row(id=4, sort_order=0)]
        assert [r.id for r in sort_by_sort_order(rows)] == [5, 3, 4]

    def test_empty(self):
        assert sort_by_sort_order([]) == []


class TestSmallHelpers:

    def test_first_present_skips_empty_strings(self):
        assert first_present(None, '', 'venue') == 'venue'

    def test_first_present_all_empty(self):
        assert first_present(None, '') is None

    def test_format_time_from_time(self):
        assert format_time(time(19, 5)) == '19:05'

    def test_format_time_from_string(self):
        assert format_time('19:05:00') == '19:05'

    def test_format_time_none(self):
        assert format_time(None) is None


class TestSchedule:
    """Tests for schedule transforms."""

    def test_schedule_keeps_null_times(self):
        rows = [row(id=1, time=None, label='Doors', sort_order=1), row(id=2, time='18:00', label='Load in', sort_order=0)]
        assert transform_schedule_items(rows) == [
            {'id': 2, 'time': '18:00', 'label': 'Load in'},
            {'id': 1, 'time': None, 'label': 'Doors'},
        ]

    def test_schedule_from_notes(self):
        notes = [{'time': '20:00', 'label': 'Set 1'}, {'label': 'Encore'}, 'garbage']
        assert schedule_from_notes(notes) == [
            {'id': 'sn-0', 'time': '20:00', 'label': 'Set 1'},
            {'id': 'sn-1', 'time': None, 'label': 'Encore'},
        ]

    def test_schedule_from_notes_not_a_list(self):
        assert schedule_from_notes(None) == []
        assert schedule_from_notes({'time': '20:00'}) == []

    def test_append_end_time(self):
        schedule = [{'id': 1, 'time': '20:00', 'label': 'Set'}]
        append_end_time(schedule, time(23, 0))
        assert schedule[-1] == {'id': 'end-time', 'time': '23:00', 'label': 'End'}

    def test_append_end_time_skips_existing_time(self):
        schedule = [{'id': 1, 'time': '23:00', 'label': 'Curfew'}]
        append_end_time(schedule, time(23, 0))
        assert len(schedule) == 1


class TestMaterials:

    def test_kind_defaults_to_other(self):
        rows = [row(id=1, label='Chart', url='https://x/chart.pdf', kind=None, sort_order=0)]
        assert transform_materials(rows)[0]['kind'] == 'other'


class TestSetlist:
    """Tests for setlist transforms and flat text synthesis."""

    def test_structured_orders_sections_and_songs(self):
        sections = [
            row(id=2, name='Set 2', sort_order=1, items=[row(id=20, title='C', artist=None, key=None,
                                                             tempo=None, notes=None, reference_url=None,
                                                             sort_order=0)]),
            row(id=1, name='Set 1', sort_order=0, items=[
                row(id=11, title='B', artist='', key=None, tempo=None, notes=None, reference_url=None, sort_order=1),
                row(id=10, title='A', artist='X', key='G', tempo='120', notes=None, reference_url=None, sort_order=0),
            ]),
        ]
        result = transform_setlist_structured(sections)
        assert [s['name'] for s in result] == ['Set 1', 'Set 2']
        assert [song['title'] for song in result[0]['songs']] == ['A', 'B']
        assert result[0]['songs'][1]['artist'] is None

    def test_format_line_full(self):
        song = {'title': 'So What', 'artist': 'Miles Davis', 'key': 'Dm', 'tempo': '136'}
        assert format_setlist_line(song) == 'So What - Miles Davis | Dm 136 BPM'

    def test_format_line_synthesizes_single_song_exactly(self):
        sections = [{'songs': [{'title': 'A', 'artist': 'B', 'key': 'C', 'tempo': '100'}]}]
        assert synthesize_setlist_text(sections) == 'A - B | C 100 BPM'

    def test_format_line_title_only(self):
        assert format_setlist_line({'title': 'Blue in Green'}) == 'Blue in Green'

    def test_format_line_tempo_without_key(self):
        assert format_setlist_line({'title': 'Tune', 'tempo': '90'}) == 'Tune 90 BPM'

    def test_synthesize_joins_sections_in_order(self):
        sections = [
            {'name': 'Set 1', 'songs': [{'title': 'A'}, {'title': 'B', 'artist': 'X'}]},
            {'name': 'Set 2', 'songs': [{'title': 'C', 'key': 'F'}]},
        ]
        assert synthesize_setlist_text(sections) == 'A\nB - X\nC | F'

    def test_synthesize_empty_sections_is_none(self):
        assert synthesize_setlist_text([{'name': 'Set 1', 'songs': []}]) is None

    def test_flat_text_wins(self):
        sections = [{'name': 'Set 1', 'songs': [{'title': 'A'}]}]
        assert resolve_setlist_text('Hand typed', sections) == 'Hand typed'

    def test_flat_text_synthesized_when_empty(self):
        sections = [{'name': 'Set 1', 'songs': [{'title': 'A'}]}]
        assert resolve_setlist_text('', sections) == 'A'

    def test_no_text_no_sections(self):
        assert resolve_setlist_text(None, []) is None


class TestLineup:
    """Tests for lineup member resolution."""

    def test_collect_profile_lookups(self):
        roles = [
            role_row(id=1, musician_id=7, musician_name='Sam'),
            role_row(id=2, musician_id=7),
            role_row(id=3, musician_name='Kim'),
            role_row(id=4, musician_name='Lee', contact_id=3),
            role_row(id=5),
        ]
        assert collect_profile_lookups(roles) == ([7], ['Kim'])

    def test_profile_by_id_wins_over_contact(self):
        profile = row(email='sam@example.com', phone=None, avatar_url='a.png')
        contact = row(email='old@example.com', phone='555')
        roles = [role_row(musician_id=7, contact_id=3, contact=contact)]
        member = transform_lineup(roles, {7: profile}, {})[0]
        assert member['email'] == 'sam@example.com'
        assert member['phone'] == '555'
        assert member['avatar_url'] == 'a.png'

    def test_contact_fallback(self):
        contact = row(email='lee@example.com', phone='555')
        roles = [role_row(musician_name='Lee', contact_id=3, contact=contact)]
        member = transform_lineup(roles, {}, {'Lee': row(email='wrong@example.com', phone=None, avatar_url=None)})[0]
        assert member['email'] == 'lee@example.com'
        assert member['avatar_url'] is None

    def test_name_match_for_unlinked_role(self):
        profile = row(email='kim@example.com', phone='+1', avatar_url=None)
        roles = [role_row(musician_name='Kim')]
        member = transform_lineup(roles, {}, {'Kim': profile})[0]
        assert member['email'] == 'kim@example.com'
        assert member['phone'] == '+1'

    def test_unresolved_member_has_null_contact_fields(self):
        member = transform_lineup([role_row(musician_name='Nobody')], {}, {})[0]
        assert member['email'] is None
        assert member['phone'] is None
        assert member['avatar_url'] is None

    def test_member_shape(self):
        member = transform_lineup([role_row(id=9, agreed_fee=200)], {}, {})[0]
        assert member['role'] == 'Drums'
        assert member['role_id'] == 9
        assert member['agreed_fee'] == 200.0
