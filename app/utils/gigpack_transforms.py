"""
Row-to-document transforms for the GigPack view.

Pure functions: they take loaded model rows (or any objects with the same
attributes) and return JSON-safe dictionaries. Store access lives in
app.services.gigpack_service.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


def sort_by_sort_order(rows: Iterable[Any]) -> List[Any]:
    """
    Order child rows by ascending sort_order.

    A missing or null sort_order counts as 0. Python's sort is stable, so rows
    with equal keys keep their fetch order.
    """
    return sorted(rows, key=lambda row: getattr(row, 'sort_order', None) or 0)


def first_present(*values):
    """Return the first value that is neither None nor empty."""
    for value in values:
        if value is not None and value != '':
            return value
    return None


def _enum_value(value, default=None):
    if value is None:
        return default
    return getattr(value, 'value', value)


def format_time(value) -> Optional[str]:
    """Render a time column as "HH:MM"."""
    if value is None:
        return None
    if isinstance(value, str):
        return value[:5]
    return value.strftime('%H:%M')


# ── Schedule ────────────────────────────────────────────────

def transform_schedule_items(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {'id': item.id, 'time': item.time, 'label': item.label}
        for item in sort_by_sort_order(rows)
    ]


def schedule_from_notes(schedule_notes) -> List[Dict[str, Any]]:
    """Build schedule entries from the schedule_notes JSON of imported gigs."""
    if not isinstance(schedule_notes, list):
        return []
    schedule = []
    for index, note in enumerate(schedule_notes):
        if not isinstance(note, dict):
            continue
        schedule.append({
            'id': f'sn-{index}',
            'time': note.get('time') or None,
            'label': note.get('label'),
        })
    return schedule


def append_end_time(schedule: List[Dict[str, Any]], end_time) -> List[Dict[str, Any]]:
    """Append an "End" entry unless the schedule already has that time."""
    end = format_time(end_time)
    if end and not any(item.get('time') == end for item in schedule):
        schedule.append({'id': 'end-time', 'time': end, 'label': 'End'})
    return schedule


# ── Materials / packing / contacts ──────────────────────────

def transform_materials(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            'id': material.id,
            'label': material.label,
            'url': material.url,
            'kind': _enum_value(material.kind, 'other'),
        }
        for material in sort_by_sort_order(rows)
    ]


def transform_packing_checklist(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {'id': item.id, 'label': item.label}
        for item in sort_by_sort_order(rows)
    ]


def transform_contacts(rows: Iterable[Any], gig_id=None) -> List[Dict[str, Any]]:
    return [
        {
            'id': contact.id,
            'gig_id': gig_id,
            'label': contact.label,
            'name': contact.name,
            'phone': contact.phone,
            'email': contact.email,
            'source_type': _enum_value(contact.source_type, 'manual'),
            'source_id': contact.source_id,
            'sort_order': contact.sort_order or 0,
        }
        for contact in sort_by_sort_order(rows)
    ]


# ── Setlist ─────────────────────────────────────────────────

def transform_setlist_structured(sections: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            'id': section.id,
            'name': section.name,
            'songs': [
                {
                    'id': item.id,
                    'title': item.title,
                    'artist': item.artist or None,
                    'key': item.key or None,
                    'tempo': item.tempo or None,
                    'notes': item.notes or None,
                    'reference_url': item.reference_url or None,
                }
                for item in sort_by_sort_order(section.items or [])
            ],
        }
        for section in sort_by_sort_order(sections)
    ]


def format_setlist_line(song: Dict[str, Any]) -> str:
    """Render one song as "Title[ - Artist][ | Key][ Tempo BPM]"."""
    line = song.get('title') or ''
    if song.get('artist'):
        line += f" - {song['artist']}"
    if song.get('key'):
        line += f" | {song['key']}"
    if song.get('tempo'):
        line += f" {song['tempo']} BPM"
    return line


def synthesize_setlist_text(sections: Optional[Sequence[Dict[str, Any]]]) -> Optional[str]:
    """Flatten a structured setlist to one line per song, section by section."""
    lines = [
        format_setlist_line(song)
        for section in sections or []
        for song in section.get('songs') or []
    ]
    return '\n'.join(lines) or None


def resolve_setlist_text(flat_text: Optional[str],
                         sections: Optional[Sequence[Dict[str, Any]]]) -> Optional[str]:
    """
    Stored flat text wins. Only when it is empty and a structured setlist
    exists is the text synthesized from the structure.
    """
    if flat_text:
        return flat_text
    if sections:
        return synthesize_setlist_text(sections)
    return None


# ── Lineup ──────────────────────────────────────────────────

def collect_profile_lookups(roles: Iterable[Any]) -> Tuple[List[Any], List[str]]:
    """
    Split lineup roles into the two batched profile lookups.

    Returns:
        (musician ids to fetch by id,
         musician names of roles linked to neither a profile nor a contact)
    """
    musician_ids = []
    unlinked_names = []
    for role in roles:
        if role.musician_id:
            if role.musician_id not in musician_ids:
                musician_ids.append(role.musician_id)
        elif not role.contact_id and role.musician_name:
            if role.musician_name not in unlinked_names:
                unlinked_names.append(role.musician_name)
    return musician_ids, unlinked_names


def _match_profile(role, profiles_by_id, profiles_by_name):
    if role.musician_id:
        return profiles_by_id.get(role.musician_id)
    if not role.contact_id and role.musician_name:
        return profiles_by_name.get(role.musician_name)
    return None


def transform_lineup(roles: Iterable[Any],
                     profiles_by_id: Dict[Any, Any],
                     profiles_by_name: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Build lineup members with contact details resolved per role:
    id-matched profile, else name-matched profile, else the attached contact.
    """
    lineup = []
    for role in sort_by_sort_order(roles):
        profile = _match_profile(role, profiles_by_id, profiles_by_name)
        contact = role.contact
        lineup.append({
            'role': role.role_name,
            'musician_name': role.musician_name or None,
            'notes': role.notes or None,
            'role_id': role.id,
            'invitation_status': _enum_value(role.invitation_status),
            'musician_id': role.musician_id,
            'contact_id': role.contact_id,
            'agreed_fee': float(role.agreed_fee) if role.agreed_fee is not None else None,
            'email': first_present(
                profile.email if profile else None,
                contact.email if contact else None,
            ),
            'phone': first_present(
                profile.phone if profile else None,
                contact.phone if contact else None,
            ),
            'avatar_url': (profile.avatar_url or None) if profile else None,
        })
    return lineup
