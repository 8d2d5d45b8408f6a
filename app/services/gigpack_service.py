"""
GigPack service.
Assembles the nested GigPack document from a gig's relational rows and applies
edited documents back onto those rows.
"""
from datetime import datetime, date
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import select
from sqlalchemy.orm import joinedload, selectinload

from app.extensions import db
from app.models.activity import ActivityType, GigActivityLog
from app.models.gig import (
    Gig, GigStatus, GigScheduleItem, GigMaterial, GigPackingItem, MaterialKind
)
from app.models.lineup import GigRole, InvitationStatus
from app.models.profile import Profile
from app.models.setlist import SetlistSection, SetlistItem
from app.services.activity_service import ActivityService
from app.utils.gigpack_transforms import (
    append_end_time,
    collect_profile_lookups,
    first_present,
    format_time,
    resolve_setlist_text,
    schedule_from_notes,
    transform_contacts,
    transform_lineup,
    transform_materials,
    transform_packing_checklist,
    transform_schedule_items,
    transform_setlist_structured,
)
from app.utils.visual_theme import resolve_artwork


class GigNotFoundError(ValueError):
    """Raised when an edit targets a gig that does not exist."""


# Gig columns writable from a GigPack document
SCALAR_FIELDS = (
    'title', 'status', 'band_name', 'gig_type',
    'date', 'call_time', 'on_stage_time',
    'venue_name', 'venue_address', 'venue_maps_url',
    'hero_image_url', 'band_logo_url', 'accent_color', 'theme', 'poster_skin',
    'dress_code', 'backline_notes', 'parking_notes', 'payment_notes',
    'notes', 'internal_notes',
    'setlist', 'setlist_pdf_url',
)


def _coerce_date(value):
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class GigPackService:
    """Service for reading and saving GigPack documents."""

    # ── Read side ───────────────────────────────────────────

    @staticmethod
    def load_gig(gig_id: int) -> Optional[Gig]:
        """Load a gig with every child collection eagerly loaded."""
        return (
            Gig.query
            .options(
                joinedload(Gig.owner),
                selectinload(Gig.schedule_items),
                selectinload(Gig.materials),
                selectinload(Gig.packing_items),
                selectinload(Gig.contacts),
                selectinload(Gig.shares),
                selectinload(Gig.roles).joinedload(GigRole.contact),
                selectinload(Gig.setlist_sections).selectinload(SetlistSection.items),
            )
            .filter(Gig.id == gig_id)
            .first()
        )

    @staticmethod
    def fetch_profiles(roles: List[GigRole]) -> Tuple[Dict[int, Profile], Dict[str, Profile]]:
        """
        Resolve musician profiles for a lineup with at most two queries.

        Returns:
            (profiles keyed by id, profiles keyed by exact name)
        """
        musician_ids, unlinked_names = collect_profile_lookups(roles)
        profiles_by_id = {}
        profiles_by_name = {}

        if musician_ids:
            profiles = Profile.query.filter(Profile.id.in_(musician_ids)).all()
            for profile in profiles:
                profiles_by_id[profile.id] = profile

        if unlinked_names:
            profiles = (
                Profile.query
                .filter(Profile.name.in_(unlinked_names))
                .order_by(Profile.id)
                .all()
            )
            for profile in profiles:
                if profile.name:
                    profiles_by_name.setdefault(profile.name, profile)

        return profiles_by_id, profiles_by_name

    @staticmethod
    def build_gigpack(gig: Gig) -> Dict[str, Any]:
        """
        Transform a loaded gig into a GigPack document.

        Args:
            gig: Gig with children loaded (see load_gig)

        Returns:
            GigPack dictionary
        """
        schedule = transform_schedule_items(gig.schedule_items)
        if not schedule:
            schedule = schedule_from_notes(gig.schedule_notes)
        if gig.is_external and gig.end_time:
            append_end_time(schedule, gig.end_time)

        profiles_by_id, profiles_by_name = GigPackService.fetch_profiles(gig.roles)
        lineup = transform_lineup(gig.roles, profiles_by_id, profiles_by_name)

        setlist_structured = transform_setlist_structured(gig.setlist_sections)
        materials = transform_materials(gig.materials)
        packing_checklist = transform_packing_checklist(gig.packing_items)
        contacts = transform_contacts(gig.contacts, gig_id=gig.id)

        share = next((s for s in gig.shares if s.is_usable()), None)

        return {
            'id': gig.id,
            'owner_id': gig.owner_id,
            'owner_name': gig.owner.name if gig.owner else None,
            'title': gig.title,
            'status': gig.status,
            'band_name': gig.band_name,
            'date': gig.date.isoformat() if gig.date else None,
            'call_time': first_present(gig.call_time, format_time(gig.start_time)),
            'on_stage_time': gig.on_stage_time,
            'venue_name': first_present(gig.venue_name, gig.location_name),
            'venue_address': first_present(gig.venue_address, gig.location_address),
            'venue_maps_url': gig.venue_maps_url,
            'hero_image_url': first_present(gig.hero_image_url, gig.cover_image_path),
            'band_logo_url': gig.band_logo_url,
            'accent_color': gig.accent_color,
            'theme': gig.theme or 'minimal',
            'poster_skin': gig.poster_skin or 'clean',
            'gig_type': gig.gig_type,
            'dress_code': gig.dress_code,
            'backline_notes': gig.backline_notes,
            'parking_notes': gig.parking_notes,
            'payment_notes': gig.payment_notes,
            'notes': gig.notes,
            'internal_notes': gig.internal_notes,
            'setlist': resolve_setlist_text(gig.setlist, setlist_structured),
            'setlist_pdf_url': gig.setlist_pdf_url,
            'setlist_structured': setlist_structured,
            'schedule': schedule or None,
            'lineup': lineup or None,
            'materials': materials or None,
            'packing_checklist': packing_checklist or None,
            'contacts': contacts or None,
            'public_slug': share.token if share else str(gig.id),
            'is_archived': gig.is_archived,
            'is_external': bool(gig.is_external),
            'external_event_url': gig.external_event_url,
            'schedule_notes': gig.schedule_notes,
            'created_at': gig.created_at.isoformat() if gig.created_at else None,
            'updated_at': gig.updated_at.isoformat() if gig.updated_at else None,
        }

    @staticmethod
    def get_gigpack(gig_id: int) -> Optional[Dict[str, Any]]:
        """
        Aggregate a gig into its GigPack document.

        Returns None when the gig does not exist. Store errors propagate.
        """
        gig = GigPackService.load_gig(gig_id)
        if gig is None:
            return None
        return GigPackService.build_gigpack(gig)

    @staticmethod
    def get_artwork(gigpack: Dict[str, Any]) -> Dict[str, Any]:
        """Visual theme and hero/fallback image for a GigPack."""
        return resolve_artwork(gigpack, base=current_app.config.get('GIG_FALLBACK_IMAGE_BASE', '/gig-fallbacks'))

    # ── Write side ──────────────────────────────────────────

    @staticmethod
    def save_gigpack(gig_id: Optional[int], data: Dict[str, Any], is_new: bool = False,
                     owner_id: Optional[int] = None, actor_id: Optional[int] = None) -> Gig:
        """
        Persist an edited GigPack.

        Scalar fields present in data are written to the gig row. Every child
        collection present in data (and not None) is resynced: schedule,
        materials, packing checklist and setlist are replaced; lineup roles are
        reconciled by role name so invitation and payment state survive.

        With GIGPACK_ATOMIC_SAVE the whole save is one transaction. Without it
        each collection is committed on its own and a failure leaves earlier
        collections applied.

        Args:
            gig_id: Gig to update (ignored when is_new)
            data: GigPack-shaped payload
            is_new: Insert a new gig instead of updating
            owner_id: Owner of a new gig
            actor_id: Profile performing the save, for the activity feed

        Returns:
            The reloaded Gig row

        Raises:
            GigNotFoundError: If gig_id does not exist
            ValueError: If a new gig lacks an owner or a title
        """
        atomic = current_app.config.get('GIGPACK_ATOMIC_SAVE', True)

        try:
            gig = GigPackService._save_gig_row(gig_id, data, is_new, owner_id)
            GigPackService._checkpoint(atomic)
            gig_id = gig.id

            for key, step in GigPackService._collection_steps():
                items = data.get(key)
                if items is None:
                    continue
                step(gig_id, items)
                GigPackService._checkpoint(atomic)

            if atomic:
                db.session.commit()
        except Exception:
            db.session.rollback()
            current_app.logger.error(
                f'GigPack save failed for gig {gig_id} (atomic={atomic})', exc_info=True
            )
            raise

        current_app.logger.info(f'GigPack saved for gig {gig_id} (new={is_new})')

        if is_new:
            ActivityService.log(gig_id, ActivityType.GIG_CREATED, 'Gig created',
                                user_id=actor_id or owner_id)
        else:
            ActivityService.log(gig_id, ActivityType.GIG_UPDATED, 'Gig updated',
                                user_id=actor_id,
                                details={'fields': sorted(k for k in data if k in SCALAR_FIELDS)})

        return db.session.get(Gig, gig_id)

    @staticmethod
    def _checkpoint(atomic: bool):
        if atomic:
            db.session.flush()
        else:
            db.session.commit()

    @staticmethod
    def _collection_steps() -> List[Tuple[str, Callable[[int, List[Dict[str, Any]]], Any]]]:
        return [
            ('schedule', GigPackService._replace_schedule),
            ('materials', GigPackService._replace_materials),
            ('packing_checklist', GigPackService._replace_packing_items),
            ('setlist_structured', GigPackService._replace_setlist),
            ('lineup', GigPackService._reconcile_lineup),
        ]

    @staticmethod
    def _save_gig_row(gig_id, data, is_new, owner_id) -> Gig:
        if is_new:
            if owner_id is None:
                raise ValueError('A new gig needs an owner')
            if not data.get('title'):
                raise ValueError('A new gig needs a title')
            gig = Gig(
                owner_id=owner_id,
                status=GigStatus.CONFIRMED.value,
                created_at=datetime.utcnow(),
            )
            db.session.add(gig)
        else:
            gig = db.session.get(Gig, gig_id)
            if gig is None:
                raise GigNotFoundError(f'Gig {gig_id} not found')

        for field in SCALAR_FIELDS:
            if field not in data:
                continue
            value = data[field]
            if field == 'date':
                value = _coerce_date(value)
            setattr(gig, field, value)

        gig.updated_at = datetime.utcnow()
        return gig

    @staticmethod
    def _replace_schedule(gig_id: int, items: List[Dict[str, Any]]):
        GigScheduleItem.query.filter_by(gig_id=gig_id).delete()
        db.session.add_all([
            GigScheduleItem(
                gig_id=gig_id,
                time=item.get('time') or None,
                label=item.get('label') or '',
                sort_order=index,
            )
            for index, item in enumerate(items)
        ])

    @staticmethod
    def _replace_materials(gig_id: int, items: List[Dict[str, Any]]):
        GigMaterial.query.filter_by(gig_id=gig_id).delete()
        db.session.add_all([
            GigMaterial(
                gig_id=gig_id,
                label=item.get('label') or '',
                url=item.get('url') or '',
                kind=MaterialKind(item.get('kind') or MaterialKind.OTHER.value),
                sort_order=index,
            )
            for index, item in enumerate(items)
        ])

    @staticmethod
    def _replace_packing_items(gig_id: int, items: List[Dict[str, Any]]):
        GigPackingItem.query.filter_by(gig_id=gig_id).delete()
        db.session.add_all([
            GigPackingItem(gig_id=gig_id, label=item.get('label') or '', sort_order=index)
            for index, item in enumerate(items)
        ])

    @staticmethod
    def _replace_setlist(gig_id: int, sections: List[Dict[str, Any]]):
        # Songs first: bulk deletes bypass ORM cascades
        section_ids = select(SetlistSection.id).where(SetlistSection.gig_id == gig_id)
        SetlistItem.query.filter(SetlistItem.section_id.in_(section_ids)).delete()
        SetlistSection.query.filter_by(gig_id=gig_id).delete()

        for section_index, section in enumerate(sections):
            new_section = SetlistSection(
                gig_id=gig_id,
                name=section.get('name') or '',
                sort_order=section_index,
            )
            for song_index, song in enumerate(section.get('songs') or []):
                new_section.items.append(SetlistItem(
                    title=song.get('title') or '',
                    artist=song.get('artist') or None,
                    key=song.get('key') or None,
                    tempo=song.get('tempo') or None,
                    notes=song.get('notes') or None,
                    reference_url=song.get('reference_url') or None,
                    sort_order=song_index,
                ))
            db.session.add(new_section)

    @staticmethod
    def _reconcile_lineup(gig_id: int, members: List[Dict[str, Any]]) -> Dict[str, int]:
        """
        Apply an edited lineup onto existing role rows.

        Each incoming member takes the first not-yet-matched row with exactly the
        same role name (fetch order). A match only gets its display fields and
        position updated; invitation, payment and musician/contact links stay.
        Members without a match become new pending roles. Rows left unmatched
        were removed in the editor and are deleted.

        Renaming a role therefore looks like remove + add and resets that slot.
        """
        existing = (
            GigRole.query
            .filter_by(gig_id=gig_id)
            .order_by(GigRole.id)
            .all()
        )
        consumed = set()
        inserted = 0

        for index, member in enumerate(members):
            role_name = member.get('role')
            match = next(
                (row for row in existing if row.id not in consumed and row.role_name == role_name),
                None
            )
            if match is not None:
                # Absent keys leave the stored value alone
                if 'musician_name' in member:
                    match.musician_name = member['musician_name']
                if 'notes' in member:
                    match.notes = member['notes']
                match.sort_order = index
                consumed.add(match.id)
            else:
                db.session.add(GigRole(
                    gig_id=gig_id,
                    role_name=role_name,
                    musician_name=member.get('musician_name'),
                    notes=member.get('notes'),
                    sort_order=index,
                    invitation_status=InvitationStatus.PENDING,
                ))
                inserted += 1

        removed = [row for row in existing if row.id not in consumed]
        for row in removed:
            db.session.delete(row)

        summary = {'updated': len(consumed), 'inserted': inserted, 'deleted': len(removed)}
        current_app.logger.debug(f'Lineup reconciled for gig {gig_id}: {summary}')
        return summary

    # ── Other operations ────────────────────────────────────

    @staticmethod
    def delete_gigpack(gig_id: int) -> bool:
        """
        Delete a gig with all its child rows.

        Returns:
            False if the gig did not exist
        """
        gig = db.session.get(Gig, gig_id)
        if gig is None:
            return False
        GigActivityLog.query.filter_by(gig_id=gig_id).delete()
        db.session.delete(gig)
        db.session.commit()
        current_app.logger.info(f'Gig {gig_id} deleted')
        return True

    @staticmethod
    def prepare_duplicate(gigpack: Dict[str, Any]) -> Dict[str, Any]:
        """
        Build an editor draft for a copy of a gig.

        Lineup keeps role, musician and contact links but loses the role row id
        and invitation status. Child items lose their ids so saving creates new
        rows. Identity, ownership, sharing and activity are not copied.
        """
        def without_id(item):
            return {**item, 'id': None}

        lineup = gigpack.get('lineup')
        setlist_structured = gigpack.get('setlist_structured')
        return {
            'title': f"Copy of {gigpack.get('title') or ''}",
            'band_name': gigpack.get('band_name'),
            'date': gigpack['date'][:10] if gigpack.get('date') else None,
            'call_time': gigpack.get('call_time'),
            'on_stage_time': gigpack.get('on_stage_time'),
            'venue_name': gigpack.get('venue_name'),
            'venue_address': gigpack.get('venue_address'),
            'venue_maps_url': gigpack.get('venue_maps_url'),
            'dress_code': gigpack.get('dress_code'),
            'backline_notes': gigpack.get('backline_notes'),
            'parking_notes': gigpack.get('parking_notes'),
            'payment_notes': gigpack.get('payment_notes'),
            'internal_notes': gigpack.get('internal_notes'),
            'gig_type': gigpack.get('gig_type'),
            'theme': gigpack.get('theme'),
            'setlist': gigpack.get('setlist'),
            'setlist_pdf_url': gigpack.get('setlist_pdf_url'),
            'band_logo_url': gigpack.get('band_logo_url'),
            'hero_image_url': gigpack.get('hero_image_url'),
            'accent_color': gigpack.get('accent_color'),
            'poster_skin': gigpack.get('poster_skin'),
            'lineup': [
                {**member, 'role_id': None, 'invitation_status': None}
                for member in lineup
            ] if lineup is not None else None,
            'setlist_structured': [
                {**without_id(section), 'songs': [without_id(song) for song in section.get('songs') or []]}
                for section in setlist_structured
            ] if setlist_structured is not None else None,
            'schedule': [without_id(item) for item in gigpack['schedule']]
            if gigpack.get('schedule') is not None else None,
            'materials': [without_id(item) for item in gigpack['materials']]
            if gigpack.get('materials') is not None else None,
            'packing_checklist': [without_id(item) for item in gigpack['packing_checklist']]
            if gigpack.get('packing_checklist') is not None else None,
        }
