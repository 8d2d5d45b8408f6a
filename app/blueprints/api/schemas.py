"""
Marshmallow schemas for API payload validation.
Loads GigPack editor payloads into the dictionaries GigPackService expects.
"""
from datetime import date

from marshmallow import Schema, fields, validate, ValidationError, EXCLUDE

from app.models.gig import GigStatus, MaterialKind


TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'


def validate_iso_date(value):
    """Accept "YYYY-MM-DD" or an ISO timestamp starting with one."""
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError('Not a valid ISO date.')


# ── Shared helpers ──────────────────────────────────────────

class BaseSchema(Schema):
    """Base schema with common config."""
    class Meta:
        unknown = EXCLUDE


def _time(**kwargs):
    return fields.Str(allow_none=True, validate=validate.Regexp(TIME_PATTERN), **kwargs)


def _text(**kwargs):
    return fields.Str(allow_none=True, **kwargs)


# ── Child collections ───────────────────────────────────────

class ScheduleItemSchema(BaseSchema):
    id = fields.Raw(allow_none=True)
    time = _time()
    label = fields.Str(required=True)


class MaterialSchema(BaseSchema):
    id = fields.Raw(allow_none=True)
    label = fields.Str(required=True)
    url = fields.Str(required=True)
    kind = fields.Str(
        allow_none=True,
        validate=validate.OneOf([kind.value for kind in MaterialKind])
    )


class PackingItemSchema(BaseSchema):
    id = fields.Raw(allow_none=True)
    label = fields.Str(required=True)


class SetlistSongSchema(BaseSchema):
    id = fields.Raw(allow_none=True)
    title = fields.Str(required=True)
    artist = _text()
    key = _text()
    tempo = _text()
    notes = _text()
    reference_url = _text()


class SetlistSectionSchema(BaseSchema):
    id = fields.Raw(allow_none=True)
    name = fields.Str(required=True)
    songs = fields.List(fields.Nested(SetlistSongSchema), load_default=list)


class LineupMemberSchema(BaseSchema):
    """Only role, name and notes are editable; other member keys are ignored."""
    role = fields.Str(required=True, validate=validate.Length(min=1))
    musician_name = _text()
    notes = _text()


# ── GigPack ─────────────────────────────────────────────────

class GigPackInputSchema(BaseSchema):
    """
    GigPack editor payload.

    Keys left out of the payload are left out of the loaded dict, so the save
    leaves those fields and collections untouched.
    """
    title = fields.Str(validate=validate.Length(min=1, max=200))
    status = fields.Str(allow_none=True, validate=validate.OneOf([s.value for s in GigStatus]))
    band_name = _text(validate=validate.Length(max=200))
    gig_type = _text(validate=validate.Length(max=50))
    date = _text(validate=validate_iso_date)
    call_time = _time()
    on_stage_time = _time()
    venue_name = _text(validate=validate.Length(max=200))
    venue_address = _text(validate=validate.Length(max=300))
    venue_maps_url = _text(validate=validate.Length(max=500))
    hero_image_url = _text(validate=validate.Length(max=500))
    band_logo_url = _text(validate=validate.Length(max=500))
    accent_color = _text(validate=validate.Length(max=20))
    theme = _text(validate=validate.Length(max=30))
    poster_skin = _text(validate=validate.Length(max=20))
    dress_code = _text()
    backline_notes = _text()
    parking_notes = _text()
    payment_notes = _text()
    notes = _text()
    internal_notes = _text()
    setlist = _text()
    setlist_pdf_url = _text(validate=validate.Length(max=500))

    schedule = fields.List(fields.Nested(ScheduleItemSchema), allow_none=True)
    materials = fields.List(fields.Nested(MaterialSchema), allow_none=True)
    packing_checklist = fields.List(fields.Nested(PackingItemSchema), allow_none=True)
    setlist_structured = fields.List(fields.Nested(SetlistSectionSchema), allow_none=True)
    lineup = fields.List(fields.Nested(LineupMemberSchema), allow_none=True)


class GigPackCreateSchema(GigPackInputSchema):
    """A new gig needs a title."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))


class ShareCreateSchema(BaseSchema):
    expires_in_days = fields.Int(allow_none=True, validate=validate.Range(min=1, max=365))
