"""
API v1 Routes: GigPack endpoints for the editor and share management.
"""
from flask import request, current_app
from marshmallow import ValidationError

from app.blueprints.api import api_bp
from app.blueprints.api.decorators import jwt_required
from app.blueprints.api.schemas import GigPackInputSchema, GigPackCreateSchema, ShareCreateSchema
from app.blueprints.api.helpers import api_error, api_success
from app.extensions import db
from app.models.gig import Gig
from app.models.share import GigShare
from app.services.gigpack_service import GigPackService, GigNotFoundError
from app.services.share_service import ShareService


def _load_payload(schema):
    """Validate the JSON body. Returns (data, error_response)."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None, api_error('invalid_json', 'Request body must be a JSON object.', 400)
    try:
        return schema.load(payload), None
    except ValidationError as err:
        return None, api_error('validation_error', 'Invalid GigPack payload.', 422,
                               details=err.messages)


def _owned_gig(gig_id):
    """Fetch a gig the current user owns. Returns (gig, error_response)."""
    gig = db.session.get(Gig, gig_id)
    user = request.api_user
    if gig is None or not gig.can_view(user):
        return None, api_error('not_found', 'Gig not found.', 404)
    if not gig.is_owned_by(user):
        return None, api_error('forbidden', 'Only the gig owner can do this.', 403)
    return gig, None


# ── Current user ────────────────────────────────────────────

@api_bp.route('/auth/me', methods=['GET'])
@jwt_required
def api_me():
    """Get the authenticated profile."""
    return api_success(request.api_user.to_dict())


# ── GigPacks ────────────────────────────────────────────────

@api_bp.route('/gigpacks/<int:gig_id>', methods=['GET'])
@jwt_required
def api_get_gigpack(gig_id):
    """Full GigPack for the owner or a lineup member, with artwork."""
    gig = db.session.get(Gig, gig_id)
    if gig is None or not gig.can_view(request.api_user):
        return api_error('not_found', 'Gig not found.', 404)

    gigpack = GigPackService.get_gigpack(gig_id)
    if gigpack is None:
        return api_error('not_found', 'Gig not found.', 404)

    gigpack['artwork'] = GigPackService.get_artwork(gigpack)
    return api_success(gigpack)


@api_bp.route('/gigpacks', methods=['POST'])
@jwt_required
def api_create_gigpack():
    """Create a gig from a GigPack payload.

    Request body:
        GigPack fields; title is required.

    Returns:
        {"data": {...gig row...}} with 201
    """
    data, error = _load_payload(GigPackCreateSchema())
    if error:
        return error

    owner = request.api_user
    gig = GigPackService.save_gigpack(None, data, is_new=True, owner_id=owner.id, actor_id=owner.id)
    return api_success(gig.to_dict(), 201)


@api_bp.route('/gigpacks/<int:gig_id>', methods=['PUT'])
@jwt_required
def api_update_gigpack(gig_id):
    """Apply an edited GigPack. Collections left out of the payload are not touched."""
    _, error = _owned_gig(gig_id)
    if error:
        return error

    data, error = _load_payload(GigPackInputSchema())
    if error:
        return error

    try:
        gig = GigPackService.save_gigpack(gig_id, data, actor_id=request.api_user.id)
    except GigNotFoundError:
        return api_error('not_found', 'Gig not found.', 404)

    return api_success(gig.to_dict())


@api_bp.route('/gigpacks/<int:gig_id>', methods=['DELETE'])
@jwt_required
def api_delete_gigpack(gig_id):
    """Delete a gig and all its child rows."""
    _, error = _owned_gig(gig_id)
    if error:
        return error

    GigPackService.delete_gigpack(gig_id)
    return api_success({'id': gig_id, 'deleted': True})


@api_bp.route('/gigpacks/<int:gig_id>/duplicate', methods=['GET'])
@jwt_required
def api_duplicate_gigpack(gig_id):
    """Editor draft for a copy of the gig. Nothing is saved."""
    _, error = _owned_gig(gig_id)
    if error:
        return error

    gigpack = GigPackService.get_gigpack(gig_id)
    return api_success(GigPackService.prepare_duplicate(gigpack))


# ── Shares ──────────────────────────────────────────────────

@api_bp.route('/gigpacks/<int:gig_id>/shares', methods=['POST'])
@jwt_required
def api_create_share(gig_id):
    """Issue a public share link.

    Request body (optional):
        {"expires_in_days": 30}
    """
    _, error = _owned_gig(gig_id)
    if error:
        return error

    try:
        data = ShareCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return api_error('validation_error', 'Invalid share payload.', 422, details=err.messages)

    share = ShareService.create_share(gig_id, expires_in_days=data.get('expires_in_days'))
    result = share.to_dict()
    result['url'] = f"{current_app.config.get('APP_URL', '').rstrip('/')}/api/v1/public/gigpacks/{share.token}"
    return api_success(result, 201)


@api_bp.route('/shares/<token>', methods=['DELETE'])
@jwt_required
def api_revoke_share(token):
    """Revoke a share link."""
    share = GigShare.query.filter_by(token=token).first()
    if share is None:
        return api_error('not_found', 'Share not found.', 404)

    _, error = _owned_gig(share.gig_id)
    if error:
        return error

    share = ShareService.revoke_share(token)
    return api_success(share.to_dict())
