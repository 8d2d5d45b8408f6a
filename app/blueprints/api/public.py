"""
Public share endpoints: no authentication, rate limited per client address.
"""
from flask import current_app, redirect

from app.blueprints.api import api_bp
from app.blueprints.api.helpers import api_error, api_success
from app.extensions import limiter
from app.services.share_service import ShareService


def _public_share_limit():
    return current_app.config.get('PUBLIC_SHARE_RATE_LIMIT', '60 per minute')


@api_bp.route('/public/gigpacks/<token>', methods=['GET'])
@limiter.limit(_public_share_limit)
def api_public_gigpack(token):
    """Restricted GigPack for a share token.

    Unknown, revoked and expired tokens all answer 404 so tokens cannot be probed.
    """
    gigpack = ShareService.get_public_gigpack(token)
    if gigpack is None:
        return api_error('not_found', 'Share link not found or expired.', 404)
    return api_success(gigpack)


@api_bp.route('/public/gigpacks/<token>/setlist-pdf', methods=['GET'])
@limiter.limit(_public_share_limit)
def api_public_setlist_pdf(token):
    """Redirect to the stored setlist PDF of a shared gig."""
    url = ShareService.get_setlist_pdf_url(token)
    if not url:
        return api_error('not_found', 'Setlist PDF not found.', 404)
    return redirect(url, code=302)
