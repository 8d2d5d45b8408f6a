"""
Share service for GigPack.
Issues and revokes share tokens and builds the restricted public view.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models.gig import Gig
from app.models.share import GigShare
from app.services.activity_service import ActivityService
from app.services.gigpack_service import GigPackService, GigNotFoundError


# Fields that never leave the manager's view
PRIVATE_FIELDS = (
    'internal_notes', 'owner_id', 'owner_name', 'contacts', 'payment_notes',
    'notes', 'schedule_notes',
)

# Lineup keys visible to share holders
PUBLIC_LINEUP_KEYS = (
    'role', 'musician_name', 'notes', 'invitation_status',
    'email', 'phone', 'avatar_url',
)


class ShareService:
    """Service for public share links."""

    @staticmethod
    def resolve_share(token: Optional[str]) -> Optional[GigShare]:
        """Return the share for a token if it is active and not expired."""
        if not token:
            return None
        share = GigShare.query.filter_by(token=token).first()
        if share is None or not share.is_usable():
            return None
        return share

    @staticmethod
    def project_public(gigpack: Dict[str, Any], token: str) -> Dict[str, Any]:
        """
        Strip manager-only data from a GigPack.

        Args:
            gigpack: Full GigPack document
            token: Share token the view is served under

        Returns:
            Restricted GigPack
        """
        public = {key: value for key, value in gigpack.items() if key not in PRIVATE_FIELDS}
        if gigpack.get('lineup') is not None:
            public['lineup'] = [
                {key: member.get(key) for key in PUBLIC_LINEUP_KEYS}
                for member in gigpack['lineup']
            ]
        if gigpack.get('setlist_pdf_url'):
            public['setlist_pdf_url'] = f'/api/v1/public/gigpacks/{token}/setlist-pdf'
        public['public_slug'] = token
        return public

    @staticmethod
    def get_public_gigpack(token: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Resolve a share token to the restricted GigPack.

        Returns None for an unknown, revoked or expired token. Activity entries
        are attached best-effort: a failure yields an empty list.
        """
        share = ShareService.resolve_share(token)
        if share is None:
            current_app.logger.debug('Public GigPack requested with unusable token')
            return None

        gigpack = GigPackService.get_gigpack(share.gig_id)
        if gigpack is None:
            return None

        public = ShareService.project_public(gigpack, share.token)

        limit = current_app.config.get('PUBLIC_ACTIVITY_LIMIT', 10)
        try:
            public['activity'] = ActivityService.recent_for_gig(share.gig_id, limit=limit)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(f'Activity feed unavailable for gig {share.gig_id}: {e}')
            public['activity'] = []

        return public

    @staticmethod
    def get_setlist_pdf_url(token: Optional[str]) -> Optional[str]:
        """Stored setlist PDF location for a usable share, if any."""
        share = ShareService.resolve_share(token)
        if share is None:
            return None
        gig = db.session.get(Gig, share.gig_id)
        return gig.setlist_pdf_url if gig else None

    @staticmethod
    def create_share(gig_id: int, expires_in_days: Optional[int] = None) -> GigShare:
        """
        Issue a new share token for a gig.

        Raises:
            GigNotFoundError: If the gig does not exist
        """
        if db.session.get(Gig, gig_id) is None:
            raise GigNotFoundError(f'Gig {gig_id} not found')

        share = GigShare(gig_id=gig_id, is_active=True)
        if expires_in_days:
            share.expires_at = datetime.utcnow() + timedelta(days=expires_in_days)
        db.session.add(share)
        db.session.commit()

        current_app.logger.info(f'Share created for gig {gig_id}')
        return share

    @staticmethod
    def revoke_share(token: str) -> Optional[GigShare]:
        """Deactivate a share token. Returns None if it does not exist."""
        share = GigShare.query.filter_by(token=token).first()
        if share is None:
            return None
        share.revoke()
        db.session.commit()
        current_app.logger.info(f'Share revoked for gig {share.gig_id}')
        return share
