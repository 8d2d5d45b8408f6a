"""
Services package for GigPack.
Contains business logic separated from routes.
"""

from app.services.activity_service import ActivityService
from app.services.gigpack_service import GigPackService, GigNotFoundError
from app.services.share_service import ShareService

__all__ = [
    'ActivityService',
    'GigPackService',
    'GigNotFoundError',
    'ShareService',
]
