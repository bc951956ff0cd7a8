"""Business logic for share link operations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import IO, TYPE_CHECKING, Any, Final

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.exceptions import (
    ForbiddenError,
    GoneError,
    NotFoundError,
)
from server.apps.files.logic.slugs import generate_unique_slug
from server.apps.files.models import File, LinkState, ShareLink

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

# User type for Django's dynamic user model
_User = Any

_INLINE_DISPOSITION: Final = 'inline'

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedContent:
    """Content behind a resolved share link, ready to be streamed."""

    link: ShareLink
    file: File
    content: IO[bytes]
    content_type: str
    filename: str
    disposition: str = _INLINE_DISPOSITION


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def get_or_create_link(
    file_id: int,
    user: _User | None = None,
) -> tuple[ShareLink, bool]:
    """Get the share link for a file and owner, creating it if needed.

    New links are active, never expire and get a fresh unique slug.
    The file row is locked while looking up and creating, so concurrent
    calls for the same file and owner return one link. This also covers
    owner-less links, which the (file, user) constraint cannot guard
    because NULL owners compare as distinct. If several owner-less
    links exist (owners deleted later), the oldest one is returned.

    Args:
        file_id: ID of the file to share.
        user: Owner of the link, or None for a system link.

    Returns:
        Tuple of share link and whether it was created.

    Raises:
        File.DoesNotExist: If file not found.
        SlugExhaustionError: If no unique slug could be generated.
    """
    with transaction.atomic():
        file_instance = File.objects.select_for_update().get(id=file_id)

        share_link = ShareLink.objects.filter(
            file=file_instance,
            user=user,
        ).order_by('created_at', 'id').first()
        created = share_link is None
        if share_link is None:
            share_link = ShareLink.objects.create(
                file=file_instance,
                user=user,
                slug=generate_unique_slug(),
                state=LinkState.ACTIVE,
            )

    if created:
        logger.info(
            'Share link created: %s (ID: %d, file ID: %d)',
            share_link.slug,
            share_link.id,
            file_id,
        )
    return share_link, created


def resolve_link(slug: str, now: datetime | None = None) -> ResolvedContent:
    """Resolve a share link slug to the file content.

    Checks run in a fixed order: state, then expiry, then storage.
    A revoked link reports revoked even when it has also expired.

    Args:
        slug: Public link slug.
        now: Moment of resolution. Defaults to current time.

    Returns:
        ResolvedContent with an open stream of the file.

    Raises:
        NotFoundError: If the slug or the stored file does not exist.
        ForbiddenError: If the link was revoked.
        GoneError: If the link expired.
    """
    if now is None:
        now = timezone.now()

    try:
        share_link = ShareLink.objects.select_related('file').get(slug=slug)
    except ShareLink.DoesNotExist as error:
        logger.info('Share link not found: %s', slug)
        raise NotFoundError(slug) from error

    if share_link.state != LinkState.ACTIVE:
        logger.info('Share link revoked: %s', slug)
        raise ForbiddenError(slug)

    if share_link.is_expired(now):
        logger.info(
            'Share link expired: %s (expired at %s)',
            slug,
            share_link.expires_at,
        )
        raise GoneError(slug)

    file_instance = share_link.file
    storage_name = file_instance.file.name
    storage = _get_storage()

    if not storage.exists(storage_name):
        logger.warning(
            'Share link points to missing file: %s -> %s',
            slug,
            storage_name,
        )
        raise NotFoundError(slug, 'File not found.')

    logger.debug('Share link resolved: %s -> %s', slug, storage_name)
    return ResolvedContent(
        link=share_link,
        file=file_instance,
        content=storage.open_for_read(storage_name),
        content_type=file_instance.mime_type,
        filename=file_instance.filename,
    )


def revoke_link(slug: str) -> ShareLink:
    """Revoke a share link.

    Revoking an already revoked link is a no-op.

    Args:
        slug: Public link slug.

    Returns:
        Updated ShareLink instance.

    Raises:
        NotFoundError: If the slug does not exist.
    """
    try:
        share_link = ShareLink.objects.get(slug=slug)
    except ShareLink.DoesNotExist as error:
        raise NotFoundError(slug) from error

    if share_link.state != LinkState.REVOKED:
        share_link.state = LinkState.REVOKED
        share_link.save(update_fields=['state', 'updated_at'])
        logger.info('Share link revoked: %s (ID: %d)', slug, share_link.id)

    return share_link


def revoke_links(links: QuerySet[ShareLink]) -> int:
    """Revoke every active link in a queryset.

    Args:
        links: Links to revoke.

    Returns:
        Number of links that changed state.
    """
    revoked = links.filter(state=LinkState.ACTIVE).update(
        state=LinkState.REVOKED,
        updated_at=timezone.now(),
    )
    logger.info('Revoked %d share links', revoked)
    return revoked
