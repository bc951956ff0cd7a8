"""Share link slug generation."""

import logging
import string
from typing import Final, Protocol

from django.conf import settings
from django.utils.crypto import get_random_string

from server.apps.files.exceptions import SlugExhaustionError
from server.apps.files.models import ShareLink

_SLUG_ALPHABET: Final = string.ascii_letters + string.digits

logger = logging.getLogger(__name__)


class SlugGenerator(Protocol):
    """Source of candidate slugs."""

    def __call__(self) -> str:
        """Return the next candidate slug."""


def random_slug(length: int | None = None) -> str:
    """Generate a random alphanumeric slug.

    Args:
        length: Slug length. Defaults to SHARE_LINK_SLUG_LENGTH.

    Returns:
        Random slug (e.g., 'aZ3k9Qx1').
    """
    if length is None:
        length = settings.SHARE_LINK_SLUG_LENGTH
    return get_random_string(length, allowed_chars=_SLUG_ALPHABET)


def generate_unique_slug(
    generator: SlugGenerator = random_slug,
    max_attempts: int | None = None,
) -> str:
    """Generate a slug that no share link uses yet.

    Args:
        generator: Source of candidate slugs.
        max_attempts: Candidates to try before giving up. Defaults to
            SHARE_LINK_SLUG_MAX_ATTEMPTS.

    Returns:
        Unused slug.

    Raises:
        SlugExhaustionError: If every candidate collided.
    """
    if max_attempts is None:
        max_attempts = settings.SHARE_LINK_SLUG_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        slug = generator()
        if not ShareLink.objects.filter(slug=slug).exists():
            return slug
        logger.warning('Slug collision on attempt %d: %s', attempt, slug)

    logger.error('Slug generation exhausted after %d attempts', max_attempts)
    raise SlugExhaustionError(max_attempts)
