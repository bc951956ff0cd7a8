"""Database models for files app."""

from datetime import datetime
from typing import Final, final, override

from django.contrib.auth import get_user_model
from django.db import models

User = get_user_model()

# Constants for field max lengths
_FILENAME_MAX_LENGTH: Final = 255
_STORAGE_PATH_MAX_LENGTH: Final = 1024
_MIME_TYPE_MAX_LENGTH: Final = 255
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length
_SLUG_MAX_LENGTH: Final = 32
_STATE_MAX_LENGTH: Final = 16
_PASSWORD_HASH_MAX_LENGTH: Final = 128


@final
class File(models.Model):
    """File stored in S3-compatible storage.

    Each file belongs to a user and lives under the user's namespace
    in storage: user_{user_id}/filename.ext

    A user cannot store byte-identical content twice; the
    (user, checksum_sha256) pair is unique. Records are written once
    by the upload logic and never modified afterwards.
    """

    # Owner relationship
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    filename = models.CharField(
        max_length=_FILENAME_MAX_LENGTH,
        help_text='Original filename as uploaded',
    )

    # upload_to='' means we control the full path
    file = models.FileField(
        upload_to='',
        max_length=_STORAGE_PATH_MAX_LENGTH,
        help_text='Path in storage: user_{user_id}/file.ext',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type passed to the upload (canonical for form uploads)',
    )

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        help_text='SHA256 hash for deduplication and integrity checks',
        db_index=True,
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-uploaded_at']

        indexes = [
            # Optimize recent files queries
            models.Index(
                fields=['user', '-uploaded_at'],
                name='files_user_recent_idx',
            ),
        ]

        constraints = [
            # Source of truth for per-user deduplication
            models.UniqueConstraint(
                fields=['user', 'checksum_sha256'],
                name='files_user_checksum_unique',
            ),
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.file.name}'


class LinkState(models.TextChoices):
    """Share link state."""

    ACTIVE = 'active', 'Active'
    REVOKED = 'revoked', 'Revoked'


@final
class ShareLink(models.Model):
    """Public link that serves a file's content by slug.

    A link is unique per (file, user) pair. The owner is optional so a
    link survives deletion of the user who created it. Expiry is checked
    when the link is resolved; state changes are administrative.
    """

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='links',
    )

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name='share_links',
        null=True,
        blank=True,
    )

    slug = models.CharField(
        max_length=_SLUG_MAX_LENGTH,
        unique=True,
        help_text='Random public token used in the link URL',
    )

    state = models.CharField(
        max_length=_STATE_MAX_LENGTH,
        choices=LinkState.choices,
        default=LinkState.ACTIVE,
        db_index=True,
    )

    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text='Link stops resolving after this moment',
    )

    # Reserved: resolution does not check passwords
    password_hash = models.CharField(
        max_length=_PASSWORD_HASH_MAX_LENGTH,
        blank=True,
        default='',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Share Link'  # type: ignore[mutable-override]
        verbose_name_plural = 'Share Links'  # type: ignore[mutable-override]
        ordering = ['-created_at']

        constraints = [
            # One link per file and owner
            models.UniqueConstraint(
                fields=['file', 'user'],
                name='share_links_file_user_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.slug} ({self.state})'

    def is_expired(self, now: datetime) -> bool:
        """Check if the link expired at the given moment.

        Args:
            now: Moment of resolution (timezone-aware).

        Returns:
            True if an expiry is set and lies before now.
        """
        return self.expires_at is not None and self.expires_at < now
