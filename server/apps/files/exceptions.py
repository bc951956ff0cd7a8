"""Exceptions for files app."""


class FilesError(Exception):
    """Base class for errors raised by the files app."""


class UploadError(FilesError):
    """Base class for upload failures."""


class ChecksumError(UploadError):
    """Raised when the uploaded stream cannot be fully read."""


class DuplicateFileError(UploadError):
    """Raised when the user already stored byte-identical content."""

    def __init__(self, checksum: str, filename: str) -> None:
        """Initialize DuplicateFileError.

        Args:
            checksum: SHA256 checksum of the rejected content.
            filename: Filename the user tried to upload.
        """
        self.checksum = checksum
        self.filename = filename
        super().__init__('Duplicate file detected')


class StorageWriteError(UploadError):
    """Raised when the blob could not be written to storage."""


class StorageTransactionError(UploadError):
    """Raised when metadata persistence fails after the blob was written."""


class SlugExhaustionError(UploadError):
    """Raised when no unique share link slug could be generated."""

    def __init__(self, attempts: int) -> None:
        """Initialize SlugExhaustionError.

        Args:
            attempts: Number of slugs tried before giving up.
        """
        self.attempts = attempts
        super().__init__(
            f'Could not generate a unique slug after {attempts} attempts',
        )


class LinkResolutionError(FilesError):
    """Base class for share link resolution outcomes."""

    default_message = 'Link cannot be resolved'

    def __init__(self, slug: str, message: str | None = None) -> None:
        """Initialize LinkResolutionError.

        Args:
            slug: Slug that was requested.
            message: Optional override for the default message.
        """
        self.slug = slug
        super().__init__(message or self.default_message)


class NotFoundError(LinkResolutionError):
    """Raised when the link or its file content does not exist."""

    default_message = 'Link not found.'


class ForbiddenError(LinkResolutionError):
    """Raised when the link has been revoked."""

    default_message = 'This link has been revoked.'


class GoneError(LinkResolutionError):
    """Raised when the link has expired."""

    default_message = 'This link has expired.'
