"""Accepted upload MIME types and their extension lookup table."""

from typing import Final, NamedTuple

from django.db import models


class MimeType(models.TextChoices):
    """MIME types accepted for file uploads."""

    PNG = 'image/png', 'PNG image'
    JPEG = 'image/jpeg', 'JPEG image'
    GIF = 'image/gif', 'GIF image'
    MP4 = 'video/mp4', 'MP4 video'
    WEBP = 'image/webp', 'WebP image'
    OBJ = 'application/prs.wavefront-obj', 'Wavefront OBJ model'


class MimeTypeDetails(NamedTuple):
    """Canonical extension and accepted content-type aliases."""

    extension: str
    aliases: frozenset[str]


_MIME_TYPE_DETAILS: Final[dict[MimeType, MimeTypeDetails]] = {
    MimeType.PNG: MimeTypeDetails('png', frozenset({'image/png'})),
    MimeType.JPEG: MimeTypeDetails(
        'jpg',
        frozenset({'image/jpeg', 'image/pjpeg'}),
    ),
    MimeType.GIF: MimeTypeDetails('gif', frozenset({'image/gif'})),
    MimeType.MP4: MimeTypeDetails('mp4', frozenset({'video/mp4'})),
    MimeType.WEBP: MimeTypeDetails('webp', frozenset({'image/webp'})),
    # Browsers rarely know .obj, most send a generic type
    MimeType.OBJ: MimeTypeDetails(
        'obj',
        frozenset({
            'application/prs.wavefront-obj',
            'model/obj',
            'text/plain',
            'application/octet-stream',
        }),
    ),
}

_EXTENSION_ALIASES: Final[dict[str, MimeType]] = {
    'jpeg': MimeType.JPEG,
}


def accepted_content_types(mime_type: MimeType) -> frozenset[str]:
    """Get content types a client may declare for a MIME type."""
    return _MIME_TYPE_DETAILS[mime_type].aliases


def from_extension(extension: str) -> MimeType | None:
    """Find the MIME type for a file extension.

    Args:
        extension: Extension with or without leading dot, any case.

    Returns:
        Matching MimeType, or None if the extension is not accepted.
    """
    normalized = extension.lstrip('.').lower()
    if normalized in _EXTENSION_ALIASES:
        return _EXTENSION_ALIASES[normalized]
    for mime_type, details in _MIME_TYPE_DETAILS.items():
        if details.extension == normalized:
            return mime_type
    return None


def allowed_extensions() -> list[str]:
    """List every accepted extension, aliases included."""
    extensions = {details.extension for details in _MIME_TYPE_DETAILS.values()}
    extensions.update(_EXTENSION_ALIASES)
    return sorted(extensions)
