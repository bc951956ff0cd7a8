"""Tests for MIME type and language lookup tables."""

import pytest

from server.apps.files import languages, mime_types
from server.apps.files.languages import Language
from server.apps.files.mime_types import MimeType


@pytest.mark.parametrize(('extension', 'expected'), [
    ('png', MimeType.PNG),
    ('.PNG', MimeType.PNG),
    ('jpg', MimeType.JPEG),
    ('jpeg', MimeType.JPEG),
    ('obj', MimeType.OBJ),
    ('exe', None),
    ('', None),
])
def test_from_extension(extension, expected):
    """Test extension lookup ignores case and leading dot."""
    assert mime_types.from_extension(extension) == expected


def test_accepted_content_types():
    """Test generic types are accepted for OBJ models only."""
    assert 'application/octet-stream' in mime_types.accepted_content_types(
        MimeType.OBJ,
    )
    assert 'application/octet-stream' not in (
        mime_types.accepted_content_types(MimeType.PNG)
    )


def test_allowed_extensions():
    """Test every accepted extension is listed once, sorted."""
    assert mime_types.allowed_extensions() == [
        'gif', 'jpeg', 'jpg', 'mp4', 'obj', 'png', 'webp',
    ]


def test_every_language_has_extension():
    """Test the extension table covers all languages."""
    for language in Language:
        assert languages.extension_for(language)


def test_language_lookups():
    """Test extensions and display labels."""
    assert languages.extension_for(Language.PYTHON) == 'py'
    assert languages.extension_for(Language.TEXT) == 'txt'
    assert Language.CSHARP.label == 'C#'
    assert Language.TEXT.label == 'Plain Text'
