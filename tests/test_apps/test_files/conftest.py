"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from moto import mock_aws

from server.apps.files.models import File

User = get_user_model()

# 100 KB PNG: signature followed by padding
_PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
_PNG_SIZE = 100 * 1024


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def bucket_name():
    """Name of the bucket configured for the default storage."""
    return settings.STORAGES['default']['OPTIONS']['bucket_name']


@pytest.fixture
def mock_s3(bucket_name):
    """Mock S3 service with the configured bucket.

    Yields:
        boto3 S3 resource with the bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=bucket_name)

        yield conn


@pytest.fixture
def stored_keys(mock_s3, bucket_name):
    """List object keys currently in the mocked bucket.

    Returns:
        Callable returning a sorted list of keys.
    """
    def _keys():
        bucket = mock_s3.Bucket(bucket_name)
        return sorted(obj.key for obj in bucket.objects.all())

    return _keys


@pytest.fixture
def png_bytes():
    """Raw bytes of a 100 KB PNG-like file."""
    return _PNG_SIGNATURE + b'\x00' * (_PNG_SIZE - len(_PNG_SIGNATURE))


@pytest.fixture
def png_content(png_bytes):
    """ContentFile with the 100 KB PNG bytes.

    Returns:
        ContentFile named test.png.
    """
    return ContentFile(png_bytes, name='test.png')


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')


@pytest.fixture
def file_record(user):
    """File row without a stored blob, for link and model tests.

    Returns:
        File instance.
    """
    return File.objects.create(
        user=user,
        filename='test.txt',
        file=f'user_{user.id}/test.txt',
        size_bytes=17,
        mime_type='text/plain',
        checksum_sha256='a' * 64,
    )
