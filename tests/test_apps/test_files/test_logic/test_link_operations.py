"""Tests for share link business logic."""

from datetime import timedelta

import pytest
from django.core.files.base import ContentFile
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.exceptions import (
    ForbiddenError,
    GoneError,
    NotFoundError,
)
from server.apps.files.logic.link_operations import (
    get_or_create_link,
    resolve_link,
    revoke_link,
    revoke_links,
)
from server.apps.files.logic.upload_operations import upload_file
from server.apps.files.models import File, LinkState, ShareLink


@pytest.fixture
def stored_file(mock_s3, user):
    """Uploaded file with its blob in the mocked bucket."""
    return upload_file(
        user,
        ContentFile(b'shared content'),
        'shared.txt',
        'text/plain',
    )


@pytest.fixture
def make_link(file_record):
    """Factory for share links of file_record."""
    def _make(slug='abcd1234', **kwargs):
        kwargs.setdefault('file', file_record)
        return ShareLink.objects.create(slug=slug, **kwargs)

    return _make


@pytest.mark.django_db
class TestGetOrCreateLink:
    """Test get_or_create_link function."""

    def test_creates_active_link(self, file_record, user):
        """Test first call creates an active link without expiry."""
        share_link, created = get_or_create_link(file_record.id, user)

        assert created is True
        assert share_link.file == file_record
        assert share_link.user == user
        assert share_link.state == LinkState.ACTIVE
        assert share_link.expires_at is None
        assert len(share_link.slug) == 8

    def test_is_idempotent(self, file_record, user):
        """Test second call returns the same link."""
        first, _ = get_or_create_link(file_record.id, user)
        second, created = get_or_create_link(file_record.id, user)

        assert created is False
        assert second.id == first.id
        assert second.slug == first.slug
        assert ShareLink.objects.count() == 1

    def test_link_per_owner(self, file_record, user, other_user):
        """Test different owners get different links."""
        first, _ = get_or_create_link(file_record.id, user)
        second, created = get_or_create_link(file_record.id, other_user)

        assert created is True
        assert second.slug != first.slug

    def test_without_owner(self, file_record):
        """Test a link can be created without an owner."""
        share_link, created = get_or_create_link(file_record.id)
        again, created_again = get_or_create_link(file_record.id)

        assert created is True
        assert share_link.user is None
        assert created_again is False
        assert again.id == share_link.id

    def test_without_owner_returns_oldest(self, file_record):
        """Test several owner-less links resolve to the oldest one."""
        older = ShareLink.objects.create(file=file_record, slug='older001')
        ShareLink.objects.create(file=file_record, slug='newer001')
        ShareLink.objects.filter(pk=older.pk).update(
            created_at=timezone.now() - timedelta(days=1),
        )

        share_link, created = get_or_create_link(file_record.id)

        assert created is False
        assert share_link.slug == 'older001'
        assert ShareLink.objects.count() == 2

    def test_locks_file_row(self, file_record, monkeypatch):
        """Test lookup and creation run under a lock on the file row."""
        locked_models = []
        original = QuerySet.select_for_update

        def _select_for_update(queryset, *args, **kwargs):
            locked_models.append(queryset.model)
            return original(queryset, *args, **kwargs)

        monkeypatch.setattr(QuerySet, 'select_for_update', _select_for_update)

        get_or_create_link(file_record.id)

        assert locked_models == [File]

    def test_missing_file(self, db):
        """Test unknown file ID raises DoesNotExist."""
        with pytest.raises(File.DoesNotExist):
            get_or_create_link(999)


@pytest.mark.django_db
class TestResolveLink:
    """Test resolve_link function."""

    def test_resolves_content(self, stored_file):
        """Test active link streams the stored bytes."""
        share_link, _ = get_or_create_link(stored_file.id, stored_file.user)

        resolved = resolve_link(share_link.slug)

        assert resolved.link == share_link
        assert resolved.file == stored_file
        assert resolved.content.read() == b'shared content'
        assert resolved.content_type == 'text/plain'
        assert resolved.filename == 'shared.txt'
        assert resolved.disposition == 'inline'

    def test_unknown_slug(self, db):
        """Test unknown slug raises NotFoundError."""
        with pytest.raises(NotFoundError, match='Link not found.') as exc_info:
            resolve_link('missing1')

        assert exc_info.value.slug == 'missing1'

    def test_revoked(self, make_link):
        """Test revoked link raises ForbiddenError."""
        make_link(state=LinkState.REVOKED)

        with pytest.raises(ForbiddenError, match='revoked'):
            resolve_link('abcd1234')

    def test_revoked_wins_over_expired(self, make_link):
        """Test a revoked and expired link reports revoked."""
        make_link(
            state=LinkState.REVOKED,
            expires_at=timezone.now() - timedelta(days=1),
        )

        with pytest.raises(ForbiddenError):
            resolve_link('abcd1234')

    def test_expired(self, make_link):
        """Test expired link raises GoneError."""
        make_link(expires_at=timezone.now() - timedelta(hours=1))

        with pytest.raises(GoneError, match='expired'):
            resolve_link('abcd1234')

    def test_expiry_boundary(self, stored_file):
        """Test a link still resolves at exactly its expiry moment."""
        expires_at = timezone.now() + timedelta(days=1)
        ShareLink.objects.create(
            file=stored_file,
            slug='boundary',
            expires_at=expires_at,
        )

        resolved = resolve_link('boundary', now=expires_at)

        assert resolved.content.read() == b'shared content'
        with pytest.raises(GoneError):
            resolve_link(
                'boundary',
                now=expires_at + timedelta(microseconds=1),
            )

    def test_checks_expiry_against_given_moment(self, mock_s3, stored_file):
        """Test resolution before expiry succeeds."""
        expires_at = timezone.now() + timedelta(days=1)
        share_link = ShareLink.objects.create(
            file=stored_file,
            slug='future01',
            expires_at=expires_at,
        )

        resolved = resolve_link(
            share_link.slug,
            now=expires_at - timedelta(seconds=1),
        )

        assert resolved.content.read() == b'shared content'

    def test_missing_blob(self, mock_s3, make_link):
        """Test link to a file without blob raises NotFoundError."""
        make_link()

        with pytest.raises(NotFoundError, match='File not found.'):
            resolve_link('abcd1234')


@pytest.mark.django_db
class TestRevokeLink:
    """Test revoke_link and revoke_links functions."""

    def test_revoke(self, make_link):
        """Test revoking an active link."""
        make_link()

        share_link = revoke_link('abcd1234')

        assert share_link.state == LinkState.REVOKED
        share_link.refresh_from_db()
        assert share_link.state == LinkState.REVOKED

    def test_revoke_is_idempotent(self, make_link):
        """Test revoking twice keeps the link revoked."""
        make_link()

        revoke_link('abcd1234')
        share_link = revoke_link('abcd1234')

        assert share_link.state == LinkState.REVOKED

    def test_revoke_unknown(self, db):
        """Test revoking unknown slug raises NotFoundError."""
        with pytest.raises(NotFoundError):
            revoke_link('missing1')

    def test_revoke_links_counts_changed(
        self,
        make_link,
        user,
        other_user,
    ):
        """Test bulk revoke only counts active links."""
        make_link(slug='active01')
        make_link(slug='active02', user=other_user)
        make_link(slug='revoked1', state=LinkState.REVOKED, user=user)

        revoked = revoke_links(ShareLink.objects.all())

        assert revoked == 2
        assert not ShareLink.objects.filter(state=LinkState.ACTIVE).exists()
