"""Django admin configuration for files app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.logic.link_operations import revoke_links
from server.apps.files.models import File, ShareLink


def format_size(size_bytes: int) -> str:
    """Format a byte count for display.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


class ShareLinkInline(admin.TabularInline):  # type: ignore[type-arg]
    """Share links of a file."""

    model = ShareLink
    extra = 0
    fields = ['slug', 'user', 'state', 'expires_at', 'created_at']
    readonly_fields = ['slug', 'user', 'created_at']


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model.

    Metadata is read-only: files are immutable after upload. Deleting
    a file here also removes its blob and its share links.
    """

    list_display = [
        'filename',
        'user',
        'size_display',
        'mime_type',
        'uploaded_at',
    ]

    list_filter = [
        'mime_type',
        'uploaded_at',
    ]

    search_fields = [
        'filename',
        'file',  # Searches file.name field
        'checksum_sha256',
    ]

    readonly_fields = [
        'user',
        'filename',
        'file',
        'size_bytes',
        'mime_type',
        'checksum_sha256',
        'uploaded_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('filename', 'file', 'user'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'mime_type',
                'checksum_sha256',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    inlines = [ShareLinkInline]

    @admin.display(description='Size')
    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format."""
        return format_size(obj.size_bytes)

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are only created by uploads."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user')


@admin.register(ShareLink)
class ShareLinkAdmin(admin.ModelAdmin[ShareLink]):
    """Admin interface for ShareLink model."""

    list_display = [
        'slug',
        'file',
        'user',
        'state',
        'expires_at',
        'created_at',
    ]

    list_filter = [
        'state',
        'expires_at',
    ]

    search_fields = [
        'slug',
        'file__filename',
    ]

    readonly_fields = [
        'slug',
        'file',
        'user',
        'password_hash',
        'created_at',
        'updated_at',
    ]

    actions = ['revoke_selected']

    @admin.action(description='Revoke selected links')
    def revoke_selected(
        self,
        request: HttpRequest,
        queryset: QuerySet[ShareLink],
    ) -> None:
        """Revoke the selected share links.

        Args:
            request: HTTP request.
            queryset: Selected links.
        """
        revoked = revoke_links(queryset)
        self.message_user(
            request,
            f'Revoked {revoked} share links',
            messages.SUCCESS,
        )

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Links are created through the sharing endpoints."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[ShareLink]:
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('file', 'user')
