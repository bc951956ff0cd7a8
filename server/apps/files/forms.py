"""Request validation for upload and share link endpoints."""

from datetime import datetime
from typing import Any, override

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.utils import timezone

from server.apps.files import mime_types
from server.apps.files.infrastructure.metadata import get_file_extension
from server.apps.files.languages import Language


def validate_future(value: datetime | None) -> None:
    """Reject expiry moments that are not in the future.

    Args:
        value: Submitted expiry, or None.

    Raises:
        ValidationError: If value is now or in the past.
    """
    if value is not None and value <= timezone.now():
        raise ValidationError('The expiry must be a date in the future.')


def _expires_at_field() -> forms.DateTimeField:
    return forms.DateTimeField(
        required=False,
        validators=[validate_future],
    )


class FileUploadForm(forms.Form):
    """Upload of a single file with an optional share link expiry."""

    file = forms.FileField()
    expires_at = _expires_at_field()

    def clean_file(self) -> UploadedFile:
        """Validate size, extension and declared content type.

        Returns:
            Uploaded file.

        Raises:
            ValidationError: If the file is too large or not accepted.
        """
        uploaded = self.cleaned_data['file']
        max_bytes = settings.FILE_UPLOAD_MAX_BYTES

        if uploaded.size > max_bytes:
            raise ValidationError(
                f'The file field must not be greater than {max_bytes} bytes.',
            )

        mime_type = mime_types.from_extension(
            get_file_extension(uploaded.name),
        )
        if mime_type is None:
            allowed = ', '.join(mime_types.allowed_extensions())
            raise ValidationError(
                f'The file field must have one of the extensions: {allowed}.',
            )

        declared = (uploaded.content_type or '').lower()
        if declared not in mime_types.accepted_content_types(mime_type):
            raise ValidationError(
                f'The file field must be a file of type: {mime_type.value}.',
            )
        return uploaded

    @override
    def clean(self) -> dict[str, Any]:
        """Add the canonical MIME type of the uploaded file."""
        cleaned_data = super().clean()
        uploaded = cleaned_data.get('file')
        if uploaded is not None:
            mime_type = mime_types.from_extension(
                get_file_extension(uploaded.name),
            )
            cleaned_data['mime_type'] = mime_type.value if mime_type else ''
        return cleaned_data


class CodeShareForm(forms.Form):
    """Code snippet shared as a text file."""

    content = forms.CharField(strip=False)
    language = forms.ChoiceField(
        choices=Language.choices,
        initial=Language.TEXT,
    )
    expires_at = _expires_at_field()

    def clean_content(self) -> str:
        """Enforce the upload size ceiling on the encoded snippet."""
        content = self.cleaned_data['content']
        if len(content.encode()) > settings.FILE_UPLOAD_MAX_BYTES:
            raise ValidationError('The snippet is too large.')
        return content


class ShareLinkForm(forms.Form):
    """Request for a share link to one of the user's files."""

    file_id = forms.IntegerField(min_value=1)
