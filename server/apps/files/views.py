"""HTTP endpoints for uploads and share links.

Views only translate between HTTP and the logic layer: they validate
input with forms and map logic errors to status codes.
"""

import logging
from datetime import datetime
from http import HTTPStatus
from typing import BinaryIO, Final

from django.contrib.auth.decorators import login_required
from django.core.files.base import ContentFile
from django.core.files.base import File as DjangoFile
from django.forms.utils import ErrorDict
from django.http import (
    FileResponse,
    Http404,
    HttpRequest,
    HttpResponse,
    JsonResponse,
)
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from server.apps.files import languages
from server.apps.files.exceptions import (
    DuplicateFileError,
    ForbiddenError,
    GoneError,
    NotFoundError,
    UploadError,
)
from server.apps.files.forms import CodeShareForm, FileUploadForm, ShareLinkForm
from server.apps.files.logic.link_operations import (
    get_or_create_link,
    resolve_link,
)
from server.apps.files.logic.upload_operations import upload_file
from server.apps.files.models import File, ShareLink

_DUPLICATE_MESSAGE: Final = 'File with this signature already has been uploaded'
_FAILURE_MESSAGE: Final = 'File upload failed'
_SNIPPET_MIME_TYPE: Final = 'text/plain'
_INLINE_DISPOSITION: Final = 'inline'

logger = logging.getLogger(__name__)


@login_required
@require_POST
def upload(request: HttpRequest) -> HttpResponse:
    """Upload a file, optionally with an expiring share link."""
    form = FileUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_errors(form.errors)

    uploaded = form.cleaned_data['file']
    return _run_upload(
        request,
        uploaded,
        uploaded.name,
        form.cleaned_data['mime_type'],
        form.cleaned_data['expires_at'],
    )


@login_required
@require_POST
def share_code(request: HttpRequest) -> HttpResponse:
    """Store a code snippet as a text file."""
    form = CodeShareForm(request.POST)
    if not form.is_valid():
        return _form_errors(form.errors)

    language = languages.Language(form.cleaned_data['language'])
    timestamp = timezone.now().strftime('%Y%m%dT%H%M%S%f')
    filename = 'snippet-{timestamp}.{extension}'.format(
        timestamp=timestamp,
        extension=languages.extension_for(language),
    )
    content = ContentFile(form.cleaned_data['content'].encode(), name=filename)
    return _run_upload(
        request,
        content,
        filename,
        _SNIPPET_MIME_TYPE,
        form.cleaned_data['expires_at'],
    )


@login_required
@require_POST
def create_link(request: HttpRequest) -> HttpResponse:
    """Get or create the share link for one of the user's files."""
    form = ShareLinkForm(request.POST)
    if not form.is_valid():
        return _form_errors(form.errors)

    file_instance = get_object_or_404(
        File,
        id=form.cleaned_data['file_id'],
        user=request.user,
    )
    try:
        share_link, created = get_or_create_link(
            file_instance.id,
            request.user,
        )
    except UploadError:
        logger.exception('Share link creation failed: %d', file_instance.id)
        return JsonResponse(
            {'error': 'Share link creation failed'},
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    status = HTTPStatus.CREATED if created else HTTPStatus.OK
    return JsonResponse(_serialize_link(request, share_link), status=status)


@require_GET
def resolve(request: HttpRequest, slug: str) -> HttpResponse:
    """Stream the content behind a share link inline."""
    try:
        resolved = resolve_link(slug)
    except NotFoundError as error:
        raise Http404(str(error)) from error
    except ForbiddenError as error:
        return HttpResponse(str(error), status=HTTPStatus.FORBIDDEN)
    except GoneError as error:
        return HttpResponse(str(error), status=HTTPStatus.GONE)

    return FileResponse(
        resolved.content,
        content_type=resolved.content_type,
        as_attachment=resolved.disposition != _INLINE_DISPOSITION,
        filename=resolved.filename,
    )


def _run_upload(  # noqa: WPS211
    request: HttpRequest,
    file_obj: BinaryIO | DjangoFile,
    filename: str,
    mime_type: str,
    expires_at: datetime | None,
) -> HttpResponse:
    try:
        file_instance = upload_file(
            request.user,
            file_obj,
            filename,
            mime_type,
            expires_at,
        )
    except DuplicateFileError as error:
        logger.warning(
            'Duplicate file upload attempt by %s: %s (checksum: %s)',
            request.user.username,
            error.filename,
            error.checksum,
        )
        return JsonResponse(
            {'errors': {'file': [_DUPLICATE_MESSAGE]}},
            status=HTTPStatus.CONFLICT,
        )
    except UploadError:
        logger.exception('File upload failed for %s', request.user.username)
        return JsonResponse(
            {'error': _FAILURE_MESSAGE},
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    return JsonResponse(
        {
            'id': file_instance.id,
            'filename': file_instance.filename,
            'path': file_instance.file.name,
            'mime_type': file_instance.mime_type,
            'size_bytes': file_instance.size_bytes,
            'checksum_sha256': file_instance.checksum_sha256,
            'links': [
                _serialize_link(request, share_link)
                for share_link in file_instance.links.all()
            ],
        },
        status=HTTPStatus.CREATED,
    )


def _serialize_link(request: HttpRequest, share_link: ShareLink) -> dict:
    url = reverse('files:resolve', kwargs={'slug': share_link.slug})
    return {
        'slug': share_link.slug,
        'url': request.build_absolute_uri(url),
        'state': share_link.state,
        'expires_at': (
            share_link.expires_at.isoformat()
            if share_link.expires_at
            else None
        ),
    }


def _form_errors(errors: ErrorDict) -> JsonResponse:
    messages = {
        field: [error['message'] for error in field_errors]
        for field, field_errors in errors.get_json_data().items()
    }
    return JsonResponse(
        {'errors': messages},
        status=HTTPStatus.UNPROCESSABLE_ENTITY,
    )
