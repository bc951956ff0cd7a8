"""Upload and share link settings."""

from server.settings.components import config

# Length of the random public token in /l/<slug>
SHARE_LINK_SLUG_LENGTH = config(
    'SHARE_LINK_SLUG_LENGTH',
    cast=int,
    default=8,
)

# Collisions tolerated before slug generation gives up
SHARE_LINK_SLUG_MAX_ATTEMPTS = config(
    'SHARE_LINK_SLUG_MAX_ATTEMPTS',
    cast=int,
    default=10,
)

# Upload size ceiling enforced by the upload forms (20 MB)
FILE_UPLOAD_MAX_BYTES = config(
    'FILE_UPLOAD_MAX_BYTES',
    cast=int,
    default=20 * 1024 * 1024,
)
