"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO/R2)
- Metadata extraction (checksum, MIME type, paths)

Keep infrastructure concerns separate from business logic.
"""
