"""Business logic layer for files app.

This package contains all business logic for the upload-and-link flow:
- File upload with per-user deduplication and storage rollback
- Share link creation, resolution and revocation
- Share link slug generation

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
