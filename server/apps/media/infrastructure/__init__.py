"""Infrastructure layer for media app.

This package contains integrations with external systems:
- Storage disks (local filesystem, S3/MinIO/R2 through django-storages)
- Metadata lookup (MIME type by extension, timestamps)

Keep infrastructure concerns separate from business logic.
"""
