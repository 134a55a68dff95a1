"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Django storages for the local filesystem and S3-compatible buckets
- Blob backends translating storage errors
- File record persistence
- Storage key generation

Keep infrastructure concerns separate from business logic.
"""
