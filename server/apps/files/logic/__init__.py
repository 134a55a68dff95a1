"""Business logic layer for files app.

This package contains the file service orchestrating uploads,
downloads, listings and deletions over a blob backend and the
file record store.

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).

Reference: https://github.com/dry-python
for decoupling business logic from Django views.
"""
