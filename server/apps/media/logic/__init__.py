"""Business logic layer for media app.

This package contains all business logic of the media manager:
- Path sanitizing and breadcrumbs
- Folder listing and the move-target directory tree
- Directory and file mutations guarded by preconditions
- Upload batch reconciliation

Logic talks to storage only through the ``Disk`` capability and
reports expected failures through an ``ErrorSink``.
"""
