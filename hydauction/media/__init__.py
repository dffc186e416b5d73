"""
Media System

Receives uploaded item photos and stores them for the public mount.
"""

from hydauction.media.services.upload_storage import StoredFile, UploadStorage

__all__ = [
    "StoredFile",
    "UploadStorage",
]
