"""
Media System Services
"""

from hydauction.media.services.upload_storage import StoredFile, UploadStorage

__all__ = [
    "StoredFile",
    "UploadStorage",
]
