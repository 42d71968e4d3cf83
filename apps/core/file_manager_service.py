"""
File storage gateway for organization documents (logos, statutes,
partner and investor lists).

Storage keys are relative paths inside the configured default storage.
With USE_S3_STORAGE enabled that is an S3Boto3Storage with signed URLs,
otherwise local FileSystemStorage under MEDIA_ROOT.
"""
import logging
import os
from typing import Iterable, List, Optional

from django.conf import settings
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)


class FileType:
    IMAGE = 'IMAGE'
    DOCUMENT = 'DOCUMENT'


IMAGE_MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/svg+xml': '.svg',
}

DOCUMENT_MIME_TYPES = {
    'application/pdf': '.pdf',
    'application/msword': '.doc',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': '.docx',
    'application/vnd.ms-excel': '.xls',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet': '.xlsx',
    'text/csv': '.csv',
}


class FileUploadError(Exception):
    """
    Raised by the gateway; `kind` tells the caller which client-facing
    error to surface.
    """
    IMAGE = 'IMAGE'
    SIZE = 'SIZE'
    UPLOAD = 'UPLOAD'

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class FileManagerService:

    def __init__(self, storage=None, max_file_size: Optional[int] = None):
        self.storage = storage or default_storage
        self.max_file_size = max_file_size or settings.FILE_UPLOAD_MAX_SIZE

    def validate(self, file: UploadedFile, file_type: Optional[str] = None):
        if file.size > self.max_file_size:
            raise FileUploadError(
                FileUploadError.SIZE,
                f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)} MB",
            )
        if file_type == FileType.IMAGE and file.content_type not in IMAGE_MIME_TYPES:
            raise FileUploadError(
                FileUploadError.IMAGE,
                f"Invalid image type: {file.content_type}",
            )
        if file_type == FileType.DOCUMENT and file.content_type not in DOCUMENT_MIME_TYPES:
            raise FileUploadError(
                FileUploadError.UPLOAD,
                f"Invalid document type: {file.content_type}",
            )

    def upload_files(self, path: str, files: Iterable[UploadedFile], file_type: Optional[str] = None) -> List[str]:
        """
        Store every file under `path` and return the storage keys in the
        same order.
        """
        files = list(files)
        for file in files:
            self.validate(file, file_type)

        keys = []
        for file in files:
            name = f"{path}/{os.path.basename(file.name)}"
            try:
                keys.append(self.storage.save(name, file))
            except Exception as e:
                logger.error(f"Upload of {name} failed: {e}")
                raise FileUploadError(FileUploadError.UPLOAD, str(e)) from e
        return keys

    def delete_files(self, keys: Iterable[str]) -> None:
        for key in keys:
            if not key:
                continue
            try:
                self.storage.delete(key)
            except Exception as e:
                logger.error(f"Delete of {key} failed: {e}")
                raise FileUploadError(FileUploadError.UPLOAD, str(e)) from e

    def generate_presigned_url(self, key: Optional[str]) -> Optional[str]:
        """
        Time-limited URL for `key`. S3 storages sign the URL themselves
        (AWS_QUERYSTRING_AUTH); local storage returns the media URL.
        """
        if not key:
            return None
        try:
            if getattr(settings, 'USE_S3_STORAGE', False):
                return self.storage.url(key, expire=settings.PRESIGNED_URL_EXPIRATION)
            return self.storage.url(key)
        except Exception as e:
            logger.error(f"Could not generate URL for {key}: {e}")
            return None
