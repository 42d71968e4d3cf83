"""
Storage configuration for ONG Hub.

Organization documents (logos, statutes, partner/investor lists) live in
a private S3 bucket in production and under MEDIA_ROOT in development.
"""
import os
from pathlib import Path


def is_s3_enabled() -> bool:
    return os.getenv('USE_S3_STORAGE', 'false').lower() == 'true'


def get_storage_settings(base_dir: Path) -> dict:
    """
    Storage-related settings to merge into the Django settings module.
    """
    staticfiles = {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}

    if is_s3_enabled():
        return {
            'USE_S3_STORAGE': True,
            'STORAGES': {
                'default': {'BACKEND': 'storages.backends.s3boto3.S3Boto3Storage'},
                'staticfiles': staticfiles,
            },
            'AWS_ACCESS_KEY_ID': os.getenv('AWS_ACCESS_KEY_ID'),
            'AWS_SECRET_ACCESS_KEY': os.getenv('AWS_SECRET_ACCESS_KEY'),
            'AWS_STORAGE_BUCKET_NAME': os.getenv('AWS_STORAGE_BUCKET_NAME', 'onghub-documents'),
            'AWS_S3_REGION_NAME': os.getenv('AWS_S3_REGION_NAME', 'eu-central-1'),
            'AWS_S3_FILE_OVERWRITE': False,
            'AWS_DEFAULT_ACL': 'private',
            'AWS_QUERYSTRING_AUTH': True,  # signed URLs for private files
            'AWS_QUERYSTRING_EXPIRE': int(os.getenv('PRESIGNED_URL_EXPIRATION', '3600')),
        }

    return {
        'USE_S3_STORAGE': False,
        'STORAGES': {
            'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
            'staticfiles': staticfiles,
        },
        'MEDIA_URL': '/media/',
        'MEDIA_ROOT': base_dir / 'media',
    }
