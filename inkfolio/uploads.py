import logging
import os
import secrets
import time

from werkzeug.utils import secure_filename

from inkfolio.config import ALLOWED_UPLOAD_TYPES, MAX_UPLOAD_SIZE
from inkfolio.errors import ContentError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = 'general'


def generate_filename(original_name):
    _, ext = os.path.splitext(secure_filename(original_name or ''))
    timestamp = int(time.time() * 1000)
    return '%d-%s%s' % (timestamp, secrets.token_hex(6), ext.lower())


def clean_folder(folder):
    parts = [secure_filename(part) for part in (folder or '').split('/')]
    parts = [part for part in parts if part]
    return '/'.join(parts) or DEFAULT_FOLDER


def read_validated(file, allowed_types=ALLOWED_UPLOAD_TYPES, max_size=MAX_UPLOAD_SIZE):
    """Check type and size of an incoming werkzeug FileStorage and return its bytes."""
    if file is None or not file.filename:
        raise ValidationError('No file selected')
    if file.mimetype not in allowed_types:
        raise ValidationError('Unsupported file type: %s' % (file.mimetype or 'unknown'))
    data = file.read(max_size + 1)
    if len(data) > max_size:
        raise ValidationError('File must not exceed %d MB' % (max_size // (1024 * 1024)))
    return data


def store_upload(repo, storage, file, uploader_id, folder=None,
                 allowed_types=ALLOWED_UPLOAD_TYPES, max_size=MAX_UPLOAD_SIZE):
    """Validate, push to blob storage, then persist the file record."""
    data = read_validated(file, allowed_types, max_size)
    folder = clean_folder(folder)
    filename = generate_filename(file.filename)
    blob = storage.put('%s/%s' % (folder, filename), data, content_type=file.mimetype)
    try:
        return repo.create_upload(
            filename=filename,
            original_name=file.filename,
            mimetype=file.mimetype,
            size=len(data),
            folder=folder,
            pathname=blob.pathname,
            url=blob.url,
            uploaded_by_id=uploader_id,
        )
    except Exception:
        _delete_blob(storage, blob.url)
        raise


def _delete_blob(storage, url):
    try:
        storage.delete(url)
    except ContentError as exc:
        logger.warning('Failed to delete blob %s: %s', url, exc)
        return False
    return True


def delete_uploads(repo, storage, uploads):
    """Delete blobs best-effort, then the records.

    A failed remote delete is logged and reported but never blocks the other
    blobs or the record deletion. Returns ``(deleted_count, failed_ids)``.
    """
    failed = [upload.id for upload in uploads if not _delete_blob(storage, upload.url)]
    deleted = repo.delete_upload_records(uploads)
    return deleted, failed
