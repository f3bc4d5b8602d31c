from flask import current_app, jsonify, request, send_from_directory

from inkfolio.auth import admin_required, current_caller, is_admin, login_required
from inkfolio.errors import Forbidden, NotFound, ValidationError
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository, parse_int
from inkfolio.storage import LocalBlobStorage
from inkfolio.uploads import delete_uploads, store_upload


def _storage():
    return current_app.extensions['blob_storage']


# --- File records ---
@api_bp.route('/files', methods=['GET'])
@admin_required
def get_files():
    page = parse_int(request.args.get('page'), 1, minimum=1)
    limit = min(parse_int(request.args.get('limit'), 20, minimum=1), 100)
    filters = {
        'mimetype_prefix': request.args.get('type'),
        'search': request.args.get('search'),
        'folder': request.args.get('folder'),
    }
    repo = get_repository()
    files = repo.list_uploads(skip=(page - 1) * limit, take=limit, **filters)
    total = repo.count_uploads(**filters)
    return jsonify({
        'files': [f.to_dict() for f in files],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'pages': (total + limit - 1) // limit,
        },
    })


@api_bp.route('/files', methods=['DELETE'])
@admin_required
def delete_files():
    data = request.get_json(silent=True) or {}
    file_ids = data.get('fileIds')
    if not isinstance(file_ids, list) or not file_ids:
        raise ValidationError('fileIds must be a non-empty list')
    repo = get_repository()
    uploads = repo.get_uploads(file_ids)
    if not uploads:
        raise NotFound('No files found')
    deleted, failed = delete_uploads(repo, _storage(), uploads)
    return jsonify({'success': True, 'deletedCount': deleted, 'failed': failed})


@api_bp.route('/files/<file_id>', methods=['GET'])
@admin_required
def get_file(file_id):
    upload = get_repository().get_upload(file_id)
    if upload is None:
        raise NotFound('File not found')
    return jsonify(upload.to_dict())


@api_bp.route('/files/<file_id>', methods=['DELETE'])
@admin_required
def delete_file(file_id):
    repo = get_repository()
    upload = repo.get_upload(file_id)
    if upload is None:
        raise NotFound('File not found')
    delete_uploads(repo, _storage(), [upload])
    return jsonify({'success': True})


# --- Upload ---
@api_bp.route('/upload', methods=['POST'])
@admin_required
def upload_file():
    upload = store_upload(
        get_repository(), _storage(), request.files.get('file'), current_caller().id,
        request.form.get('folder'),
        allowed_types=current_app.config['ALLOWED_UPLOAD_TYPES'],
        max_size=current_app.config['MAX_UPLOAD_SIZE'],
    )
    return jsonify({'success': True, 'file': upload.to_dict()}), 201


@api_bp.route('/upload', methods=['DELETE'])
@login_required
def delete_uploaded_file():
    file_id = request.args.get('id')
    if not file_id:
        raise ValidationError('File id required')
    repo = get_repository()
    upload = repo.get_upload(file_id)
    if upload is None:
        raise NotFound('File not found')
    caller = current_caller()
    if upload.uploaded_by_id != caller.id and not is_admin(caller):
        raise Forbidden()
    delete_uploads(repo, _storage(), [upload])
    return jsonify({'success': True})


@api_bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    storage = _storage()
    if not isinstance(storage, LocalBlobStorage):
        raise NotFound('File not found')
    return send_from_directory(storage.root, filename)
