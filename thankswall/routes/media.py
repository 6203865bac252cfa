# thankswall/routes/media.py
import os

from flask import Blueprint, jsonify, request, send_from_directory
from flask_login import current_user, login_required

from thankswall.errors import Forbidden, NotFound
from thankswall.services.media_service import MediaService
from thankswall.utils.security import verify_upload_token
from thankswall.utils.validation import get_json_body

bp = Blueprint('media', __name__)


@bp.route('/uploads/presign', methods=['POST'])
@login_required
def presign():
    """Gera URL de upload: {contentType, size} -> {url, key, publicUrl, mediaType}"""
    data = get_json_body(request)
    return jsonify(MediaService.create_upload_target(
        current_user.id, data.get('contentType'), data.get('size')
    ))


@bp.route('/media/<path:key>', methods=['PUT'])
def upload(key):
    """Recebe os bytes do arquivo; a autorização vem do token da URL"""
    claims = verify_upload_token(request.args.get('token'), key)
    if claims is None:
        raise Forbidden('Link de upload inválido ou expirado')

    MediaService.store(key, claims, request.mimetype, request.get_data())
    return jsonify({'key': key, 'publicUrl': request.path}), 201


@bp.route('/media/<path:key>', methods=['GET'])
def serve(key):
    root, path = MediaService.storage_path(key)
    if not os.path.isfile(path):
        raise NotFound('Arquivo não encontrado')
    return send_from_directory(root, key)
