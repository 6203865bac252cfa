# thankswall/routes/admin.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from thankswall.services.moderation_service import ModerationService
from thankswall.utils.decorators import admin_required
from thankswall.utils.validation import get_json_body, parse_int

bp = Blueprint('admin', __name__, url_prefix='/admin')
logger = logging.getLogger(__name__)


def _moderate(kind, entity_id):
    data = get_json_body(request)
    result = ModerationService.moderate(kind, entity_id, data.get('action'), admin_id=current_user.id)
    return jsonify(result)


@bp.route('/thanks/<int:thanks_id>', methods=['PATCH'])
@login_required
@admin_required
def moderate_thanks(thanks_id):
    """Aprovar ou rejeitar agradecimento: {"action": "approve"|"reject"}"""
    return _moderate('thanks', thanks_id)


@bp.route('/comments/<int:comment_id>', methods=['PATCH'])
@login_required
@admin_required
def moderate_comment(comment_id):
    return _moderate('comments', comment_id)


@bp.route('/companies/<int:company_id>', methods=['PATCH'])
@login_required
@admin_required
def moderate_company(company_id):
    return _moderate('companies', company_id)


@bp.route('/queue', methods=['GET'])
@login_required
@admin_required
def queue():
    """Pendências de moderação com contadores"""
    limit = parse_int(request.args.get('limit'), 'limit', default=50, maximum=200, clamp=True)
    logger.info(f"Fila de moderação consultada por admin={current_user.id}")
    return jsonify(ModerationService.pending_queue(limit=limit))
