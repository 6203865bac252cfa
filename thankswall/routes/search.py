# thankswall/routes/search.py
from flask import Blueprint, current_app, jsonify, request

from thankswall.errors import ValidationFailed
from thankswall.services.search_service import SearchService
from thankswall.utils.decorators import current_user_id
from thankswall.utils.validation import parse_int

bp = Blueprint('search', __name__)


@bp.route('/search', methods=['GET'])
def search():
    """Busca combinada: ?q&page&size (empresas) &take&cursor (agradecimentos)"""
    q = (request.args.get('q') or '').strip()
    if not q:
        raise ValidationFailed('Digite um termo para buscar', field='q')

    page = parse_int(request.args.get('page'), 'page', default=1)
    size = parse_int(request.args.get('size'), 'size', default=20,
                     maximum=current_app.config['DIRECTORY_MAX_PAGE_SIZE'], clamp=True)
    take = parse_int(request.args.get('take'), 'take',
                     default=current_app.config['FEED_DEFAULT_PAGE_SIZE'],
                     maximum=current_app.config['FEED_MAX_PAGE_SIZE'], clamp=True)

    return jsonify(SearchService.search(
        q,
        page=page,
        size=size,
        take=take,
        cursor=request.args.get('cursor') or None,
        viewer_id=current_user_id(),
    ))
