# thankswall/routes/companies.py
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from thankswall.services.company_service import CompanyService
from thankswall.services.feed_service import COMPANY_MEDIA_FILTERS, COMPANY_SORTS, FeedService
from thankswall.services.moderation_service import ModerationService
from thankswall.utils.decorators import current_user_id
from thankswall.utils.validation import get_json_body, parse_int, validate_choice

bp = Blueprint('companies', __name__, url_prefix='/companies')
applications_bp = Blueprint('company_applications', __name__)


@bp.route('', methods=['GET'])
def list_companies():
    """Diretório de empresas aprovadas com busca (?q) e paginação (?page&size)"""
    page = parse_int(request.args.get('page'), 'page', default=1)
    size = parse_int(request.args.get('size'), 'size', default=20,
                     maximum=current_app.config['DIRECTORY_MAX_PAGE_SIZE'], clamp=True)
    return jsonify(CompanyService.search_companies(q=request.args.get('q'), page=page, size=size))


@bp.route('', methods=['POST'])
@login_required
def create_company():
    data = get_json_body(request)
    company = CompanyService.create_company(
        name=data.get('name'),
        category=data.get('category'),
        logo_url=data.get('logoUrl'),
    )
    return jsonify(company.to_dict()), 201


@bp.route('/<slug>', methods=['GET'])
def get_company(slug):
    return jsonify(CompanyService.company_details(slug))


@bp.route('/<slug>/thanks', methods=['GET'])
def company_thanks(slug):
    """Feed da empresa: ?cursor=<id>&limit&mediaType=image|video|all&sortBy=recent|popular"""
    cursor = request.args.get('cursor')
    cursor = parse_int(cursor, 'cursor') if cursor else None
    limit = parse_int(request.args.get('limit'), 'limit',
                      default=current_app.config['FEED_DEFAULT_PAGE_SIZE'],
                      maximum=current_app.config['FEED_MAX_PAGE_SIZE'], clamp=True)
    media_type = validate_choice(request.args.get('mediaType'), 'mediaType',
                                 COMPANY_MEDIA_FILTERS, default='all')
    sort_by = validate_choice(request.args.get('sortBy'), 'sortBy', COMPANY_SORTS, default='recent')
    viewer_id = current_user_id()

    page = FeedService.list_company_thanks(
        slug, cursor=cursor, limit=limit, media_type=media_type, sort_by=sort_by, viewer_id=viewer_id
    )
    return jsonify({
        'items': FeedService.serialize(page, viewer_id),
        'nextCursor': page['next_cursor'],
        'hasMore': page['has_more'],
    })


@bp.route('/<slug>/follow', methods=['GET'])
def follow_status(slug):
    return jsonify({'isFollowing': CompanyService.is_following(slug, current_user_id())})


@bp.route('/<slug>/follow', methods=['POST'])
@login_required
def follow_company(slug):
    CompanyService.follow(slug, current_user.id)
    return jsonify({'success': True, 'isFollowing': True}), 201


@bp.route('/<slug>/follow', methods=['DELETE'])
@login_required
def unfollow_company(slug):
    CompanyService.unfollow(slug, current_user.id)
    return jsonify({'success': True, 'isFollowing': False})


@applications_bp.route('/company-applications', methods=['POST'])
def apply_company():
    """Cadastro público de empresa (fica pendente até a aprovação do admin)"""
    data = get_json_body(request)
    company = ModerationService.apply_company(
        company_name=data.get('companyName'),
        contact_name=data.get('contactName'),
        phone=data.get('phone'),
        email=data.get('email'),
    )
    return jsonify({
        'message': 'Cadastro enviado! Entraremos em contato após a análise.',
        'company': {'id': company.id, 'name': company.name, 'slug': company.slug},
    }), 201
