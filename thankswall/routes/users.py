# thankswall/routes/users.py
from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from thankswall.services.company_service import CompanyService
from thankswall.services.user_service import UserService
from thankswall.utils.decorators import current_user_id
from thankswall.utils.validation import get_json_body, parse_int

bp = Blueprint('users', __name__, url_prefix='/users')
top_bp = Blueprint('top', __name__, url_prefix='/top')

TOP_PERIOD_DAYS = 30
TOP_LIMIT = 100


@bp.route('/me', methods=['GET'])
@login_required
def my_profile():
    return jsonify(current_user.to_profile_dict())


@bp.route('/me', methods=['PATCH'])
@login_required
def update_my_profile():
    user = UserService.update_profile(current_user, get_json_body(request))
    return jsonify(user.to_profile_dict())


@bp.route('/<int:user_id>', methods=['GET'])
def public_profile(user_id):
    return jsonify(UserService.public_profile(user_id))


@bp.route('/<int:user_id>/follow', methods=['GET'])
def follow_status(user_id):
    return jsonify({'isFollowing': UserService.is_following(current_user_id(), user_id)})


@bp.route('/<int:user_id>/follow', methods=['POST'])
@login_required
def follow_user(user_id):
    UserService.follow(current_user.id, user_id)
    return jsonify({'success': True, 'isFollowing': True}), 201


@bp.route('/<int:user_id>/follow', methods=['DELETE'])
@login_required
def unfollow_user(user_id):
    UserService.unfollow(current_user.id, user_id)
    return jsonify({'success': True, 'isFollowing': False})


@top_bp.route('/companies', methods=['GET'])
def top_companies():
    """Ranking de empresas mais agradecidas nos últimos 30 dias"""
    limit = parse_int(request.args.get('limit'), 'limit', default=TOP_LIMIT, maximum=TOP_LIMIT, clamp=True)
    return jsonify(CompanyService.top_companies(days=TOP_PERIOD_DAYS, limit=limit))


@top_bp.route('/users', methods=['GET'])
def top_users():
    """Ranking de usuários com mais curtidas recebidas nos últimos 30 dias"""
    limit = parse_int(request.args.get('limit'), 'limit', default=TOP_LIMIT, maximum=TOP_LIMIT, clamp=True)
    return jsonify(UserService.top_users(days=TOP_PERIOD_DAYS, limit=limit))
