# thankswall/routes/auth.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from thankswall.errors import Unauthenticated
from thankswall.services.user_service import UserService
from thankswall.utils.security import generate_api_token
from thankswall.utils.validation import get_json_body

bp = Blueprint('auth', __name__, url_prefix='/auth')
logger = logging.getLogger(__name__)


@bp.route('/signup', methods=['POST'])
def signup():
    data = get_json_body(request)
    user = UserService.signup(data.get('name'), data.get('email'), data.get('password'))
    login_user(user, remember=True)
    return jsonify({'user': user.to_profile_dict()}), 201


@bp.route('/login', methods=['POST'])
def login():
    data = get_json_body(request)
    user = UserService.authenticate(data.get('email'), data.get('password'))
    if user is None:
        logger.warning("Tentativa de login com credenciais inválidas")
        raise Unauthenticated('Email ou senha incorretos')

    login_user(user, remember=True)
    logger.info(f"Login: user={user.id}")
    return jsonify({'user': user.to_profile_dict()})


@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logger.info(f"Logout: user={current_user.id}")
    logout_user()
    return jsonify({'success': True})


@bp.route('/token', methods=['POST'])
def token():
    """
    Token Bearer para clientes da API

    Aceita sessão ativa ou {email, password} no corpo.
    """
    user = current_user if current_user.is_authenticated else None
    if user is None:
        data = get_json_body(request)
        user = UserService.authenticate(data.get('email'), data.get('password'))
    if user is None:
        raise Unauthenticated('Email ou senha incorretos')

    return jsonify({'token': generate_api_token(user.id), 'tokenType': 'Bearer'})
