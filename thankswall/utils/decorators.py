from functools import wraps
from flask_login import current_user
from thankswall import db
from thankswall.errors import Forbidden, Unauthenticated


def admin_required(f):
    """Exige admin; o flag é relido do banco a cada chamada (não confia na sessão)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise Unauthenticated()

        from thankswall.models import User
        is_admin = db.session.query(User.is_admin).filter(User.id == current_user.id).scalar()
        if not is_admin:
            raise Forbidden('Acesso negado. Apenas administradores.')

        return f(*args, **kwargs)
    return decorated_function


def current_user_id():
    """ID do usuário logado ou None (rotas públicas com dados do visitante)"""
    if current_user.is_authenticated:
        return current_user.id
    return None
