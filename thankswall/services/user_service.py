# thankswall/services/user_service.py
"""
Cadastro, perfil, seguidores e ranking de usuários
"""
import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from thankswall import db
from thankswall.errors import Conflict, NotFound, ValidationFailed
from thankswall.models import Thanks, User, UserFollow
from thankswall.utils.validation import require_text, validate_email, validate_optional_url

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def signup(name, email, password):
        name = require_text(name, 'name', 1, 100, min_message='O nome é obrigatório')
        email = validate_email(email)
        if not isinstance(password, str) or len(password) < 6:
            raise ValidationFailed('A senha deve ter pelo menos 6 caracteres', field='password')

        if User.query.filter(func.lower(User.email) == email).first():
            raise Conflict('Este e-mail já está em uso')

        user = User(name=name, email=email)
        user.is_admin = email in [e.lower() for e in current_app.config.get('ADMIN_EMAILS', [])]
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Este e-mail já está em uso')

        logger.info(f"Novo usuário cadastrado: id={user.id}")
        return user

    @staticmethod
    def authenticate(email, password):
        if not isinstance(email, str) or not email.strip():
            return None
        user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
        if user and user.check_password(password):
            return user
        return None

    @staticmethod
    def update_profile(user, data):
        name = data.get('name')
        if not isinstance(name, str) or len(name.strip()) < 2:
            raise ValidationFailed('O nome deve ter pelo menos 2 caracteres', field='name')

        def _clean(key):
            value = data.get(key)
            if value is None:
                return None
            if not isinstance(value, str):
                raise ValidationFailed(f'Campo {key} inválido', field=key)
            return value.strip() or None

        user.name = name.strip()
        user.bio = _clean('bio')
        user.phone = _clean('phone')
        user.location = _clean('location')
        user.website = validate_optional_url(data.get('website'), 'website')
        if data.get('image'):
            user.image = _clean('image')
        db.session.commit()
        logger.info(f"Perfil atualizado: user={user.id}")
        return user

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFound('Usuário não encontrado')
        return user

    @staticmethod
    def public_profile(user_id):
        user = UserService.get_user(user_id)
        data = user.to_public_dict()
        data.update({
            'bio': user.bio,
            'location': user.location,
            'website': user.website,
            'createdAt': user.created_at.isoformat() if user.created_at else None,
            'stats': {
                'thanksGiven': user.thanks.filter(Thanks.is_approved.is_(True)).count(),
                'thanksReceived': user.received_thanks.filter(Thanks.is_approved.is_(True)).count(),
                'followers': UserFollow.query.filter_by(following_id=user.id).count(),
                'following': UserFollow.query.filter_by(follower_id=user.id).count(),
            },
        })
        return data

    @staticmethod
    def is_following(follower_id, user_id):
        if follower_id is None:
            return False
        return UserFollow.query.filter_by(follower_id=follower_id, following_id=user_id).first() is not None

    @staticmethod
    def follow(follower_id, user_id):
        if follower_id == user_id:
            raise ValidationFailed('Você não pode seguir a si mesmo', field='userId')
        UserService.get_user(user_id)
        if UserService.is_following(follower_id, user_id):
            raise Conflict('Você já segue este usuário')

        follow = UserFollow(follower_id=follower_id, following_id=user_id)
        db.session.add(follow)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Você já segue este usuário')
        logger.info(f"user={follower_id} seguiu user={user_id}")
        return follow

    @staticmethod
    def unfollow(follower_id, user_id):
        follow = UserFollow.query.filter_by(follower_id=follower_id, following_id=user_id).first()
        if follow is None:
            raise NotFound('Você não segue este usuário')
        db.session.delete(follow)
        db.session.commit()
        logger.info(f"user={follower_id} deixou de seguir user={user_id}")

    @staticmethod
    def top_users(days=30, limit=100):
        """Usuários cujos agradecimentos aprovados receberam mais curtidas no período"""
        since = datetime.utcnow() - timedelta(days=days)
        total_likes = func.coalesce(func.sum(Thanks.like_count), 0).label('total_likes')
        rows = db.session.query(
            User,
            total_likes,
            func.count(Thanks.id).label('thanks_count'),
            func.max(Thanks.created_at).label('last_thanks_at'),
        ).join(Thanks, Thanks.user_id == User.id).filter(
            Thanks.is_approved.is_(True),
            Thanks.created_at >= since,
        ).group_by(User.id).order_by(total_likes.desc(), User.id.asc()).limit(limit).all()

        return {
            'users': [
                dict(
                    user.to_public_dict(),
                    totalLikes=int(likes or 0),
                    thanksCount=count,
                    lastThanksDate=last_at.isoformat() if last_at else None,
                )
                for user, likes, count, last_at in rows
            ],
            'period': {
                'start': since.isoformat(),
                'end': datetime.utcnow().isoformat(),
                'days': days,
            },
        }
