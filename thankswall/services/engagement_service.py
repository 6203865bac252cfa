# thankswall/services/engagement_service.py
"""
Curtidas e comentários
"""
import logging

from sqlalchemy.exc import IntegrityError

from thankswall import db
from thankswall.errors import Conflict, NotFound
from thankswall.models import Comment, Like, Thanks
from thankswall.services.rate_limiter import RATE_LIMITS, get_rate_limiter
from thankswall.utils.validation import validate_comment_text

logger = logging.getLogger(__name__)


class EngagementService:
    """Curtir/descurtir e comentar agradecimentos"""

    @staticmethod
    def get_visible_thanks(thanks_id):
        thanks = Thanks.query.filter_by(id=thanks_id, is_approved=True).first()
        if thanks is None:
            raise NotFound('Agradecimento não encontrado')
        return thanks

    @staticmethod
    def find_like(user_id, thanks_id):
        return Like.query.filter_by(user_id=user_id, thanks_id=thanks_id).first()

    @staticmethod
    def _like_conflict(user_id, thanks_id):
        db.session.rollback()
        logger.warning(f"Toggle de curtida concorrente: user={user_id} thanks={thanks_id}")
        return Conflict('Sua curtida já foi processada. Atualize a página.')

    @staticmethod
    def toggle_like(thanks_id, user_id):
        """
        Alterna a curtida do usuário

        A remoção/criação do Like e o ajuste de like_count vão no mesmo commit.
        O like_count devolvido é relido depois do commit.

        Returns:
            dict: {'liked': bool, 'likeCount': int}
        """
        thanks = EngagementService.get_visible_thanks(thanks_id)
        get_rate_limiter().enforce(
            str(user_id), 'like:toggle', RATE_LIMITS['LIKE_TOGGLE'],
            'Muitas curtidas em pouco tempo. Aguarde um pouco.'
        )

        existing = EngagementService.find_like(user_id, thanks.id)
        try:
            if existing:
                deleted = Like.query.filter_by(user_id=user_id, thanks_id=thanks.id).delete(
                    synchronize_session=False
                )
                if deleted != 1:
                    # A linha já tinha sido removida por outro descurtir
                    raise EngagementService._like_conflict(user_id, thanks_id)
                delta = -1
            else:
                db.session.add(Like(user_id=user_id, thanks_id=thanks.id))
                db.session.flush()
                delta = 1
            Thanks.query.filter_by(id=thanks.id).update(
                {Thanks.like_count: Thanks.like_count + delta},
                synchronize_session=False
            )
            db.session.commit()
        except IntegrityError:
            # Outro curtir do mesmo usuário/post foi gravado antes
            raise EngagementService._like_conflict(user_id, thanks_id)

        db.session.refresh(thanks)
        liked = delta > 0
        logger.info(f"Curtida {'adicionada' if liked else 'removida'}: user={user_id} thanks={thanks.id}")
        return {'liked': liked, 'likeCount': thanks.like_count}

    @staticmethod
    def create_comment(thanks_id, user_id, text):
        """Cria comentário pendente de moderação"""
        thanks = EngagementService.get_visible_thanks(thanks_id)
        get_rate_limiter().enforce(
            str(user_id), 'comment:create', RATE_LIMITS['COMMENT_CREATE'],
            'Você enviou muitos comentários. Aguarde um pouco.'
        )
        text = validate_comment_text(text)

        comment = Comment(user_id=user_id, thanks_id=thanks.id, text=text, is_approved=False)
        db.session.add(comment)
        db.session.commit()

        logger.info(f"Comentário {comment.id} criado em thanks={thanks.id} (aguardando moderação)")
        return comment

    @staticmethod
    def list_comments(thanks_id, page=1, size=20):
        """Comentários aprovados, mais recentes primeiro"""
        thanks = EngagementService.get_visible_thanks(thanks_id)
        query = Comment.query.filter_by(thanks_id=thanks.id, is_approved=True)
        total = query.count()
        comments = query.order_by(Comment.created_at.desc(), Comment.id.desc()).offset(
            (page - 1) * size
        ).limit(size).all()
        return comments, total
