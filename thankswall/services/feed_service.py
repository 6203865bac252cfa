# thankswall/services/feed_service.py
"""
Consultas paginadas do feed de agradecimentos

Dois esquemas de cursor, propositalmente incompatíveis entre si:

- Feed global (/thanks): cursor composto "<created_at ISO>_<id>" do último
  item retornado. No modo popular a posição usa o like_count atual da âncora;
  se ela for curtida entre uma página e outra, itens podem repetir ou faltar.
- Feed da empresa (/companies/<slug>/thanks): cursor é só o id do último item
  (a próxima página começa logo depois dele).

Ambos buscam limite + 1 linhas; a linha extra só indica se há próxima página.
Só agradecimentos aprovados aparecem, em todos os caminhos (inclusive busca).
"""
import logging
from datetime import datetime

from sqlalchemy import and_, func, or_

from thankswall import db
from thankswall.errors import NotFound, ValidationFailed
from thankswall.models import Comment, Company, Like, Thanks, User

logger = logging.getLogger(__name__)

FEED_MODES = ('latest', 'popular')
COMPANY_SORTS = ('recent', 'popular')
MEDIA_FILTERS = ('image', 'video')
COMPANY_MEDIA_FILTERS = ('image', 'video', 'all')


def escape_like(term):
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class FeedService:
    """Listagens do feed global e do feed de empresa"""

    @staticmethod
    def encode_cursor(thanks):
        return f"{thanks.created_at.isoformat()}_{thanks.id}"

    @staticmethod
    def decode_cursor(cursor):
        """'2026-10-19T12:00:00.123456_42' -> (datetime, 42)"""
        created_at_str, sep, id_str = (cursor or '').rpartition('_')
        if not sep or not created_at_str or not id_str:
            raise ValidationFailed('Cursor inválido', field='cursor')
        try:
            created_at = datetime.fromisoformat(created_at_str.rstrip('Z'))
            thanks_id = int(id_str)
        except ValueError:
            raise ValidationFailed('Cursor inválido', field='cursor')
        return created_at.replace(tzinfo=None), thanks_id

    @staticmethod
    def visible_query():
        return Thanks.query.filter(Thanks.is_approved.is_(True))

    @staticmethod
    def order_by(popular):
        if popular:
            return [Thanks.like_count.desc(), Thanks.created_at.desc(), Thanks.id.desc()]
        return [Thanks.created_at.desc(), Thanks.id.desc()]

    @staticmethod
    def after(popular, like_count, created_at, thanks_id):
        """Predicado keyset: linhas estritamente depois da âncora na ordenação"""
        after_time = or_(
            Thanks.created_at < created_at,
            and_(Thanks.created_at == created_at, Thanks.id < thanks_id),
        )
        if not popular:
            return after_time
        return or_(
            Thanks.like_count < like_count,
            and_(Thanks.like_count == like_count, after_time),
        )

    @staticmethod
    def list_thanks(mode='latest', company_slug=None, media=None, q=None, take=20, cursor=None, viewer_id=None):
        """
        Feed global com filtros e cursor composto

        Returns:
            dict: {'items': [Thanks], 'next_cursor': str|None, 'has_next_page': bool,
                   'comment_counts': {...}, 'liked_ids': set}
        """
        popular = mode == 'popular'
        query = FeedService.visible_query()

        search = (q or '').strip()
        if company_slug or search:
            query = query.outerjoin(Company, Thanks.company_id == Company.id)
        if company_slug:
            query = query.filter(Company.slug == company_slug)
        if media:
            query = query.filter(Thanks.media_type == media)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.join(User, Thanks.user_id == User.id).filter(or_(
                Thanks.text.ilike(pattern, escape='\\'),
                Company.name.ilike(pattern, escape='\\'),
                User.name.ilike(pattern, escape='\\'),
            ))

        if cursor:
            created_at, thanks_id = FeedService.decode_cursor(cursor)
            like_count = None
            if popular:
                # A posição no modo popular depende do like_count atual da âncora
                anchor = db.session.get(Thanks, thanks_id)
                if anchor is None or not anchor.is_approved:
                    raise ValidationFailed('Cursor expirado. Recarregue o feed.', field='cursor')
                like_count, created_at = anchor.like_count, anchor.created_at
            query = query.filter(FeedService.after(popular, like_count, created_at, thanks_id))

        rows = query.order_by(*FeedService.order_by(popular)).limit(take + 1).all()

        has_next_page = len(rows) > take
        items = rows[:take]
        next_cursor = FeedService.encode_cursor(items[-1]) if has_next_page and items else None

        return FeedService.build_page(items, viewer_id, next_cursor=next_cursor, has_next_page=has_next_page)

    @staticmethod
    def list_company_thanks(slug, cursor=None, limit=20, media_type='all', sort_by='recent', viewer_id=None):
        """
        Feed de uma empresa com cursor por id

        Returns:
            dict: {'company': Company, 'items': [...], 'next_cursor': int|None, 'has_more': bool, ...}
        """
        company = Company.query.filter_by(slug=slug, is_approved=True).first()
        if company is None:
            raise NotFound('Empresa não encontrada')

        popular = sort_by == 'popular'
        query = FeedService.visible_query().filter(Thanks.company_id == company.id)
        if media_type in MEDIA_FILTERS:
            query = query.filter(Thanks.media_type == media_type)

        if cursor is not None:
            anchor = FeedService.visible_query().filter(
                Thanks.id == cursor, Thanks.company_id == company.id
            ).first()
            if anchor is None:
                raise ValidationFailed('Cursor inválido', field='cursor')
            query = query.filter(FeedService.after(popular, anchor.like_count, anchor.created_at, anchor.id))

        rows = query.order_by(*FeedService.order_by(popular)).limit(limit + 1).all()

        has_more = len(rows) > limit
        items = rows[:limit]
        next_cursor = items[-1].id if has_more and items else None

        page = FeedService.build_page(items, viewer_id, next_cursor=next_cursor, has_more=has_more)
        page['company'] = company
        return page

    @staticmethod
    def build_page(items, viewer_id, **extra):
        ids = [t.id for t in items]
        page = {
            'items': items,
            'comment_counts': FeedService.comment_counts(ids),
            'liked_ids': FeedService.liked_ids(ids, viewer_id),
        }
        page.update(extra)
        return page

    @staticmethod
    def comment_counts(thanks_ids):
        """Comentários aprovados por agradecimento, numa única consulta"""
        if not thanks_ids:
            return {}
        rows = db.session.query(Comment.thanks_id, func.count(Comment.id)).filter(
            Comment.thanks_id.in_(thanks_ids),
            Comment.is_approved.is_(True)
        ).group_by(Comment.thanks_id).all()
        return {thanks_id: count for thanks_id, count in rows}

    @staticmethod
    def liked_ids(thanks_ids, viewer_id):
        if not thanks_ids or viewer_id is None:
            return set()
        rows = db.session.query(Like.thanks_id).filter(
            Like.thanks_id.in_(thanks_ids),
            Like.user_id == viewer_id
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def serialize(page, viewer_id=None):
        counts = page['comment_counts']
        liked = page['liked_ids']
        return [
            t.to_dict(
                comment_count=counts.get(t.id, 0),
                liked_by_me=(t.id in liked) if viewer_id is not None else None,
            )
            for t in page['items']
        ]
