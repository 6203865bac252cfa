# thankswall/services/company_service.py
"""
Diretório de empresas: cadastro direto, busca, detalhes, ranking e seguidores
"""
import logging
import math
from datetime import datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from thankswall import db
from thankswall.errors import Conflict, NotFound, ValidationFailed
from thankswall.models import Company, FollowCompany, Thanks
from thankswall.services.feed_service import escape_like
from thankswall.services.moderation_service import ModerationService
from thankswall.utils.slug import slugify
from thankswall.utils.validation import require_text, validate_optional_url

logger = logging.getLogger(__name__)


def pagination_meta(page, size, total):
    return {
        'page': page,
        'size': size,
        'total': total,
        'totalPages': math.ceil(total / size) if size else 0,
    }


class CompanyService:

    @staticmethod
    def create_company(name, category, logo_url=None):
        """Cadastro direto por usuário logado: já entra aprovada"""
        name = require_text(name, 'name', 1, 100, min_message='O nome da empresa é obrigatório')
        category = require_text(category, 'category', 1, 50, min_message='A categoria é obrigatória')
        logo_url = validate_optional_url(logo_url, 'logoUrl')

        slug = slugify(name)
        if not slug:
            raise ValidationFailed('Nome da empresa inválido', field='name')
        if ModerationService.find_company_conflict(name, slug):
            raise Conflict('Já existe uma empresa com este nome')

        company = Company(name=name, slug=slug, category=category, logo_url=logo_url, is_approved=True)
        db.session.add(company)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Já existe uma empresa com este nome')

        logger.info(f"Empresa criada: {company.slug}")
        return company

    @staticmethod
    def thanks_counts(company_ids, since=None):
        """Agradecimentos aprovados por empresa"""
        if not company_ids:
            return {}
        query = db.session.query(Thanks.company_id, func.count(Thanks.id)).filter(
            Thanks.company_id.in_(company_ids),
            Thanks.is_approved.is_(True)
        )
        if since is not None:
            query = query.filter(Thanks.created_at >= since)
        return {company_id: count for company_id, count in query.group_by(Thanks.company_id).all()}

    @staticmethod
    def search_companies(q=None, page=1, size=20):
        """
        Busca paginada (offset) entre empresas aprovadas

        Returns:
            dict: {'companies': [...], 'pagination': {...}}
        """
        query = Company.query.filter(Company.is_approved.is_(True))
        search = (q or '').strip()
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(or_(
                Company.name.ilike(pattern, escape='\\'),
                Company.slug.ilike(pattern, escape='\\'),
                Company.category.ilike(pattern, escape='\\'),
            ))

        total = query.count()
        companies = query.order_by(Company.name.asc(), Company.id.asc()).offset(
            (page - 1) * size
        ).limit(size).all()

        counts = CompanyService.thanks_counts([c.id for c in companies])
        return {
            'companies': [
                dict(c.to_dict(), thanksCount=counts.get(c.id, 0)) for c in companies
            ],
            'pagination': pagination_meta(page, size, total),
        }

    @staticmethod
    def get_approved_company(slug):
        company = Company.query.filter_by(slug=slug, is_approved=True).first()
        if company is None:
            raise NotFound('Empresa não encontrada')
        return company

    @staticmethod
    def company_details(slug, days=30):
        company = CompanyService.get_approved_company(slug)
        since = datetime.utcnow() - timedelta(days=days)
        total = CompanyService.thanks_counts([company.id]).get(company.id, 0)
        recent = CompanyService.thanks_counts([company.id], since=since).get(company.id, 0)
        followers = company.followers.count()

        data = company.to_dict()
        data['stats'] = {
            'totalThanks': total,
            'recentThanks': recent,
            'followers': followers,
        }
        return data

    @staticmethod
    def top_companies(days=30, limit=100):
        """Empresas com mais agradecimentos aprovados no período"""
        since = datetime.utcnow() - timedelta(days=days)
        thanks_count = func.count(Thanks.id).label('thanks_count')
        rows = db.session.query(
            Company,
            thanks_count,
            func.coalesce(func.sum(Thanks.like_count), 0).label('total_likes'),
            func.max(Thanks.created_at).label('last_thanks_at'),
        ).join(Thanks, Thanks.company_id == Company.id).filter(
            Company.is_approved.is_(True),
            Thanks.is_approved.is_(True),
            Thanks.created_at >= since,
        ).group_by(Company.id).order_by(thanks_count.desc(), Company.name.asc()).limit(limit).all()

        return {
            'companies': [
                dict(
                    company.to_summary_dict(),
                    thanksCount=count,
                    totalLikeCount=int(total_likes or 0),
                    lastThanksDate=last_at.isoformat() if last_at else None,
                )
                for company, count, total_likes, last_at in rows
            ],
            'period': {
                'start': since.isoformat(),
                'end': datetime.utcnow().isoformat(),
                'days': days,
            },
        }

    @staticmethod
    def is_following(slug, user_id):
        company = CompanyService.get_approved_company(slug)
        if user_id is None:
            return False
        return FollowCompany.query.filter_by(user_id=user_id, company_id=company.id).first() is not None

    @staticmethod
    def follow(slug, user_id):
        company = CompanyService.get_approved_company(slug)
        if FollowCompany.query.filter_by(user_id=user_id, company_id=company.id).first():
            raise Conflict('Você já segue esta empresa')
        db.session.add(FollowCompany(user_id=user_id, company_id=company.id))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Você já segue esta empresa')
        logger.info(f"user={user_id} seguiu empresa {company.slug}")

    @staticmethod
    def unfollow(slug, user_id):
        company = CompanyService.get_approved_company(slug)
        follow = FollowCompany.query.filter_by(user_id=user_id, company_id=company.id).first()
        if follow is None:
            raise NotFound('Você não segue esta empresa')
        db.session.delete(follow)
        db.session.commit()
        logger.info(f"user={user_id} deixou de seguir empresa {company.slug}")
