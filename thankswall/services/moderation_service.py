# thankswall/services/moderation_service.py
"""
Moderação: aprovação/rejeição de conteúdo, denúncias e cadastro de empresas

Estados por entidade: pendente (is_approved=False) -> aprovado.
Rejeitar = excluir o registro (sem histórico).
"""
import logging
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from thankswall import db
from thankswall.errors import Conflict, NotFound, ValidationFailed
from thankswall.models import Comment, Company, Report, Thanks
from thankswall.services.engagement_service import EngagementService
from thankswall.utils.slug import slugify
from thankswall.utils.validation import require_text, validate_email, validate_report_reason

logger = logging.getLogger(__name__)

ACTIONS = ('approve', 'reject')
DEFAULT_APPLICATION_CATEGORY = 'Outros'


class ModerationService:

    MODERATABLE = {
        'thanks': (Thanks, 'Agradecimento'),
        'comments': (Comment, 'Comentário'),
        'companies': (Company, 'Empresa'),
    }

    @staticmethod
    def moderate(kind, entity_id, action, admin_id=None):
        """
        Aplica 'approve' ou 'reject' a um agradecimento, comentário ou empresa

        Returns:
            dict: resumo da ação para a resposta da API
        """
        model, label = ModerationService.MODERATABLE[kind]
        if action not in ACTIONS:
            raise ValidationFailed('Ação inválida. Use: approve, reject', field='action')

        entity = db.session.get(model, entity_id)
        if entity is None:
            raise NotFound(f'{label} não encontrado')

        if action == 'approve':
            entity.is_approved = True
            db.session.commit()
            logger.info(f"{label} {entity_id} aprovado por admin={admin_id}")
            return {'success': True, 'action': 'approve', 'id': entity_id, 'isApproved': True}

        db.session.delete(entity)
        db.session.commit()
        logger.info(f"{label} {entity_id} rejeitado (excluído) por admin={admin_id}")
        return {'success': True, 'action': 'reject', 'id': entity_id, 'deleted': True}

    @staticmethod
    def create_report(thanks_id, user_id, reason):
        """Denúncia de um agradecimento; uma por usuário e post"""
        thanks = EngagementService.get_visible_thanks(thanks_id)

        if Report.query.filter_by(user_id=user_id, thanks_id=thanks.id).first():
            raise Conflict('Você já denunciou este conteúdo')

        reason = validate_report_reason(reason)
        report = Report(user_id=user_id, thanks_id=thanks.id, reason=reason)
        db.session.add(report)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Você já denunciou este conteúdo')

        logger.info(f"Denúncia {report.id} registrada para thanks={thanks.id}")
        return report

    @staticmethod
    def find_company_conflict(name, slug):
        return Company.query.filter(or_(
            func.lower(Company.name) == name.lower(),
            Company.slug == slug,
        )).first()

    @staticmethod
    def apply_company(company_name, contact_name, phone, email):
        """Cadastro público de empresa: fica pendente até aprovação"""
        company_name = require_text(company_name, 'companyName', 2, 100,
                                    min_message='O nome da empresa deve ter pelo menos 2 caracteres')
        contact_name = require_text(contact_name, 'contactName', 2, 100,
                                    min_message='O nome deve ter pelo menos 2 caracteres')
        phone = require_text(phone, 'phone', 10, 30, min_message='Informe um telefone válido')
        email = validate_email(email)

        slug = slugify(company_name)
        if not slug:
            raise ValidationFailed('Nome da empresa inválido', field='companyName')
        if ModerationService.find_company_conflict(company_name, slug):
            raise Conflict('Esta empresa já está cadastrada')

        company = Company(
            name=company_name,
            slug=slug,
            category=DEFAULT_APPLICATION_CATEGORY,
            is_approved=False,
            application_data={
                'contactName': contact_name,
                'phone': phone,
                'email': email,
                'appliedAt': datetime.utcnow().isoformat(),
            },
        )
        db.session.add(company)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict('Esta empresa já está cadastrada')

        logger.info(f"Cadastro de empresa recebido: {company.slug}")
        return company

    @staticmethod
    def pending_queue(limit=50):
        """Fila do painel admin: pendências e contadores"""
        stats = {
            'pendingReports': Report.query.filter_by(status=Report.STATUS_PENDING).count(),
            'pendingCompanies': Company.query.filter_by(is_approved=False).count(),
            'pendingComments': Comment.query.filter_by(is_approved=False).count(),
            'pendingThanks': Thanks.query.filter_by(is_approved=False).count(),
        }
        reports = Report.query.filter_by(status=Report.STATUS_PENDING).order_by(
            Report.created_at.desc()).limit(limit).all()
        companies = Company.query.filter_by(is_approved=False).order_by(
            Company.created_at.desc()).limit(limit).all()
        comments = Comment.query.filter_by(is_approved=False).order_by(
            Comment.created_at.desc()).limit(limit).all()
        thanks = Thanks.query.filter_by(is_approved=False).order_by(
            Thanks.created_at.desc()).limit(limit).all()

        return {
            'stats': stats,
            'reports': [r.to_dict() for r in reports],
            'companies': [dict(c.to_dict(), applicationData=c.application_data) for c in companies],
            'comments': [c.to_dict() for c in comments],
            'thanks': [t.to_dict() for t in thanks],
        }
