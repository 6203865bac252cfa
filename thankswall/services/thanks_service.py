# thankswall/services/thanks_service.py
"""
Criação, edição e remoção de agradecimentos pelo autor
"""
import logging

from thankswall import db
from thankswall.errors import Forbidden, NotFound, ValidationFailed
from thankswall.models import Company, Thanks, ThanksTarget, User
from thankswall.models.thanks import MEDIA_TYPES
from thankswall.services.rate_limiter import RATE_LIMITS, get_rate_limiter
from thankswall.utils.validation import is_valid_url, parse_int, validate_thanks_text

logger = logging.getLogger(__name__)

# Marcador para "campo não enviado" no PATCH
UNSET = object()


class ThanksService:

    @staticmethod
    def parse_target(data):
        """
        Monta o ThanksTarget a partir de companyId/targetUserId

        Exatamente um dos dois deve ser informado.
        """
        company_id = data.get('companyId')
        target_user_id = data.get('targetUserId')
        has_company = company_id not in (None, '')
        has_user = target_user_id not in (None, '')

        if has_company and has_user:
            raise ValidationFailed('Escolha uma empresa ou um usuário, não ambos', field='companyId')
        if has_company:
            return ThanksTarget.company(parse_int(company_id, 'companyId'))
        if has_user:
            return ThanksTarget.user(parse_int(target_user_id, 'targetUserId'))
        raise ValidationFailed('Selecione uma empresa ou um usuário', field='companyId')

    @staticmethod
    def normalize_media(media_url, media_type):
        """URL vazia vira None; tipo é obrigatório quando há URL"""
        if media_url is not None and not isinstance(media_url, str):
            raise ValidationFailed('Informe uma URL válida', field='mediaUrl')
        media_url = (media_url or '').strip()
        if not media_url:
            return None, None
        # Uploads locais usam caminho relativo (/media/...)
        if not (media_url.startswith('/media/') or is_valid_url(media_url)):
            raise ValidationFailed('Informe uma URL válida', field='mediaUrl')
        if not media_type:
            raise ValidationFailed('Informe o tipo da mídia quando houver URL', field='mediaType')
        if media_type not in MEDIA_TYPES:
            raise ValidationFailed('Tipo de mídia inválido. Use: image, video', field='mediaType')
        return media_url, media_type

    @staticmethod
    def create_thanks(author_id, target, text, media_url=None, media_type=None):
        """
        Cria um agradecimento (pendente de moderação)

        Args:
            author_id: ID do autor
            target: ThanksTarget
            text: texto (10-1000 caracteres, sem palavrões)
        """
        get_rate_limiter().enforce(
            str(author_id), 'thanks:create', RATE_LIMITS['THANKS_CREATE'],
            'Você enviou muitos agradecimentos. Aguarde um pouco.'
        )

        text = validate_thanks_text(text)
        media_url, media_type = ThanksService.normalize_media(media_url, media_type)

        if target.kind == ThanksTarget.COMPANY:
            company = Company.query.filter_by(id=target.id, is_approved=True).first()
            if company is None:
                raise NotFound('Empresa não encontrada')
        else:
            if target.id == author_id:
                raise ValidationFailed('Você não pode agradecer a si mesmo', field='targetUserId')
            if db.session.get(User, target.id) is None:
                raise NotFound('Usuário não encontrado')

        thanks = Thanks(user_id=author_id, text=text, media_url=media_url,
                        media_type=media_type, is_approved=False)
        thanks.target = target
        db.session.add(thanks)
        db.session.commit()

        logger.info(f"Agradecimento {thanks.id} criado por user={author_id} para {target.kind}={target.id}")
        return thanks

    @staticmethod
    def get_owned_thanks(thanks_id, user_id, action='editar'):
        thanks = db.session.get(Thanks, thanks_id)
        if thanks is None:
            raise NotFound('Agradecimento não encontrado')
        if thanks.user_id != user_id:
            raise Forbidden(f'Você não tem permissão para {action} este agradecimento')
        return thanks

    @staticmethod
    def update_thanks(thanks_id, user_id, text, media_url=UNSET, media_type=UNSET):
        thanks = ThanksService.get_owned_thanks(thanks_id, user_id)
        thanks.text = validate_thanks_text(text)

        if media_url is not UNSET or media_type is not UNSET:
            new_url = thanks.media_url if media_url is UNSET else media_url
            new_type = thanks.media_type if media_type is UNSET else media_type
            thanks.media_url, thanks.media_type = ThanksService.normalize_media(new_url, new_type)

        db.session.commit()
        logger.info(f"Agradecimento {thanks.id} editado pelo autor")
        return thanks

    @staticmethod
    def delete_thanks(thanks_id, user_id):
        thanks = ThanksService.get_owned_thanks(thanks_id, user_id, action='excluir')
        db.session.delete(thanks)
        db.session.commit()
        logger.info(f"Agradecimento {thanks_id} excluído pelo autor")

    @staticmethod
    def get_thanks_for_viewer(thanks_id, viewer=None):
        """Pendentes só são visíveis para o autor e para admins"""
        thanks = db.session.get(Thanks, thanks_id)
        if thanks is None:
            raise NotFound('Agradecimento não encontrado')
        if not thanks.is_approved:
            is_owner = viewer is not None and viewer.id == thanks.user_id
            is_admin = viewer is not None and viewer.is_admin
            if not (is_owner or is_admin):
                raise NotFound('Agradecimento não encontrado')
        return thanks
