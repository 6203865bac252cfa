# thankswall/utils/validation.py
"""
Validações de entrada compartilhadas pelas rotas e serviços

Todas levantam ValidationFailed com o nome do campo (no formato da API)
"""
import re
from urllib.parse import urlparse

from thankswall.errors import ValidationFailed
from thankswall.utils.profanity import contains_profanity

PROFANITY_MESSAGE = 'O conteúdo contém palavras impróprias. Por favor, use uma linguagem adequada.'

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def require_text(value, field, min_len, max_len, min_message=None, max_message=None):
    """Texto obrigatório com limites de tamanho (após strip)"""
    if value is None:
        value = ''
    if not isinstance(value, str):
        raise ValidationFailed(f'Campo {field} inválido', field=field)
    value = value.strip()
    if len(value) < min_len:
        raise ValidationFailed(min_message or f'Digite pelo menos {min_len} caracteres', field=field)
    if len(value) > max_len:
        raise ValidationFailed(max_message or f'Digite no máximo {max_len} caracteres', field=field)
    return value


def validate_clean_text(value, field, min_len, max_len, min_message=None, max_message=None):
    value = require_text(value, field, min_len, max_len, min_message, max_message)
    if contains_profanity(value):
        raise ValidationFailed(PROFANITY_MESSAGE, field=field)
    return value


def validate_thanks_text(value):
    return validate_clean_text(value, 'text', 10, 1000)


def validate_comment_text(value):
    return validate_clean_text(value, 'text', 1, 500, min_message='O comentário não pode ficar vazio')


def validate_report_reason(value):
    return require_text(
        value, 'reason', 10, 500,
        min_message='O motivo da denúncia deve ter pelo menos 10 caracteres',
        max_message='O motivo da denúncia deve ter no máximo 500 caracteres',
    )


def validate_email(value, field='email'):
    value = (value or '').strip() if isinstance(value, str) else ''
    if not EMAIL_RE.match(value):
        raise ValidationFailed('Informe um e-mail válido', field=field)
    return value.lower()


def is_valid_url(value):
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def validate_optional_url(value, field):
    """URL opcional: vazio vira None"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed('Informe uma URL válida', field=field)
    value = value.strip()
    if not value:
        return None
    if not is_valid_url(value):
        raise ValidationFailed('Informe uma URL válida', field=field)
    return value


def validate_choice(value, field, choices, default=None):
    if value in (None, ''):
        if default is None:
            raise ValidationFailed(f'Campo {field} é obrigatório', field=field)
        return default
    if value not in choices:
        raise ValidationFailed(f'Valor inválido para {field}. Use: {", ".join(choices)}', field=field)
    return value


def parse_int(value, field, default=None, minimum=1, maximum=None, clamp=False):
    """
    Converte parâmetro de query/corpo em inteiro

    Args:
        value: valor recebido (str, int ou None)
        field: nome do campo para a mensagem de erro
        default: usado quando o valor está ausente
        minimum: menor valor aceito
        maximum: maior valor aceito
        clamp: se True, valores acima do máximo são reduzidos em vez de rejeitados
    """
    if value is None or value == '':
        if default is None:
            raise ValidationFailed(f'Campo {field} é obrigatório', field=field)
        return default
    if isinstance(value, bool):
        raise ValidationFailed(f'Campo {field} deve ser um número inteiro', field=field)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f'Campo {field} deve ser um número inteiro', field=field)
    if minimum is not None and number < minimum:
        raise ValidationFailed(f'Campo {field} deve ser no mínimo {minimum}', field=field)
    if maximum is not None and number > maximum:
        if clamp:
            return maximum
        raise ValidationFailed(f'Campo {field} deve ser no máximo {maximum}', field=field)
    return number


def get_json_body(request):
    """Corpo JSON da requisição como dict (vazio se ausente)"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed('Corpo da requisição inválido')
    return data
