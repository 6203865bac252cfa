# thankswall/errors.py
"""
Exceções da aplicação e tradução para respostas JSON
"""
import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Erro base: carrega status HTTP e mensagem segura para o cliente"""

    status_code = 500
    message = 'Ocorreu um erro inesperado. Tente novamente.'

    def __init__(self, message=None, field=None, payload=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.field = field
        self.payload = payload or {}

    def to_dict(self):
        data = dict(self.payload)
        data['error'] = self.message
        if self.field:
            data['field'] = self.field
        return data

    def headers(self):
        return {}


class Unauthenticated(APIError):
    status_code = 401
    message = 'Você precisa fazer login'


class Forbidden(APIError):
    status_code = 403
    message = 'Acesso negado'


class NotFound(APIError):
    status_code = 404
    message = 'Registro não encontrado'


class Conflict(APIError):
    status_code = 409
    message = 'Registro já existe'


class ValidationFailed(APIError):
    status_code = 400
    message = 'Dados inválidos'


class RateLimited(APIError):
    status_code = 429
    message = 'Muitas requisições. Aguarde um pouco.'

    def __init__(self, result, message=None):
        super().__init__(message, payload={'resetAt': result.reset_at})
        self.result = result

    def headers(self):
        return {
            'X-RateLimit-Limit': str(self.result.limit),
            'X-RateLimit-Remaining': str(self.result.remaining),
            'X-RateLimit-Reset': str(self.result.reset_at),
        }


def register_error_handlers(app):
    """Registra os handlers que convertem exceções em JSON"""
    from thankswall import db

    @app.errorhandler(APIError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error(f"Erro da API: {error.message}")
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        for name, value in error.headers().items():
            response.headers[name] = value
        return response

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        response = jsonify({'error': error.description or error.name})
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception(f"Erro inesperado: {error}")
        return jsonify({'error': APIError.message}), 500
