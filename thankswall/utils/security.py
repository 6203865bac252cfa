import secrets
import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from flask import current_app


def _secret_key() -> str:
    return current_app.config['SECRET_KEY']


def create_token(payload: Dict[Any, Any], expires_in: int = 3600) -> str:
    """
    Criar token JWT genérico

    Args:
        payload: Dados do token
        expires_in: Tempo de expiração em segundos

    Returns:
        Token JWT
    """
    payload = dict(payload)
    payload['iat'] = datetime.utcnow()
    payload['exp'] = datetime.utcnow() + timedelta(seconds=expires_in)

    return jwt.encode(payload, _secret_key(), algorithm='HS256')


def decode_token(token: str, purpose: str = None) -> Optional[Dict[Any, Any]]:
    """
    Decodificar token JWT genérico

    Args:
        token: Token JWT
        purpose: Propósito esperado (opcional)

    Returns:
        Payload se válido, None caso contrário
    """
    if not token:
        return None

    try:
        payload = jwt.decode(token, _secret_key(), algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

    # Verificar propósito se fornecido
    if purpose and payload.get('purpose') != purpose:
        return None

    return payload


def generate_api_token(user_id: int, expires_in: int = None) -> str:
    """
    Gerar token de API (Authorization: Bearer) para um usuário

    Args:
        user_id: ID do usuário
        expires_in: Tempo de expiração em segundos (padrão: API_TOKEN_EXPIRES_IN)
    """
    if expires_in is None:
        expires_in = current_app.config.get('API_TOKEN_EXPIRES_IN', 2592000)
    # PyJWT exige 'sub' como string
    return create_token({'sub': str(user_id), 'purpose': 'api_access'}, expires_in)


def verify_api_token(token: str) -> Optional[int]:
    """
    Verificar token de API

    Returns:
        user_id se válido, None se inválido/expirado
    """
    payload = decode_token(token, purpose='api_access')
    if not payload:
        return None
    try:
        return int(payload.get('sub'))
    except (TypeError, ValueError):
        return None


def generate_upload_token(user_id: int, key: str, content_type: str, size: int) -> str:
    """Token que autoriza um único upload de mídia para a chave informada"""
    expires_in = current_app.config.get('UPLOAD_TOKEN_EXPIRES_IN', 600)
    return create_token({
        'sub': str(user_id),
        'purpose': 'media_upload',
        'key': key,
        'content_type': content_type,
        'size': size,
    }, expires_in)


def verify_upload_token(token: str, key: str) -> Optional[Dict[Any, Any]]:
    payload = decode_token(token, purpose='media_upload')
    if not payload or payload.get('key') != key:
        return None
    return payload


def generate_secure_token(length: int = 8) -> str:
    """Token aleatório (hex) para nomes de arquivo"""
    return secrets.token_hex(length)
