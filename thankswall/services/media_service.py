# thankswall/services/media_service.py
"""
Uploads de mídia: validação de tipo/tamanho, chave do arquivo e URL assinada

O armazenamento é uma pasta local (UPLOAD_FOLDER); a URL de upload leva um
token JWT de uso único que amarra usuário, chave, tipo e tamanho máximo.
"""
import logging
import os
import time

from flask import current_app, url_for

from thankswall.errors import ValidationFailed
from thankswall.utils.security import generate_secure_token, generate_upload_token

logger = logging.getLogger(__name__)

FILE_SIZE_LIMITS = {
    'image': 5 * 1024 * 1024,   # 5MB
    'video': 50 * 1024 * 1024,  # 50MB
}

ALLOWED_MIME_TYPES = {
    'image': ['image/jpeg', 'image/png', 'image/webp'],
    'video': ['video/mp4'],
}

EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'video/mp4': 'mp4',
}


class MediaService:

    @staticmethod
    def media_type_for(content_type):
        for media_type, allowed in ALLOWED_MIME_TYPES.items():
            if content_type in allowed:
                return media_type
        return None

    @staticmethod
    def validate(content_type, size):
        """
        Valida tipo e tamanho do arquivo

        Returns:
            str: 'image' ou 'video'
        """
        media_type = MediaService.media_type_for(content_type)
        if media_type is None:
            allowed = ', '.join(t for types in ALLOWED_MIME_TYPES.values() for t in types)
            raise ValidationFailed(f'Formato de arquivo inválido. Permitidos: {allowed}', field='contentType')

        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValidationFailed('Tamanho do arquivo inválido', field='size')

        max_size = FILE_SIZE_LIMITS[media_type]
        if size > max_size:
            raise ValidationFailed(
                f'Arquivo muito grande. Máximo: {max_size // (1024 * 1024)}MB', field='size'
            )
        return media_type

    @staticmethod
    def generate_file_key(user_id, media_type, extension):
        timestamp = int(time.time() * 1000)
        return f"{media_type}s/{user_id}/{timestamp}-{generate_secure_token(6)}.{extension}"

    @staticmethod
    def create_upload_target(user_id, content_type, size):
        """
        Gera a URL de upload para o cliente

        Returns:
            dict: {'url', 'key', 'publicUrl', 'mediaType'}
        """
        media_type = MediaService.validate(content_type, size)
        key = MediaService.generate_file_key(user_id, media_type, EXTENSIONS[content_type])
        token = generate_upload_token(user_id, key, content_type, size)

        logger.info(f"URL de upload emitida: user={user_id} key={key}")
        return {
            'url': url_for('media.upload', key=key, token=token),
            'key': key,
            'publicUrl': url_for('media.serve', key=key),
            'mediaType': media_type,
        }

    @staticmethod
    def storage_path(key):
        root = os.path.abspath(current_app.config['UPLOAD_FOLDER'])
        path = os.path.abspath(os.path.join(root, key))
        if os.path.commonpath([root, path]) != root:
            raise ValidationFailed('Chave de arquivo inválida', field='key')
        return root, path

    @staticmethod
    def store(key, claims, content_type, body):
        """Grava o arquivo enviado, conferindo o que o token autorizou"""
        if content_type != claims.get('content_type'):
            raise ValidationFailed('Tipo do arquivo diferente do autorizado', field='contentType')
        if len(body) == 0 or len(body) > claims.get('size', 0):
            raise ValidationFailed('Tamanho do arquivo diferente do autorizado', field='size')

        _, path = MediaService.storage_path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'wb') as fh:
            fh.write(body)

        logger.info(f"Upload concluído: key={key} ({len(body)} bytes)")
        return path
