# thankswall/services/search_service.py
"""
Busca combinada: empresas (paginação por página) + agradecimentos (cursor)
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from flask import current_app

from thankswall.services.company_service import CompanyService
from thankswall.services.feed_service import FeedService

logger = logging.getLogger(__name__)


def _run_in_app_context(app, fn, *args, **kwargs):
    # Cada thread tem seu próprio app context (e sua própria sessão do SQLAlchemy)
    with app.app_context():
        return fn(*args, **kwargs)


class SearchService:

    @staticmethod
    def _search_thanks(q, take, cursor, viewer_id):
        page = FeedService.list_thanks(mode='latest', q=q, take=take, cursor=cursor, viewer_id=viewer_id)
        return {
            'thanks': FeedService.serialize(page, viewer_id),
            'pagination': {
                'nextCursor': page['next_cursor'],
                'hasNextPage': page['has_next_page'],
            },
        }

    @staticmethod
    def search(q, page=1, size=20, take=20, cursor=None, viewer_id=None):
        """
        Executa as duas buscas em paralelo (SEARCH_MAX_WORKERS > 1) ou em sequência

        Returns:
            dict: {'query': q, 'companies': {...}, 'thanks': {...}}
        """
        workers = current_app.config.get('SEARCH_MAX_WORKERS', 2)

        if workers <= 1:
            companies = CompanyService.search_companies(q=q, page=page, size=size)
            thanks = SearchService._search_thanks(q, take, cursor, viewer_id)
        else:
            app = current_app._get_current_object()
            with ThreadPoolExecutor(max_workers=min(workers, 2)) as executor:
                companies_future = executor.submit(
                    _run_in_app_context, app, CompanyService.search_companies, q=q, page=page, size=size
                )
                thanks_future = executor.submit(
                    _run_in_app_context, app, SearchService._search_thanks, q, take, cursor, viewer_id
                )
                # .result() repassa exceções (ex.: cursor inválido) para a requisição
                companies = companies_future.result()
                thanks = thanks_future.result()

        logger.debug(f"Busca '{q}': {companies['pagination']['total']} empresas, "
                     f"{len(thanks['thanks'])} agradecimentos")
        return {'query': q, 'companies': companies, 'thanks': thanks}
