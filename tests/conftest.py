# tests/conftest.py
"""
Fixtures compartilhados para todos os testes do ThanksWall

Cada requisição do cliente de teste abre seu próprio app context; por isso
os fixtures de dados gravam num contexto curto e devolvem objetos
desanexados (só os atributos já carregados, como id e email).
"""
import os
import pytest
from datetime import datetime, timedelta

# Forçar variáveis de ambiente ANTES de importar a app
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing'

from thankswall import create_app, db as _db
from thankswall.models import Company, Thanks, User
from thankswall.services.rate_limiter import RateLimiter

USER_PASSWORD = 'senha123'


@pytest.fixture(scope='function')
def app(tmp_path):
    """Cria a aplicação Flask para testes (SQLite em memória)"""
    app = create_app('config.TestingConfig')
    app.config.update({
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    """Banco dentro de um app context (testes de serviço, sem cliente HTTP)"""
    with app.app_context():
        yield _db
        _db.session.rollback()


@pytest.fixture
def client(app):
    """Cliente de teste HTTP"""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Contexto da aplicação"""
    with app.app_context():
        yield app


@pytest.fixture
def rate_limited(app):
    """Liga o rate limiter (desligado no TestingConfig)"""
    limiter = RateLimiter(enabled=True)
    app.extensions['rate_limiter'] = limiter
    return limiter


def persist(app, obj):
    """Grava o objeto e devolve uma cópia desanexada com os atributos carregados"""
    with app.app_context():
        _db.session.add(obj)
        _db.session.commit()
        _db.session.refresh(obj)
        _db.session.expunge(obj)
    return obj


def make_user(app, name, email, is_admin=False, password=USER_PASSWORD):
    user = User(name=name, email=email, is_admin=is_admin)
    user.set_password(password)
    return persist(app, user)


def make_company(app, name, slug, is_approved=True, category='Serviços'):
    return persist(app, Company(name=name, slug=slug, category=category, is_approved=is_approved))


def make_thanks(app, author, text='Obrigado pelo atendimento excelente de hoje!', company=None,
                target_user=None, is_approved=True, like_count=0, created_at=None, media_type=None):
    thanks = Thanks(
        text=text,
        user_id=author.id,
        company_id=company.id if company is not None else None,
        target_user_id=target_user.id if target_user is not None else None,
        is_approved=is_approved,
        like_count=like_count,
        media_type=media_type,
        media_url=f'/media/{media_type}s/{author.id}/arquivo' if media_type else None,
        created_at=created_at or datetime.utcnow(),
    )
    return persist(app, thanks)


@pytest.fixture
def alice(app):
    return make_user(app, 'Alice Souza', 'alice@test.com')


@pytest.fixture
def bob(app):
    return make_user(app, 'Bruno Lima', 'bob@test.com')


@pytest.fixture
def admin_user(app):
    return make_user(app, 'Admin User', 'admin@test.com', is_admin=True)


@pytest.fixture
def company(app):
    """Empresa aprovada"""
    return make_company(app, 'Padaria Pão Quente', 'padaria-pao-quente', category='Alimentação')


@pytest.fixture
def pending_company(app):
    return make_company(app, 'Oficina do Zé', 'oficina-do-ze', is_approved=False)


@pytest.fixture
def thanks(app, alice, company):
    """Agradecimento aprovado de Alice para a padaria"""
    return make_thanks(app, alice, company=company)


@pytest.fixture
def pending_thanks(app, alice, company):
    return make_thanks(app, alice, text='Agradecimento ainda em moderação aqui', company=company,
                       is_approved=False)


@pytest.fixture
def timeline(app, alice, company):
    """Cinco agradecimentos aprovados, um por minuto (o mais novo por último)"""
    base = datetime.utcnow() - timedelta(hours=1)
    return [
        make_thanks(app, alice, text=f'Agradecimento número {i} para a padaria',
                    company=company, created_at=base + timedelta(minutes=i))
        for i in range(5)
    ]


def login(client, email, password=USER_PASSWORD):
    """Helper para fazer login nos testes"""
    return client.post('/auth/login', json={
        'email': email,
        'password': password,
    })


def logout(client):
    """Helper para fazer logout"""
    return client.post('/auth/logout')
