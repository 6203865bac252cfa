# thankswall/__init__.py
import logging
import os

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_cors import CORS

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=app.config.get('LOG_LEVEL', 'INFO')
    )

    # Inicializar extensões
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    CORS(app, supports_credentials=True)

    from thankswall.services.rate_limiter import init_rate_limiter
    init_rate_limiter(app)

    # Configurar login (sessão + token Bearer para clientes da API)
    from thankswall.models import User
    from thankswall.errors import Unauthenticated, register_error_handlers
    from thankswall.utils.security import verify_api_token

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(request):
        auth_header = request.headers.get('Authorization', '')
        if not auth_header.startswith('Bearer '):
            return None
        user_id = verify_api_token(auth_header[len('Bearer '):].strip())
        if user_id is None:
            return None
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()

    register_error_handlers(app)

    # Registrar blueprints
    from thankswall.routes import admin, auth, companies, media, search, thanks, users
    app.register_blueprint(auth.bp)
    app.register_blueprint(thanks.bp)
    app.register_blueprint(companies.bp)
    app.register_blueprint(companies.applications_bp)
    app.register_blueprint(users.bp)
    app.register_blueprint(users.top_bp)
    app.register_blueprint(admin.bp)
    app.register_blueprint(search.bp)
    app.register_blueprint(media.bp)

    # Criar diretórios necessários
    if not app.config.get('TESTING'):
        os.makedirs(os.path.join(app.root_path, '..', 'instance'), exist_ok=True)

    return app
