"""
Script para promover um usuário a administrador
Execute: python create_admin.py email@exemplo.com
"""
import sys

from thankswall import create_app, db
from thankswall.models import User


def create_admin(email):
    app = create_app()

    with app.app_context():
        user = User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()

        if not user:
            print(f"❌ Usuário {email} não encontrado. Cadastre-se primeiro em /auth/signup.")
            return False

        if user.is_admin:
            print(f"⚠️  {user.email} já é admin!")
            return True

        user.is_admin = True
        db.session.commit()
        print(f"✅ {user.email} agora é administrador!")
        return True


if __name__ == '__main__':
    if len(sys.argv) != 2:
        print("Uso: python create_admin.py email@exemplo.com")
        sys.exit(1)
    sys.exit(0 if create_admin(sys.argv[1]) else 1)
