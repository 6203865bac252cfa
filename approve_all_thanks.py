"""
Script para aprovar em lote todos os agradecimentos pendentes
Execute: python approve_all_thanks.py
"""
from thankswall import create_app, db
from thankswall.models import Thanks


def approve_all_thanks():
    app = create_app()

    with app.app_context():
        pending = Thanks.query.filter_by(is_approved=False).count()
        print(f"📋 Agradecimentos pendentes: {pending}")

        if pending == 0:
            print("✅ Nada para aprovar")
            return 0

        updated = Thanks.query.filter_by(is_approved=False).update(
            {Thanks.is_approved: True}, synchronize_session=False
        )
        db.session.commit()
        print(f"✅ {updated} agradecimentos aprovados!")
        return updated


if __name__ == '__main__':
    approve_all_thanks()
