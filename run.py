from thankswall import create_app, db
import os

app = create_app()

@app.shell_context_processor
def make_shell_context():
    # Importar models aqui para evitar importação circular
    from thankswall.models import User, Company, Thanks, Comment, Report

    return {'db': db, 'User': User, 'Company': Company, 'Thanks': Thanks,
            'Comment': Comment, 'Report': Report}

if __name__ == '__main__':
    with app.app_context():
        # Mostrar configuração do banco
        print(f"Banco de dados: {app.config['SQLALCHEMY_DATABASE_URI']}")

        # Criar tabelas (em produção use: flask db upgrade)
        db.create_all()
        print("Banco de dados criado/atualizado")

    debug = os.environ.get('FLASK_DEBUG', 'False').lower() in ['true', '1', 'on']
    print(f"ThanksWall rodando em http://localhost:5000 (debug={debug})")
    app.run(debug=debug, host='0.0.0.0', port=5000)
