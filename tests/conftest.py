# tests/conftest.py

import pytest
from runlog import create_app, db
from runlog.services.auth_gateway import create_user

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret-key-0123456789abcdefghijklmnop",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "WTF_CSRF_ENABLED": False,
    "SESSION_COOKIE_SECURE": False,
    "SERVER_NAME": "localhost",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    # Sin app_context activo durante el test: cada petición del cliente
    # abre el suyo (g y current_user no se comparten entre peticiones)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(app, email="u@x.com", password="secret1", confirmed=True):
    """Crea un usuario y devuelve su id."""
    with app.app_context():
        return create_user(email, password, confirmed=confirmed).id
