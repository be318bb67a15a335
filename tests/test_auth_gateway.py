# tests/test_auth_gateway.py
import pytest
from runlog.errors import AuthError
from runlog.models.user import User
from runlog.services.auth_gateway import AuthGateway, Session

from conftest import make_user


def test_sign_up_no_abre_sesion_y_exige_confirmacion(app):
    with app.test_request_context():
        gw = AuthGateway()
        assert gw.sign_up("Nuevo@X.com", "secret1") is None
        assert gw.get_current_session() is None

        user = User.query.filter_by(email="nuevo@x.com").first()
        assert user is not None and not user.is_confirmed
        assert user.password != "secret1"

        with pytest.raises(AuthError) as exc:
            gw.sign_in("nuevo@x.com", "secret1")
        assert exc.value.code == "email_not_confirmed"


def test_confirmacion_y_login(app):
    with app.test_request_context():
        gw = AuthGateway()
        gw.sign_up("n@x.com", "secret1")
        gw.confirm_email(gw.confirmation_token("n@x.com"))

        session = gw.sign_in("n@x.com", "secret1")
        assert session.email == "n@x.com"
        assert gw.get_current_session() == session


def test_confirmation_url_apunta_a_confirm(app):
    with app.test_request_context():
        gw = AuthGateway()
        gw.sign_up("n@x.com", "secret1")
        assert "/confirm/" in gw.confirmation_url("n@x.com")


def test_token_invalido(app):
    with app.test_request_context():
        with pytest.raises(AuthError) as exc:
            AuthGateway().confirm_email("no-es-un-token")
        assert exc.value.code == "invalid_token"


def test_sin_confirmacion_si_se_desactiva(app):
    app.config["AUTH_REQUIRE_CONFIRMATION"] = False
    with app.test_request_context():
        gw = AuthGateway()
        gw.sign_up("n@x.com", "secret1")
        assert gw.sign_in("n@x.com", "secret1").email == "n@x.com"


@pytest.mark.parametrize(
    "email, password, code",
    [("no-es-email", "secret1", "invalid_email"), ("n@x.com", "123", "weak_password")],
)
def test_sign_up_rechazado(app, email, password, code):
    with app.test_request_context():
        with pytest.raises(AuthError) as exc:
            AuthGateway().sign_up(email, password)
        assert exc.value.code == code


def test_sign_up_duplicado(app):
    make_user(app, "u@x.com")
    with app.test_request_context():
        with pytest.raises(AuthError) as exc:
            AuthGateway().sign_up("U@x.com", "secret1")
        assert exc.value.code == "user_already_exists"
        assert exc.value.status_code == 409


@pytest.mark.parametrize("email, password", [("u@x.com", "mala"), ("otro@x.com", "secret1")])
def test_credenciales_invalidas(app, email, password):
    make_user(app, "u@x.com", "secret1")
    with app.test_request_context():
        with pytest.raises(AuthError) as exc:
            AuthGateway().sign_in(email, password)
        assert exc.value.code == "invalid_credentials"
        assert exc.value.status_code == 401


def test_suscripcion_recibe_cambios_de_sesion(app):
    uid = make_user(app, "u@x.com", "secret1")
    seen = []
    with app.test_request_context():
        gw = AuthGateway()
        sub = gw.subscribe(seen.append)

        gw.sign_in("u@x.com", "secret1")
        gw.sign_out()
        assert seen == [Session(uid, "u@x.com"), None]

        # Sin sesión, sign_out no notifica
        gw.sign_out()
        assert len(seen) == 2

        sub.unsubscribe()
        gw.sign_in("u@x.com", "secret1")
        assert len(seen) == 2
