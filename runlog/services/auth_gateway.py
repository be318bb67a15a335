# runlog/services/auth_gateway.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from blinker import Signal
from flask import current_app, url_for
from flask_login import current_user, login_user, logout_user
from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from runlog import db
from runlog.errors import AuthError
from runlog.models.user import User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CONFIRM_SALT = "runlog-email-confirm"


# -------------------------------------------------------------------
# Sesión (identidad autenticada)
# -------------------------------------------------------------------
@dataclass(frozen=True)
class Session:
    user_id: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "Session":
        return cls(user_id=str(user.id), email=user.email)

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "email": self.email}


class Subscription:
    """Handle devuelto por subscribe(); unsubscribe() desconecta el callback."""

    def __init__(self, signal: Signal, receiver):
        self._signal = signal
        self._receiver = receiver

    def unsubscribe(self) -> None:
        if self._receiver is not None:
            self._signal.disconnect(self._receiver)
            self._receiver = None


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=_CONFIRM_SALT)


def create_user(email: str, password: str, confirmed: bool = False) -> User:
    """
    Alta de usuario con validaciones básicas. Lo usan sign_up y el CLI.
    La contraseña se guarda solo como hash.
    """
    email = _normalize_email(email)
    if not EMAIL_RE.match(email):
        raise AuthError("invalid_email", "Email inválido.")

    min_len = int(current_app.config.get("AUTH_MIN_PASSWORD_LENGTH", 6))
    if not password or len(password) < min_len:
        raise AuthError(
            "weak_password", f"La contraseña debe tener al menos {min_len} caracteres."
        )

    if User.query.filter_by(email=email).first():
        raise AuthError("user_already_exists", "El usuario ya existe. Inicia sesión.")

    user = User(
        email=email,
        password=generate_password_hash(password),
        confirmed_at=datetime.utcnow() if confirmed else None,
    )
    db.session.add(user)
    db.session.commit()
    return user


# -------------------------------------------------------------------
# Gateway
# -------------------------------------------------------------------
class AuthGateway:
    """
    Fachada de autenticación sobre Flask-Login.

    El token de sesión vive en la cookie que gestiona Flask-Login; aquí nunca
    se guardan credenciales. Cada cambio de sesión (login / logout) se
    notifica a los suscriptores con la nueva Session o None.
    """

    def __init__(self):
        # Señal por instancia: los suscriptores de una petición no ven otras
        self.session_changed = Signal("session-changed")

    # ---- consulta ----
    def get_current_session(self) -> Optional[Session]:
        if current_user and current_user.is_authenticated:
            return Session.from_user(current_user)
        return None

    # ---- suscripción ----
    def subscribe(self, callback: Callable[[Optional[Session]], None]) -> Subscription:
        def _receiver(sender, session=None):
            callback(session)

        self.session_changed.connect(_receiver, weak=False)
        return Subscription(self.session_changed, _receiver)

    def _notify(self, session: Optional[Session]) -> None:
        self.session_changed.send(self, session=session)

    # ---- operaciones ----
    def sign_in(self, email: str, password: str) -> Session:
        email = _normalize_email(email)
        user = User.query.filter_by(email=email).first()
        if not user or not check_password_hash(user.password, password or ""):
            logger.info("login fallido para %s", email or "<vacío>")
            raise AuthError("invalid_credentials", "Credenciales inválidas.")

        if current_app.config.get("AUTH_REQUIRE_CONFIRMATION", True) and not user.is_confirmed:
            raise AuthError(
                "email_not_confirmed", "Confirma tu email antes de iniciar sesión."
            )

        previous = self.get_current_session()
        login_user(user)
        session = Session.from_user(user)
        logger.info("login ok user=%s", session.user_id)
        if previous != session:
            self._notify(session)
        return session

    def sign_up(self, email: str, password: str) -> None:
        """
        Registra al usuario. No abre sesión: si hace falta confirmación se
        emite el enlace (aquí se registra en el log, no hay envío de correo).
        """
        require = current_app.config.get("AUTH_REQUIRE_CONFIRMATION", True)
        user = create_user(email, password, confirmed=not require)
        if require:
            logger.info("enlace de confirmación para %s: %s", user.email, self.confirmation_url(user.email))

    def confirmation_token(self, email: str) -> str:
        user = User.query.filter_by(email=_normalize_email(email)).first()
        if not user:
            raise AuthError("invalid_email", "No existe ningún usuario con ese email.")
        return _serializer().dumps(user.id)

    def confirmation_url(self, email: str) -> str:
        return url_for("auth.confirm", token=self.confirmation_token(email), _external=True)

    def confirm_email(self, token: str) -> None:
        max_age = int(current_app.config.get("AUTH_CONFIRMATION_MAX_AGE", 24 * 3600))
        try:
            user_id = _serializer().loads(token, max_age=max_age)
        except BadSignature:
            # incluye SignatureExpired
            raise AuthError("invalid_token", "El enlace de confirmación no es válido o ha caducado.")

        user = db.session.get(User, str(user_id))
        if not user:
            raise AuthError("invalid_token", "El enlace de confirmación no es válido o ha caducado.")
        if not user.is_confirmed:
            user.confirmed_at = datetime.utcnow()
            db.session.commit()
            logger.info("email confirmado user=%s", user.id)

    def sign_out(self) -> None:
        if self.get_current_session() is None:
            return
        logout_user()
        logger.info("logout")
        self._notify(None)


def get_auth_gateway() -> AuthGateway:
    return AuthGateway()
