# runlog/__init__.py

import os
import logging
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify, request, redirect, url_for, flash
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate

# Carga variables de entorno (.env)
load_dotenv()

# Extensiones compartidas
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _require_secret_key(secret: str = None) -> str:
    """Lee SECRET_KEY (argumento o entorno) y exige mínimo 32 bytes."""
    secret = secret or os.getenv("SECRET_KEY", "")
    if not secret or len(secret) < 32:
        # Sin clave sólida no arrancamos: firma cookies y tokens de confirmación
        raise RuntimeError(
            "SECRET_KEY no configurado o demasiado corto. "
            "Añade una clave segura al .env, por ejemplo:\n"
            "  SECRET_KEY="
            "pZcN3mT0f3Qh7JtBv0r6m2kF9yV1wX8qZ4s3a6g9h2j5l8p1r0t2v4x6z8b0c2"
        )
    return secret


def _configure_logging(app: Flask) -> None:
    """Logging simple y consistente."""
    level = logging.DEBUG if app.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)
    logging.getLogger("runlog").setLevel(level)


def create_app(test_config: dict = None) -> Flask:
    """Factory principal de la aplicación."""
    app = Flask(__name__, instance_relative_config=True)
    test_config = dict(test_config or {})

    # Asegura carpeta instance/
    os.makedirs(app.instance_path, exist_ok=True)

    # DB por defecto (SQLite en instance/runlog.db)
    db_path = os.path.join(app.instance_path, "runlog.db")
    default_db_uri = f"sqlite:///{db_path}"

    # -----------------------------
    # Config base (segura por defecto)
    # -----------------------------
    app.config.from_mapping(
        SECRET_KEY=_require_secret_key(test_config.get("SECRET_KEY")),
        SQLALCHEMY_DATABASE_URI=os.getenv("SQLALCHEMY_DATABASE_URI", default_db_uri),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JSON_SORT_KEYS=False,
        # Cookies y sesión seguras
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=os.getenv("FLASK_ENV", "").lower() != "development",
        PERMANENT_SESSION_LIFETIME=timedelta(days=7),
        PREFERRED_URL_SCHEME="https",
        MAX_CONTENT_LENGTH=1 * 1024 * 1024,  # 1 MB por petición
        # Registro y confirmación por email
        AUTH_REQUIRE_CONFIRMATION=_env_flag("RUNLOG_REQUIRE_CONFIRMATION", True),
        AUTH_CONFIRMATION_MAX_AGE=int(os.getenv("RUNLOG_CONFIRMATION_MAX_AGE", 24 * 3600)),
        AUTH_MIN_PASSWORD_LENGTH=6,
    )
    # Overrides (tests, despliegues embebidos)
    app.config.update(test_config)

    # Inicializa extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Inicia sesión para ver tus entrenamientos."

    _configure_logging(app)

    # ---------------------------------------------------------
    # MODELOS (importar para que Flask-Migrate los detecte)
    # ---------------------------------------------------------
    from runlog.models.user import User  # noqa: F401
    from runlog.models.training import TrainingRecord  # noqa: F401

    # ---------------------------------------------------------
    # BLUEPRINTS
    # ---------------------------------------------------------
    from runlog.routes.auth import auth_routes
    from runlog.routes.records_ui import records_ui
    from runlog.routes.api import api
    from runlog.routes.records_api import records_bp

    app.register_blueprint(auth_routes)
    app.register_blueprint(records_ui)
    app.register_blueprint(api)
    app.register_blueprint(records_bp)

    # ---------------------------------------------------------
    # CLI (usuarios, exportación)
    # ---------------------------------------------------------
    from runlog.cli import register_cli
    register_cli(app)

    # ---------------------------------------------------------
    # Healthcheck y manejo de errores JSON
    # ---------------------------------------------------------
    from runlog.errors import RunlogError

    @app.get("/healthz")
    def _healthz():
        return {"status": "ok"}, 200

    @login_manager.unauthorized_handler
    def _unauthorized():
        # La API nunca redirige: 401 JSON
        if request.path.startswith("/api/"):
            return jsonify(error_code="not_authenticated", message="Sesión requerida."), 401
        flash(login_manager.login_message, "warning")
        return redirect(url_for(login_manager.login_view, next=request.path))

    @app.errorhandler(RunlogError)
    def _domain_error(err):
        app.logger.warning("[%s] %s: %s", request.path, err.code, err.message)
        if request.is_json or request.path.startswith("/api/"):
            return jsonify(err.to_dict()), err.status_code
        flash(err.message, "danger")
        return redirect(url_for("records_ui.index"))

    @app.errorhandler(400)
    @app.errorhandler(401)
    @app.errorhandler(403)
    @app.errorhandler(404)
    @app.errorhandler(405)
    @app.errorhandler(409)
    @app.errorhandler(413)
    @app.errorhandler(500)
    def _http_errors(err):
        # Si la petición es JSON, devolvemos JSON consistente
        if request.is_json or request.path.startswith("/api/"):
            code = getattr(err, "code", 500) or 500
            return jsonify(error_code="http_error", message=str(err)), code
        return err

    return app
