# runlog/routes/api.py

from flask import Blueprint, current_app, request, jsonify

from runlog.errors import InvalidInput
from runlog.services.auth_gateway import get_auth_gateway
from runlog.utils.calculos import calculate_pace

api = Blueprint("api", __name__, url_prefix="/api")


# -----------------------------------------------------------------------------#
# Helpers
# -----------------------------------------------------------------------------#
def _json_body():
    """Body JSON como dict o None si el Content-Type no es JSON."""
    if not request.is_json:
        return None
    b = request.get_json(silent=True)
    if not isinstance(b, dict):
        raise InvalidInput("El body debe ser un objeto JSON.")
    return b


def _unsupported():
    return jsonify({"error_code": "unsupported_media_type",
                    "message": "Content-Type must be application/json"}), 415


# -----------------------------------------------------------------------------#
# Sesión
# -----------------------------------------------------------------------------#
@api.route("/session", methods=["GET"])
def get_session():
    session = get_auth_gateway().get_current_session()
    return jsonify({"data": session.to_dict() if session else None})


@api.route("/auth/sign-in", methods=["POST"])
def sign_in():
    b = _json_body()
    if b is None:
        return _unsupported()
    session = get_auth_gateway().sign_in(b.get("email", ""), b.get("password", ""))
    return jsonify({"data": session.to_dict()}), 200


@api.route("/auth/sign-up", methods=["POST"])
def sign_up():
    b = _json_body()
    if b is None:
        return _unsupported()
    get_auth_gateway().sign_up(b.get("email", ""), b.get("password", ""))
    # El registro nunca abre sesión
    return jsonify({"data": {
        "confirmation_required": bool(current_app.config.get("AUTH_REQUIRE_CONFIRMATION", True))
    }}), 201


@api.route("/auth/sign-out", methods=["POST"])
def sign_out():
    get_auth_gateway().sign_out()
    return jsonify({"data": "ok"}), 200


# -----------------------------------------------------------------------------#
# Calculadora de ritmo
# -----------------------------------------------------------------------------#
@api.route("/pace", methods=["POST"])
def pace():
    """
    Body JSON: {"distance": 10, "duration": "0:59"}
    Respuesta: {"data": {"pace": "5:54/km"}}
    """
    b = _json_body()
    if b is None:
        return _unsupported()
    return jsonify({"data": {"pace": calculate_pace(b.get("distance"), b.get("duration"))}})
