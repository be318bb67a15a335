# runlog/routes/records_api.py
from flask import Blueprint, request, jsonify
from flask_login import login_required

from runlog.routes.api import _json_body, _unsupported
from runlog.services.record_store import NewRecord, get_record_store

records_bp = Blueprint("records_api", __name__, url_prefix="/api/records")


@records_bp.route("", methods=["GET"])
@login_required
def list_records():
    store = get_record_store()
    return jsonify({"data": [r.to_dict() for r in store.list()]})


@records_bp.route("", methods=["POST"])
@login_required
def create_record():
    """
    Body JSON:
      {
        "date": "YYYY-MM-DD", "distance": 10.5, "duration": "0:59",
        "location": "...", "notes": "...",
        "user_id": "..."   # opcional; si viene debe ser el de la sesión
      }
    El ritmo se calcula siempre en servidor.
    """
    b = _json_body()
    if b is None:
        return _unsupported()

    store = get_record_store()
    record = NewRecord(
        user_id=b.get("user_id") or store.session.user_id,
        date=b.get("date"),
        distance=b.get("distance"),
        duration=b.get("duration") or "",
        location=b.get("location") or "",
        notes=b.get("notes") or "",
    )
    row = store.create(record)
    return jsonify({"data": row.to_dict()}), 201


@records_bp.route("/<record_id>", methods=["GET"])
@login_required
def get_record(record_id: str):
    row = get_record_store().get(record_id)
    if not row:
        return jsonify({"error_code": "not_found", "message": "not found"}), 404
    return jsonify({"data": row.to_dict()})


@records_bp.route("/<record_id>", methods=["DELETE"])
@login_required
def delete_record(record_id: str):
    deleted = get_record_store().delete(record_id)
    return jsonify({"data": {"deleted": deleted}}), 200
