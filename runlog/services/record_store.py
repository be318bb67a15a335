# runlog/services/record_store.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from runlog import db
from runlog.errors import InvalidInput, StoreError
from runlog.models.training import TrainingRecord
from runlog.services.auth_gateway import Session, get_auth_gateway
from runlog.utils.calculos import calculate_pace, parse_date, parse_distance

logger = logging.getLogger(__name__)

# Tope de almacenamiento (km)
MAX_DISTANCE_KM = Decimal("100000")


@dataclass
class NewRecord:
    """Registro a insertar. El ritmo no viaja aquí: lo calcula el store."""
    user_id: str
    date: Union[date, str]
    distance: Union[Decimal, float, str]
    duration: str
    location: str = ""
    notes: str = ""


def _optional_text(value, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInput(f"El campo {field} debe ser texto.", field=field)
    return value.strip() or None


class RecordStore:
    """
    Acceso a `training_records` con la política de propiedad aplicada aquí:
    solo se leen, crean y borran filas cuyo user_id es el de la sesión.
    """

    def __init__(self, session: Optional[Session]):
        self.session = session

    def _require_session(self) -> Session:
        if self.session is None:
            raise StoreError("not_authenticated", "Inicia sesión para acceder a tus registros.")
        return self.session

    def _owned(self):
        s = self._require_session()
        return TrainingRecord.query.filter_by(user_id=s.user_id)

    # ---------- lectura ----------
    def list(self) -> List[TrainingRecord]:
        """Registros del usuario, del más reciente al más antiguo."""
        query = self._owned().order_by(
            TrainingRecord.date.desc(), TrainingRecord.created_at.desc()
        )
        try:
            return query.all()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("list falló: %s", e)
            raise StoreError("store_unavailable", "No se pudieron cargar los registros.") from e

    def get(self, record_id: str) -> Optional[TrainingRecord]:
        try:
            return self._owned().filter_by(id=str(record_id)).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("get %s falló: %s", record_id, e)
            raise StoreError("store_unavailable") from e

    # ---------- escritura ----------
    def create(self, record: NewRecord) -> TrainingRecord:
        s = self._require_session()
        if str(record.user_id) != s.user_id:
            logger.warning("create rechazado: user_id=%s sesión=%s", record.user_id, s.user_id)
            raise StoreError("forbidden", "No puedes crear registros para otro usuario.")

        # La distancia se guarda tal cual llega y el ritmo sale de ese mismo valor
        distance = parse_distance(record.distance)
        if distance > MAX_DISTANCE_KM:
            raise InvalidInput(
                f"La distancia no puede superar {MAX_DISTANCE_KM} km.", field="distance"
            )
        pace = calculate_pace(distance, record.duration)

        row = TrainingRecord(
            user_id=s.user_id,
            date=parse_date(record.date),
            distance=distance,
            duration=record.duration.strip(),
            pace=pace,
            location=_optional_text(record.location, "location"),
            notes=_optional_text(record.notes, "notes"),
        )
        try:
            db.session.add(row)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning("create violó una restricción: %s", e.orig)
            raise StoreError("constraint_violation", "El registro no cumple las restricciones.") from e
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("create falló: %s", e)
            raise StoreError("store_unavailable", "No se pudo guardar el registro.") from e

        logger.info("registro creado id=%s user=%s", row.id, s.user_id)
        return row

    def delete(self, record_id: str) -> bool:
        """
        Borra solo si el registro es del usuario. Si no existe o es de otro,
        no hace nada y devuelve False (mismo resultado en ambos casos).
        """
        row = self.get(record_id)
        if not row:
            return False
        try:
            db.session.delete(row)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("delete %s falló: %s", record_id, e)
            raise StoreError("store_unavailable", "No se pudo borrar el registro.") from e
        return True


def get_record_store() -> RecordStore:
    return RecordStore(get_auth_gateway().get_current_session())
