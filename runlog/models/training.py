# runlog/models/training.py
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint
from runlog import db


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------- ENTRENO REGISTRADO ----------
class TrainingRecord(db.Model):
    __tablename__ = "training_records"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date = db.Column(db.Date, nullable=False)
    distance = db.Column(db.Numeric, nullable=False)             # km, sin escala fija
    duration = db.Column(db.String(5), nullable=False)           # 'H:MM' | 'HH:MM'
    pace = db.Column(db.String(16), nullable=False)              # 'M:SS/km' (derivado)
    location = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("distance > 0", name="ck_training_records_distance_positive"),
        db.Index("ix_training_records_user_date", "user_id", "date"),
    )

    user = db.relationship("User", back_populates="records")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "distance": float(self.distance),
            "duration": self.duration,
            "pace": self.pace,
            "location": self.location or "",
            "notes": self.notes or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<TrainingRecord {self.user_id} {self.date} {self.distance}km {self.pace}>"
