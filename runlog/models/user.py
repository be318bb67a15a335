# runlog/models/user.py

import uuid
from datetime import datetime

from flask_login import UserMixin
from runlog import db, login_manager


def _new_id() -> str:
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id           = db.Column(db.String(36), primary_key=True, default=_new_id)
    email        = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password     = db.Column(db.String(255), nullable=False)  # hash werkzeug, nunca texto plano
    confirmed_at = db.Column(db.DateTime, nullable=True)
    created_at   = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relaciones
    records = db.relationship(
        "TrainingRecord",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"


# Loader para Flask-Login
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, str(user_id))
