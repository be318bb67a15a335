# runlog/services/app_state.py
"""
Estado de la pantalla de entrenamientos.

Todo el estado (sesión, lista de registros, borrador del formulario) vive en
un único AppState inmutable. Cada acción del usuario es un evento que pasa por
AppController.dispatch(); el controlador llama a los gateways y sustituye el
estado completo. Los errores de los gateways se registran en el log y quedan
en `state.error`, nunca salen de dispatch().

Tras crear o borrar siempre se vuelve a pedir la lista completa.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, Optional, Tuple

from runlog.errors import RunlogError, StoreError
from runlog.models.training import TrainingRecord
from runlog.services.auth_gateway import AuthGateway, Session
from runlog.services.record_store import NewRecord, RecordStore
from runlog.utils.calculos import parse_date, parse_distance, parse_duration

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("date", "distance", "duration", "location", "notes")


def _today_iso() -> str:
    return date.today().isoformat()


# -------------------------------------------------------------------
# Estado
# -------------------------------------------------------------------
@dataclass(frozen=True)
class RecordDraft:
    """Borrador del formulario: todos los campos como texto."""
    date: str = field(default_factory=_today_iso)
    distance: str = ""
    duration: str = ""
    location: str = ""
    notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in DRAFT_FIELDS}


@dataclass(frozen=True)
class AppState:
    session: Optional[Session] = None
    records: Tuple[TrainingRecord, ...] = ()
    draft: RecordDraft = field(default_factory=RecordDraft)
    show_form: bool = False
    error: Optional[str] = None
    notice: Optional[str] = None

    @property
    def signed_in(self) -> bool:
        return self.session is not None


# -------------------------------------------------------------------
# Eventos
# -------------------------------------------------------------------
@dataclass(frozen=True)
class Loaded:
    pass


@dataclass(frozen=True)
class SessionChanged:
    session: Optional[Session]


@dataclass(frozen=True)
class ToggleForm:
    pass


@dataclass(frozen=True)
class EditDraft:
    fields: Dict[str, str]


@dataclass(frozen=True)
class SubmitDraft:
    pass


@dataclass(frozen=True)
class CancelDraft:
    pass


@dataclass(frozen=True)
class DeleteRecord:
    record_id: str


@dataclass(frozen=True)
class SignIn:
    email: str
    password: str


@dataclass(frozen=True)
class SignUp:
    email: str
    password: str


@dataclass(frozen=True)
class SignOut:
    pass


# -------------------------------------------------------------------
# Controlador
# -------------------------------------------------------------------
class AppController:
    def __init__(
        self,
        auth: AuthGateway,
        store_factory: Callable[[Optional[Session]], RecordStore] = RecordStore,
        state: Optional[AppState] = None,
    ):
        self.auth = auth
        self.store_factory = store_factory
        self.state = state or AppState()
        self._subscription = auth.subscribe(self._on_session_changed)
        self._handlers = {
            Loaded: self._loaded,
            SessionChanged: self._session_changed,
            ToggleForm: self._toggle_form,
            EditDraft: self._edit_draft,
            SubmitDraft: self._submit_draft,
            CancelDraft: self._cancel_draft,
            DeleteRecord: self._delete_record,
            SignIn: self._sign_in,
            SignUp: self._sign_up,
            SignOut: self._sign_out,
        }

    def close(self) -> None:
        self._subscription.unsubscribe()

    def _on_session_changed(self, session: Optional[Session]) -> None:
        self.dispatch(SessionChanged(session))

    def dispatch(self, event) -> AppState:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"evento desconocido: {event!r}")

        # Los mensajes de la acción anterior no se arrastran
        if not isinstance(event, SessionChanged):
            self.state = replace(self.state, error=None, notice=None)
        try:
            handler(event)
        except RunlogError as err:
            logger.warning("%s falló: %s (%s)", type(event).__name__, err.code, err.message)
            self.state = replace(self.state, error=err.message)
        return self.state

    # ---- helpers ----
    def _store(self) -> RecordStore:
        return self.store_factory(self.state.session)

    def _refresh(self) -> None:
        self.state = replace(self.state, records=tuple(self._store().list()))

    # ---- sesión ----
    def _loaded(self, event: Loaded) -> None:
        self._session_changed(SessionChanged(self.auth.get_current_session()))

    def _session_changed(self, event: SessionChanged) -> None:
        previous = self.state.session
        self.state = replace(self.state, session=event.session)
        if event.session is None:
            self.state = replace(self.state, records=(), draft=RecordDraft(), show_form=False)
        elif previous is None or previous.user_id != event.session.user_id:
            self._refresh()

    def _sign_in(self, event: SignIn) -> None:
        # La notificación del gateway dispara SessionChanged y la recarga
        self.auth.sign_in(event.email, event.password)

    def _sign_up(self, event: SignUp) -> None:
        self.auth.sign_up(event.email, event.password)
        self.state = replace(
            self.state,
            notice="Te hemos enviado un email de confirmación. Revísalo antes de iniciar sesión.",
        )

    def _sign_out(self, event: SignOut) -> None:
        self.auth.sign_out()

    # ---- formulario ----
    def _toggle_form(self, event: ToggleForm) -> None:
        if self.state.session is None:
            return
        self.state = replace(self.state, show_form=not self.state.show_form)

    def _edit_draft(self, event: EditDraft) -> None:
        changes = {
            name: "" if value is None else str(value)
            for name, value in (event.fields or {}).items()
            if name in DRAFT_FIELDS
        }
        self.state = replace(self.state, draft=replace(self.state.draft, **changes))

    def _cancel_draft(self, event: CancelDraft) -> None:
        self.state = replace(self.state, draft=RecordDraft(), show_form=False)

    def _submit_draft(self, event: SubmitDraft) -> None:
        # Si algo falla el formulario sigue abierto con el borrador intacto
        self.state = replace(self.state, show_form=True)
        session = self.state.session
        if session is None:
            raise StoreError("not_authenticated", "Inicia sesión para registrar entrenamientos.")

        draft = self.state.draft
        parse_duration(draft.duration)
        record = NewRecord(
            user_id=session.user_id,
            date=parse_date(draft.date),
            distance=parse_distance(draft.distance),
            duration=draft.duration.strip(),
            location=draft.location,
            notes=draft.notes,
        )
        self._store().create(record)

        self.state = replace(
            self.state, draft=RecordDraft(), show_form=False, notice="Entrenamiento guardado."
        )
        self._refresh()

    def _delete_record(self, event: DeleteRecord) -> None:
        self._store().delete(event.record_id)
        self._refresh()
