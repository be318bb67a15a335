# runlog/routes/records_ui.py
from flask import Blueprint, render_template, redirect, url_for, flash

from runlog.forms.record_form import ActionForm, TrainingRecordForm
from runlog.services.app_state import (
    AppController, CancelDraft, DeleteRecord, EditDraft, Loaded, SubmitDraft, ToggleForm,
)
from runlog.services.auth_gateway import get_auth_gateway

records_ui = Blueprint("records_ui", __name__)


def _controller() -> AppController:
    """Controlador de la petición con la sesión ya restaurada."""
    ctrl = AppController(get_auth_gateway())
    ctrl.dispatch(Loaded())
    return ctrl


def _render(state, form=None, status=200):
    if state.error:
        flash(state.error, "danger")
    return render_template(
        "records/index.html",
        state=state,
        form=form or TrainingRecordForm(formdata=None),
        action_form=ActionForm(formdata=None),
    ), status


@records_ui.route("/")
def index():
    return _render(_controller().state)


@records_ui.route("/records/new")
def new_record():
    ctrl = _controller()
    if not ctrl.state.signed_in:
        return redirect(url_for("auth.login"))
    if not ctrl.state.show_form:
        ctrl.dispatch(ToggleForm())
    return _render(ctrl.state)


@records_ui.route("/records", methods=["POST"])
def create_record():
    ctrl = _controller()
    if not ctrl.state.signed_in:
        return redirect(url_for("auth.login"))

    form = TrainingRecordForm()
    ctrl.dispatch(EditDraft(form.draft_fields()))
    if not form.validate_on_submit():
        # El borrador se queda como estaba, con los errores del formulario
        if not ctrl.state.show_form:
            ctrl.dispatch(ToggleForm())
        return _render(ctrl.state, form=form, status=400)

    state = ctrl.dispatch(SubmitDraft())
    if state.error:
        return _render(state, form=form, status=400)

    flash(state.notice, "success")
    return redirect(url_for("records_ui.index"))


@records_ui.route("/records/cancel", methods=["POST"])
def cancel_record():
    ctrl = _controller()
    ctrl.dispatch(CancelDraft())
    return redirect(url_for("records_ui.index"))


@records_ui.route("/records/<record_id>/delete", methods=["POST"])
def delete_record(record_id: str):
    ctrl = _controller()
    if not ctrl.state.signed_in:
        return redirect(url_for("auth.login"))
    if not ActionForm().validate_on_submit():
        flash("La petición ha caducado, inténtalo de nuevo.", "warning")
        return redirect(url_for("records_ui.index"))

    state = ctrl.dispatch(DeleteRecord(record_id))
    if state.error:
        flash(state.error, "danger")
    return redirect(url_for("records_ui.index"))
