# runlog/routes/auth.py
from urllib.parse import urlparse, urljoin

from flask import Blueprint, render_template, redirect, url_for, flash, request

from runlog.errors import AuthError
from runlog.forms.login_form import LoginForm, RegisterForm
from runlog.services.app_state import AppController, SignIn, SignOut, SignUp
from runlog.services.auth_gateway import get_auth_gateway

auth_routes = Blueprint("auth", __name__)


def is_safe_url(target: str) -> bool:
    base_url = request.host_url
    test_url = urljoin(base_url, target)
    return (
        urlparse(test_url).scheme in ("http", "https")
        and urlparse(base_url).netloc == urlparse(test_url).netloc
    )


# ---------- Auth ----------
@auth_routes.route("/register", methods=("GET", "POST"))
def register():
    form = RegisterForm()
    if form.validate_on_submit():
        ctrl = AppController(get_auth_gateway())
        state = ctrl.dispatch(SignUp(form.email.data, form.password.data))
        if state.error:
            flash(state.error, "danger")
            return render_template("auth/register.html", form=form), 400
        flash(state.notice, "success")
        return redirect(url_for("auth.login"))

    return render_template("auth/register.html", form=form)


@auth_routes.route("/login", methods=("GET", "POST"))
def login():
    form = LoginForm()
    if form.validate_on_submit():
        ctrl = AppController(get_auth_gateway())
        state = ctrl.dispatch(SignIn(form.email.data, form.password.data))
        if state.signed_in:
            # Respeta 'next' si es seguro; si no, a la lista de entrenamientos
            next_page = request.args.get("next")
            if next_page and is_safe_url(next_page):
                return redirect(next_page)
            return redirect(url_for("records_ui.index"))

        flash(state.error or "Credenciales inválidas.", "danger")
        return render_template("auth/login.html", form=form), 401
    return render_template("auth/login.html", form=form)


@auth_routes.route("/logout")
def logout():
    AppController(get_auth_gateway()).dispatch(SignOut())
    return redirect(url_for("auth.login"))


@auth_routes.route("/confirm/<token>")
def confirm(token: str):
    try:
        get_auth_gateway().confirm_email(token)
    except AuthError as err:
        flash(err.message, "danger")
        return redirect(url_for("auth.register"))
    flash("Email confirmado. Ya puedes iniciar sesión.", "success")
    return redirect(url_for("auth.login"))
