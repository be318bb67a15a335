# runlog/cli/users.py
from datetime import datetime

import click
from flask.cli import AppGroup
from runlog import db
from runlog.errors import AuthError
from runlog.models.user import User
from runlog.services.auth_gateway import create_user

users_group = AppGroup("users", help="Gestión de usuarios (alta, confirmación)")


@users_group.command("create")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Contraseña del nuevo usuario")
@click.option("--confirmed/--unconfirmed", default=True,
              help="Marca el email como confirmado (por defecto sí)")
def create(email, password, confirmed):
    """
    Crea un usuario sin pasar por el registro web.
    """
    try:
        user = create_user(email, password, confirmed=confirmed)
    except AuthError as e:
        raise click.ClickException(e.message)
    click.secho(f"Usuario creado: {user.email} ({user.id})", fg="green")


@users_group.command("confirm")
@click.argument("email")
def confirm(email):
    """
    Confirma el email de un usuario (útil cuando no hay envío de correo).
    """
    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        raise click.ClickException(f"No existe el usuario {email!r}")
    if user.confirmed_at:
        click.echo(f"'{user.email}' ya estaba confirmado.")
        return
    user.confirmed_at = datetime.utcnow()
    db.session.commit()
    click.secho(f"Confirmado: {user.email}", fg="green")
