# runlog/cli/__init__.py
from .users import users_group
from .export import export_group

def register_cli(app):
    """Registra los grupos y comandos CLI de la app."""
    app.cli.add_command(users_group)
    app.cli.add_command(export_group)
