# runlog/cli/export.py
import csv
import os
from datetime import datetime
import click
from flask.cli import AppGroup
from runlog.models.user import User
from runlog.services.auth_gateway import Session
from runlog.services.record_store import RecordStore

export_group = AppGroup("export", help="Comandos de exportación (CSV, etc.)")

FIELDS = ["date", "distance", "duration", "pace", "location", "notes", "created_at"]


@export_group.command("records")
@click.argument("email")
@click.option("--to", "dest_path", default=None,
              help="Ruta destino del CSV (por defecto: instance/records_<email>_YYYYMMDD.csv)")
def export_records(email, dest_path):
    """
    Exporta los entrenamientos de un usuario a CSV (del más reciente al más antiguo).
    """
    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        raise click.ClickException(f"No existe el usuario {email!r}")

    # Ruta por defecto en instance/
    if not dest_path:
        ts = datetime.now().strftime("%Y%m%d")
        safe = user.email.replace("@", "_at_")
        dest_path = os.path.join("instance", f"records_{safe}_{ts}.csv")

    # Asegura carpeta destino
    folder = os.path.dirname(dest_path)
    if folder:
        os.makedirs(folder, exist_ok=True)

    # Misma política que la web: se lee como el propio usuario
    rows = RecordStore(Session.from_user(user)).list()
    with open(dest_path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=FIELDS)
        writer.writeheader()
        for r in rows:
            d = r.to_dict()
            writer.writerow({k: d[k] for k in FIELDS})

    click.secho(f"Exportados {len(rows)} entrenamientos a: {dest_path}", fg="green")
