# runlog/forms/record_form.py

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length, Optional, Regexp

class TrainingRecordForm(FlaskForm):
    # Todo texto: el borrador se valida y convierte en AppController
    date = StringField(
        'Fecha',
        validators=[
            DataRequired("La fecha es obligatoria"),
            Regexp(r"^\d{4}-\d{2}-\d{2}$", message="Usa el formato YYYY-MM-DD"),
        ]
    )
    distance = StringField(
        'Distancia (km)',
        validators=[DataRequired("La distancia es obligatoria")]
    )
    duration = StringField(
        'Tiempo (H:MM)',
        validators=[
            DataRequired("El tiempo es obligatorio"),
            Regexp(r"^\s*\d{1,2}:\d{2}\s*$", message="Usa el formato H:MM, p. ej. 1:30"),
        ]
    )
    location = StringField('Lugar', validators=[Optional(), Length(max=200)])
    notes = TextAreaField('Notas', validators=[Optional(), Length(max=2000)])
    submit = SubmitField('Guardar')

    def draft_fields(self) -> dict:
        """Valores tal cual los escribió el usuario."""
        return {
            name: (getattr(self, name).data or "")
            for name in ("date", "distance", "duration", "location", "notes")
        }


class ActionForm(FlaskForm):
    """Formulario vacío para acciones POST (borrar, cancelar): solo CSRF."""
    pass
