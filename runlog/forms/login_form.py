# runlog/forms/login_form.py

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Email, EqualTo, Length

class LoginForm(FlaskForm):
    email = StringField(
        'Email',
        validators=[DataRequired(message="El email es obligatorio"), Email(message="Email inválido")]
    )
    password = PasswordField(
        'Contraseña',
        validators=[DataRequired(message="La contraseña es obligatoria")]
    )
    submit = SubmitField('Iniciar sesión')


class RegisterForm(FlaskForm):
    email = StringField(
        'Email',
        validators=[DataRequired(message="El email es obligatorio"), Email(message="Email inválido")]
    )
    password = PasswordField(
        'Contraseña',
        validators=[
            DataRequired(message="La contraseña es obligatoria"),
            Length(min=6, message="Mínimo 6 caracteres"),
        ]
    )
    confirm = PasswordField(
        'Repite la contraseña',
        validators=[EqualTo('password', message="Las contraseñas no coinciden")]
    )
    submit = SubmitField('Crear cuenta')
