# runlog/utils/calculos.py

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from runlog.errors import InvalidInput

DURATION_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

_ONE = Decimal("1")
_SIXTY = Decimal("60")


def parse_duration(duration):
    """
    Convierte 'H:MM' o 'HH:MM' en (horas, minutos).
    Los minutos deben estar entre 0 y 59.
    """
    if not isinstance(duration, str):
        raise InvalidInput("La duración debe tener formato H:MM.", field="duration")
    m = DURATION_RE.match(duration.strip())
    if not m:
        raise InvalidInput(
            f"Duración inválida: {duration!r} (usa H:MM, p. ej. 1:30).", field="duration"
        )
    hours, minutes = int(m.group(1)), int(m.group(2))
    if minutes > 59:
        raise InvalidInput("Los minutos de la duración deben ser 00-59.", field="duration")
    return hours, minutes


def parse_distance(value) -> Decimal:
    """
    Distancia en km como Decimal finito y > 0.
    Acepta números o texto ("10", "10.5", "10,5").
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput("La distancia es obligatoria.", field="distance")
    try:
        if isinstance(value, Decimal):
            d = value
        elif isinstance(value, str):
            d = Decimal(value.strip().replace(",", "."))
        else:
            # str() evita arrastrar el error binario de los float
            d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Distancia inválida: {value!r}.", field="distance")

    if not d.is_finite() or d <= 0:
        raise InvalidInput("La distancia debe ser mayor que 0 km.", field="distance")
    return d


def parse_date(value) -> date:
    """Fecha ISO (YYYY-MM-DD) o date."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidInput(f"Fecha inválida: {value!r} (usa YYYY-MM-DD).", field="date")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidInput(f"Fecha inválida: {value!r} (usa YYYY-MM-DD).", field="date")


def calculate_pace(distance, duration) -> str:
    """
    Ritmo en min:seg por km a partir de distancia (km) y duración ('H:MM').

      total = horas*60 + minutos
      ritmo = total / distancia
      min   = floor(ritmo)
      seg   = round((ritmo - min) * 60)   # medio hacia arriba

    Si los segundos redondean a 60 se suman al minuto.
    Distancia 0 (o negativa) -> InvalidInput, nunca 'Infinity' ni 'NaN'.
    """
    km = parse_distance(distance)
    hours, minutes = parse_duration(duration)

    total = Decimal(hours * 60 + minutes)
    pace = total / km
    pace_min = math.floor(pace)
    pace_sec = int(((pace - pace_min) * _SIXTY).quantize(_ONE, rounding=ROUND_HALF_UP))
    if pace_sec == 60:
        pace_min += 1
        pace_sec = 0
    return f"{pace_min}:{pace_sec:02d}/km"
