"""
Cálculo de vencimiento de membresías.

Las etiquetas de duración forman un contrato cerrado con el cliente: solo se
aceptan los cinco literales de ``DurationLabel``. Los meses y años se suman con
``relativedelta``, que recorta al último día del mes destino cuando el día no
existe (31 ene + 1 mes = 28/29 feb, 29 feb + 1 año = 28 feb).
"""

import enum
from datetime import datetime
from typing import Union

from dateutil.relativedelta import relativedelta

from gymflow.core.exceptions import ValidationError


class DurationLabel(str, enum.Enum):
    ONE_WEEK = "1 week"
    ONE_MONTH = "1 month"
    THREE_MONTHS = "3 months"
    SIX_MONTHS = "6 months"
    ONE_YEAR = "1 year"


_OFFSETS = {
    DurationLabel.ONE_WEEK: relativedelta(days=7),
    DurationLabel.ONE_MONTH: relativedelta(months=1),
    DurationLabel.THREE_MONTHS: relativedelta(months=3),
    DurationLabel.SIX_MONTHS: relativedelta(months=6),
    DurationLabel.ONE_YEAR: relativedelta(years=1),
}

VALID_DURATIONS = tuple(label.value for label in DurationLabel)


def parse_duration(value: Union[str, DurationLabel, None]) -> DurationLabel:
    """Valida una etiqueta de duración; nunca aplica un valor por defecto."""
    if isinstance(value, DurationLabel):
        return value
    try:
        return DurationLabel(value)
    except ValueError:
        raise ValidationError(
            f"Duración no reconocida: {value!r}. Valores permitidos: {', '.join(VALID_DURATIONS)}"
        )


def compute_expiry(duration: Union[str, DurationLabel], start: datetime) -> datetime:
    """Devuelve ``start`` desplazado por la duración indicada."""
    label = parse_duration(duration)
    return start + _OFFSETS[label]
