from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Instante actual en UTC, naive (así se persisten todas las fechas)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convierte un datetime a UTC naive.

    - aware: se convierte a UTC y se elimina tzinfo
    - naive: se asume que ya está en UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
