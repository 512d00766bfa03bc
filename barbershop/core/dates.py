from datetime import date, datetime, timezone
from typing import Optional, Union

from sqlalchemy.types import DateTime, TypeDecorator

DateInput = Union[str, date, datetime]

# hora fixa do dia "canônico" (UTC)
CANONICAL_HOUR = 12


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_calendar_date(value: DateInput) -> date:
    """Dia do calendário (UTC) de uma data ISO ou de um date/datetime.

    Datetimes com fuso são convertidos para UTC antes de pegar o dia;
    datetimes sem fuso são tratados como UTC. Levanta ValueError.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone(timezone.utc)
            except OverflowError as exc:
                # ex.: 0001-01-01T00:30+01:00 cai no ano 0 em UTC
                raise ValueError(f"data fora do intervalo: {value!r}") from exc
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"data inválida: {value!r}")

    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return parse_calendar_date(datetime.fromisoformat(text))


def canonical_date(value: DateInput) -> datetime:
    """Mesmo dia do calendário às 12:00:00 UTC.

    Toda data gravada ou comparada passa por aqui: "mesmo dia" é igualdade
    exata do valor retornado.
    """
    day = parse_calendar_date(value)
    return datetime(day.year, day.month, day.day, CANONICAL_HOUR, 0, 0, tzinfo=timezone.utc)


def to_iso_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat() + "Z"


class UTCDateTime(TypeDecorator):
    """Grava sempre em UTC (sem fuso na coluna) e devolve datetime com UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
