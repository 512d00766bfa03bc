"""Modelos de entrada do agendador.

Os erros seguem o formato ``{error: [{field, message}]}`` via o handler de
``RequestValidationError`` em ``barbershop.main``. Campos ausentes (ou
``None``/string vazia) e erros de formato são reportados juntos, na ordem
dos campos.
"""
import math
import re
from datetime import datetime
from typing import Annotated, Any, Optional

from fastapi import Path
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from barbershop.core.dates import canonical_date

# maior id que cabe num INTEGER de 64 bits
MAX_ID = 2**63 - 1

REFERENCE_MESSAGES = {
    "client_id": "ID do cliente inválido",
    "barber_id": "ID do barbeiro inválido",
    "service_id": "ID do serviço inválido",
    "exclude_appointment_id": "ID do agendamento inválido",
}

# aceita "9:30" e "09:30"; guardamos sempre com dois dígitos
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_reference_id(value: Any) -> Optional[int]:
    """Id inteiro entre 1 e MAX_ID (int ou string de dígitos); None se malformado."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal() or len(text) > 19:
            return None
        value = int(text)
    if isinstance(value, int) and 1 <= value <= MAX_ID:
        return value
    return None


def normalize_time(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"horário inválido: {value!r}")
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"horário inválido: {value!r}")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def parse_revenue(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"valor inválido: {value!r}")
    # NaN e Infinity chegam pelo json.loads do Starlette
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"valor inválido: {value!r}")
    return float(value)


def _reference(value: Any, field_name: str) -> int:
    parsed = parse_reference_id(value)
    if parsed is None:
        raise ValueError(REFERENCE_MESSAGES[field_name])
    return parsed


def _day(value: Any) -> datetime:
    try:
        return canonical_date(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("Data inválida")


def _time(value: Any) -> str:
    try:
        return normalize_time(value)
    except ValueError:
        raise ValueError("Horário inválido")


def _flag(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise ValueError("Use 'true' ou 'false'")


# tipos para parâmetros de query/path
CalendarDay = Annotated[datetime, BeforeValidator(_day)]
BarberFilter = Annotated[int, BeforeValidator(lambda value: _reference(value, "barber_id"))]
CompletedFlag = Annotated[bool, BeforeValidator(_flag)]
RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]


class _SlotInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        # None e string vazia contam como campo ausente
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if not _is_missing(value)}
        return data


class AppointmentCreate(_SlotInput):
    """Corpo de criação/edição (PUT substitui todos os campos)."""

    client_id: int = Field(alias="clientId")
    barber_id: int = Field(alias="barberId")
    service_id: int = Field(alias="serviceId")
    date: datetime  # canônica (12:00 UTC)
    time: str
    revenue: float

    @field_validator("client_id", "barber_id", "service_id", mode="before")
    @classmethod
    def validate_reference(cls, value: Any, info: ValidationInfo) -> int:
        return _reference(value, info.field_name)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value: Any) -> datetime:
        return _day(value)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, value: Any) -> str:
        return _time(value)

    @field_validator("revenue", mode="before")
    @classmethod
    def validate_revenue(cls, value: Any) -> float:
        try:
            return parse_revenue(value)
        except ValueError:
            raise ValueError("Valor inválido")


class AvailabilityQuery(_SlotInput):
    barber_id: int = Field(alias="barberId")
    date: datetime
    time: str
    exclude_appointment_id: Optional[int] = Field(default=None, alias="excludeAppointmentId")

    @field_validator("barber_id", "exclude_appointment_id", mode="before")
    @classmethod
    def validate_reference(cls, value: Any, info: ValidationInfo) -> int:
        return _reference(value, info.field_name)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value: Any) -> datetime:
        return _day(value)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, value: Any) -> str:
        return _time(value)
