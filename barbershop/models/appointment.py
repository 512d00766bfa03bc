from typing import Optional
from datetime import datetime
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from barbershop.core.dates import UTCDateTime, utcnow


class Appointment(SQLModel, table=True):
    # barreira final contra dois agendamentos no mesmo horário
    __table_args__ = (
        UniqueConstraint("barber_id", "date", "time", name="uq_appointment_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="client.id", index=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)

    # dia canônico: sempre às 12:00 UTC
    date: datetime = Field(sa_type=UTCDateTime, index=True)
    # "HH:MM"
    time: str = Field(max_length=5)

    revenue: float

    completed: bool = Field(default=False, index=True)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        sa_column_kwargs={"onupdate": utcnow},
    )
