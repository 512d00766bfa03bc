from typing import List, Optional
from datetime import datetime
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from barbershop.core.dates import UTCDateTime, utcnow


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # perfil (nome/email) fica no User
    user_id: int = Field(foreign_key="user.id", unique=True)

    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    available: bool = True

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        sa_column_kwargs={"onupdate": utcnow},
    )


class BarberCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    specialties: List[str] = []


class BarberUpdate(BarberCreate):
    pass
