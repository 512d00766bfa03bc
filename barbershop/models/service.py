from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from barbershop.core.dates import UTCDateTime, utcnow


class ServiceBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    duration: int = Field(gt=0)  # minutos
    description: Optional[str] = None


class Service(ServiceBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        sa_column_kwargs={"onupdate": utcnow},
    )


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(SQLModel):
    # só os campos enviados mudam
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = None
