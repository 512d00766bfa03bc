from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from barbershop.core.dates import UTCDateTime, utcnow


class ClientBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)


class Client(ClientBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # pontos de fidelidade (+1 a cada atendimento concluído)
    points: int = 0

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        sa_column_kwargs={"onupdate": utcnow},
    )


class ClientCreate(ClientBase):
    pass
