from typing import Optional
from sqlmodel import SQLModel, Field


class UserBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(index=True, unique=True)
    role: str = "barber"


class User(UserBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
