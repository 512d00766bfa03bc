"""Fixtures compartilhadas: banco SQLite em memória e fábricas de registros."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barbershop.core.validation import AppointmentCreate
from barbershop.database import get_session
from barbershop.main import app
from barbershop.models.appointment import Appointment  # noqa: F401
from barbershop.models.barber import Barber
from barbershop.models.client import Client
from barbershop.models.service import Service
from barbershop.models.user import User


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="api")
def api_fixture(session: Session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(session: Session):
    def _make(name: str = "João Silva", phone: str | None = "11988887777", points: int = 0) -> Client:
        client = Client(name=name, phone=phone, points=points)
        session.add(client)
        session.commit()
        session.refresh(client)
        return client

    return _make


@pytest.fixture
def make_barber(session: Session):
    def _make(name: str = "Carlos", email: str = "carlos@barbearia.com") -> Barber:
        user = User(name=name, email=email, role="barber")
        session.add(user)
        session.flush()
        barber = Barber(user_id=user.id, specialties=["Corte"])
        session.add(barber)
        session.commit()
        session.refresh(barber)
        return barber

    return _make


@pytest.fixture
def make_service(session: Session):
    def _make(name: str = "Corte", price: float = 50.0, duration: int = 30) -> Service:
        service = Service(name=name, price=price, duration=duration)
        session.add(service)
        session.commit()
        session.refresh(service)
        return service

    return _make


@pytest.fixture
def records(make_client, make_barber, make_service) -> SimpleNamespace:
    return SimpleNamespace(client=make_client(), barber=make_barber(), service=make_service())


@pytest.fixture
def appointment_payload(records: SimpleNamespace):
    def _build(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "clientId": records.client.id,
            "barberId": records.barber.id,
            "serviceId": records.service.id,
            "date": "2024-03-15",
            "time": "14:30",
            "revenue": 50,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def appointment_input(appointment_payload):
    def _build(**overrides: Any) -> AppointmentCreate:
        return AppointmentCreate.model_validate(appointment_payload(**overrides))

    return _build
