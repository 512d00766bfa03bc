"""Dados de exibição (cliente/barbeiro/serviço) anexados aos agendamentos.

É só leitura para apresentação: nada daqui é persistido no agendamento.
"""
from typing import Any, Dict, List, Optional, Sequence

from sqlmodel import Session, select

from barbershop.core.dates import to_iso_utc
from barbershop.models.appointment import Appointment
from barbershop.models.barber import Barber
from barbershop.models.client import Client
from barbershop.models.service import Service
from barbershop.models.user import User


def _client_view(client: Optional[Client]) -> Optional[Dict[str, Any]]:
    if not client:
        return None
    return {"id": client.id, "name": client.name, "phone": client.phone, "points": client.points}


def _barber_view(barber: Optional[Barber], user: Optional[User]) -> Optional[Dict[str, Any]]:
    if not barber:
        return None
    return {
        "id": barber.id,
        "name": user.name if user else None,
        "email": user.email if user else None,
        "specialties": list(barber.specialties or []),
    }


def _service_view(service: Optional[Service]) -> Optional[Dict[str, Any]]:
    if not service:
        return None
    return {
        "id": service.id,
        "name": service.name,
        "price": service.price,
        "duration": service.duration,
    }


def appointment_view(
    appt: Appointment,
    client: Optional[Client] = None,
    barber: Optional[Barber] = None,
    user: Optional[User] = None,
    service: Optional[Service] = None,
) -> Dict[str, Any]:
    return {
        "id": appt.id,
        "clientId": appt.client_id,
        "barberId": appt.barber_id,
        "serviceId": appt.service_id,
        "date": to_iso_utc(appt.date),
        "time": appt.time,
        "revenue": appt.revenue,
        "completed": appt.completed,
        "completedAt": to_iso_utc(appt.completed_at),
        "createdAt": to_iso_utc(appt.created_at),
        "updatedAt": to_iso_utc(appt.updated_at),
        "client": _client_view(client),
        "barber": _barber_view(barber, user),
        "service": _service_view(service),
    }


def _by_id(session: Session, model, ids) -> Dict[int, Any]:
    ids = set(ids)
    if not ids:
        return {}
    rows = session.exec(select(model).where(model.id.in_(ids))).all()
    return {row.id: row for row in rows}


def present_appointments(session: Session, appts: Sequence[Appointment]) -> List[Dict[str, Any]]:
    # carrega tudo em lote (um select por tabela) em vez de um por agendamento
    client_map = _by_id(session, Client, (a.client_id for a in appts))
    barber_map = _by_id(session, Barber, (a.barber_id for a in appts))
    user_map = _by_id(session, User, (b.user_id for b in barber_map.values()))
    service_map = _by_id(session, Service, (a.service_id for a in appts))

    result = []
    for a in appts:
        barber = barber_map.get(a.barber_id)
        result.append(
            appointment_view(
                a,
                client=client_map.get(a.client_id),
                barber=barber,
                user=user_map.get(barber.user_id) if barber else None,
                service=service_map.get(a.service_id),
            )
        )
    return result


def present_appointment(session: Session, appt: Appointment) -> Dict[str, Any]:
    return present_appointments(session, [appt])[0]
