import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from barbershop.core.dates import DateInput, canonical_date, utcnow
from barbershop.core.errors import (
    AlreadyCompletedError,
    EntityReferenceError,
    InfrastructureError,
    NotFoundError,
    SlotConflictError,
)
from barbershop.core.validation import AppointmentCreate, AvailabilityQuery
from barbershop.models.appointment import Appointment
from barbershop.models.barber import Barber
from barbershop.models.client import Client
from barbershop.models.service import Service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Availability:
    available: bool
    conflict_id: Optional[int] = None
    conflict_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        conflict = None
        if not self.available:
            conflict = {"id": self.conflict_id, "time": self.conflict_time}
        return {"available": self.available, "conflictingAppointment": conflict}


@contextmanager
def _storage(session: Session, action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception(f"Falha no banco ao {action}")
        raise InfrastructureError(details=str(exc)) from exc


def _get_appointment(session: Session, appointment_id: int) -> Appointment:
    appt = session.get(Appointment, appointment_id)
    if not appt:
        raise NotFoundError()
    return appt


def _resolve_references(session: Session, data: AppointmentCreate):
    if session.get(Client, data.client_id) is None:
        raise EntityReferenceError("clientId", "Cliente não encontrado")
    if session.get(Barber, data.barber_id) is None:
        raise EntityReferenceError("barberId", "Barbeiro não encontrado")
    if session.get(Service, data.service_id) is None:
        raise EntityReferenceError("serviceId", "Serviço não encontrado")


# =========================
# DISPONIBILIDADE
# =========================

def find_conflict(
    session: Session,
    barber_id: int,
    day: datetime,
    time: str,
    exclude_id: Optional[int] = None,
) -> Optional[Appointment]:
    """Agendamento que ocupa (barbeiro, dia canônico, horário), se houver."""
    statement = select(Appointment).where(
        Appointment.barber_id == barber_id,
        Appointment.date == day,
        Appointment.time == time,
    )
    if exclude_id is not None:
        statement = statement.where(Appointment.id != exclude_id)
    return session.exec(statement).first()


def check_availability(session: Session, query: AvailabilityQuery) -> Availability:
    with _storage(session, "verificar disponibilidade"):
        conflict = find_conflict(
            session, query.barber_id, query.date, query.time, query.exclude_appointment_id
        )
    if conflict is None:
        return Availability(available=True)
    return Availability(available=False, conflict_id=conflict.id, conflict_time=conflict.time)


def _ensure_slot_free(session: Session, data: AppointmentCreate, exclude_id: Optional[int] = None):
    conflict = find_conflict(session, data.barber_id, data.date, data.time, exclude_id)
    if conflict is not None:
        logger.warning(
            f"Horário ocupado: barbeiro {data.barber_id} em {data.date.date()} {data.time} "
            f"(agendamento {conflict.id})"
        )
        raise SlotConflictError(conflict.id, conflict.time)


def _commit_slot(session: Session, data: AppointmentCreate, exclude_id: Optional[int] = None):
    # a constraint uq_appointment_slot pega quem passou na checagem ao mesmo tempo
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        conflict = find_conflict(session, data.barber_id, data.date, data.time, exclude_id)
        if conflict is None:
            raise
        logger.warning(
            f"Conflito detectado no commit: barbeiro {data.barber_id} em "
            f"{data.date.date()} {data.time} (agendamento {conflict.id})"
        )
        raise SlotConflictError(conflict.id, conflict.time) from exc


# =========================
# CRIAR / ALTERAR / EXCLUIR
# =========================

def create_appointment(session: Session, data: AppointmentCreate) -> Appointment:
    with _storage(session, "criar agendamento"):
        _resolve_references(session, data)
        _ensure_slot_free(session, data)

        appt = Appointment(
            client_id=data.client_id,
            barber_id=data.barber_id,
            service_id=data.service_id,
            date=data.date,
            time=data.time,
            revenue=data.revenue,
            completed=False,
        )
        session.add(appt)
        _commit_slot(session, data)
        session.refresh(appt)

    logger.info(
        f"Agendamento {appt.id} criado: barbeiro {appt.barber_id} em {data.date.date()} {appt.time}"
    )
    return appt


def update_appointment(session: Session, appointment_id: int, data: AppointmentCreate) -> Appointment:
    """Substitui todos os campos editáveis do agendamento.

    Mesmas regras da criação, mas a checagem de horário ignora o próprio
    agendamento (senão ele conflitaria consigo mesmo).
    """
    with _storage(session, "atualizar agendamento"):
        appt = _get_appointment(session, appointment_id)
        if appt.completed:
            raise AlreadyCompletedError("Não é possível alterar um agendamento já concluído")

        _resolve_references(session, data)
        _ensure_slot_free(session, data, exclude_id=appt.id)

        appt.client_id = data.client_id
        appt.barber_id = data.barber_id
        appt.service_id = data.service_id
        appt.date = data.date
        appt.time = data.time
        appt.revenue = data.revenue

        session.add(appt)
        _commit_slot(session, data, exclude_id=appointment_id)
        session.refresh(appt)

    logger.info(f"Agendamento {appt.id} atualizado: {data.date.date()} {appt.time}")
    return appt


def delete_appointment(session: Session, appointment_id: int):
    with _storage(session, "excluir agendamento"):
        appt = _get_appointment(session, appointment_id)
        # concluído vira histórico de receita
        if appt.completed:
            raise AlreadyCompletedError("Não é possível excluir um agendamento já concluído")

        session.delete(appt)
        session.commit()

    logger.info(f"Agendamento {appointment_id} excluído")


# =========================
# CONCLUIR
# =========================

def complete_appointment(session: Session, appointment_id: int) -> Appointment:
    """Marca como concluído e dá 1 ponto ao cliente, na mesma transação.

    A conclusão é um UPDATE condicional (completed = false): se outra
    requisição concluiu antes, nada muda e o cliente não ganha ponto.
    """
    with _storage(session, "concluir agendamento"):
        appt = _get_appointment(session, appointment_id)
        if appt.completed:
            raise AlreadyCompletedError()

        now = utcnow()
        finished = session.exec(
            update(Appointment)
            .where(col(Appointment.id) == appt.id, col(Appointment.completed).is_(False))
            .values(completed=True, completed_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if finished.rowcount == 0:
            session.rollback()
            raise AlreadyCompletedError()

        awarded = session.exec(
            update(Client)
            .where(col(Client.id) == appt.client_id)
            .values(points=col(Client.points) + 1)
            .execution_options(synchronize_session=False)
        )
        if awarded.rowcount == 0:
            logger.warning(
                f"Cliente {appt.client_id} não existe mais; agendamento {appt.id} concluído sem pontos"
            )

        session.commit()
        session.refresh(appt)

    logger.info(f"Agendamento {appt.id} concluído; +1 ponto para o cliente {appt.client_id}")
    return appt


# =========================
# LISTAR
# =========================

def list_appointments(
    session: Session,
    date: Optional[DateInput] = None,
    barber_id: Optional[int] = None,
    completed: Optional[bool] = None,
) -> List[Appointment]:
    statement = select(Appointment)
    if date is not None:
        # o filtro de data passa pela mesma canonicalização do armazenamento
        statement = statement.where(Appointment.date == canonical_date(date))
    if barber_id is not None:
        statement = statement.where(Appointment.barber_id == barber_id)
    if completed is not None:
        statement = statement.where(Appointment.completed == completed)

    statement = statement.order_by(
        col(Appointment.date), col(Appointment.time), col(Appointment.id)
    )

    with _storage(session, "listar agendamentos"):
        return list(session.exec(statement).all())


def has_future_appointments(
    session: Session,
    barber_id: Optional[int] = None,
    service_id: Optional[int] = None,
) -> bool:
    """Se há agendamento de hoje (UTC) em diante para o barbeiro/serviço."""
    statement = select(Appointment).where(Appointment.date >= canonical_date(utcnow()))
    if barber_id is not None:
        statement = statement.where(Appointment.barber_id == barber_id)
    if service_id is not None:
        statement = statement.where(Appointment.service_id == service_id)

    with _storage(session, "verificar agendamentos futuros"):
        return session.exec(statement.limit(1)).first() is not None
