from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from barbershop.database import get_session
from barbershop.core import scheduler
from barbershop.core.display import present_appointment, present_appointments
from barbershop.core.validation import (
    AppointmentCreate,
    AvailabilityQuery,
    BarberFilter,
    CalendarDay,
    CompletedFlag,
    RecordId,
)


router = APIRouter(prefix="/api/appointments", tags=["appointments"])


# =========================
# VERIFICAR DISPONIBILIDADE
# (pré-checagem da tela; criar/editar checam de novo)
# =========================
@router.post("/check-availability")
def check_availability(
    query: AvailabilityQuery,
    session: Session = Depends(get_session),
):
    result = scheduler.check_availability(session, query)
    return result.to_dict()


# =========================
# CRIAR AGENDAMENTO
# =========================
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    session: Session = Depends(get_session),
):
    appt = scheduler.create_appointment(session, payload)
    return present_appointment(session, appt)


# =========================
# LISTAR AGENDAMENTOS
# GET /api/appointments/?date=2024-03-15&barberId=1&completed=false
# =========================
@router.get("/")
def list_appointments(
    date: Optional[CalendarDay] = Query(None),
    barber_id: Optional[BarberFilter] = Query(None, alias="barberId"),
    completed: Optional[CompletedFlag] = Query(None),
    session: Session = Depends(get_session),
):
    appts = scheduler.list_appointments(session, date=date, barber_id=barber_id, completed=completed)
    return present_appointments(session, appts)


# =========================
# EDITAR AGENDAMENTO (substituição completa)
# =========================
@router.put("/{appointment_id}")
def update_appointment(
    appointment_id: RecordId,
    payload: AppointmentCreate,
    session: Session = Depends(get_session),
):
    appt = scheduler.update_appointment(session, appointment_id, payload)
    return present_appointment(session, appt)


# =========================
# EXCLUIR (só pendentes)
# =========================
@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: RecordId,
    session: Session = Depends(get_session),
):
    scheduler.delete_appointment(session, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# CONCLUIR (+1 ponto pro cliente)
# =========================
@router.patch("/{appointment_id}/complete")
def complete_appointment(
    appointment_id: RecordId,
    session: Session = Depends(get_session),
):
    appt = scheduler.complete_appointment(session, appointment_id)
    return present_appointment(session, appt)
