from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.core import scheduler
from barbershop.core.validation import RecordId
from barbershop.database import get_session
from barbershop.models.barber import Barber, BarberCreate, BarberUpdate
from barbershop.models.user import User

router = APIRouter(prefix="/api/barbers", tags=["barbers"])


def _barber_out(barber: Barber, user: User):
    return {
        "id": barber.id,
        "userId": barber.user_id,
        "name": user.name if user else None,
        "email": user.email if user else None,
        "specialties": barber.specialties or [],
        "available": barber.available,
    }


def _clean_specialties(specialties: List[str]) -> List[str]:
    return [s.strip() for s in specialties if s.strip()]


def _get_barber(session: Session, barber_id: int) -> Barber:
    barber = session.get(Barber, barber_id)
    if not barber:
        raise HTTPException(status_code=404, detail="Barbeiro não encontrado")
    return barber


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_barber(payload: BarberCreate, session: Session = Depends(get_session)):
    email = payload.email.strip().lower()

    existing_user = session.exec(
        select(User).where(User.email == email)
    ).first()

    if existing_user:
        raise HTTPException(status_code=400, detail="Email já cadastrado")

    user = User(name=payload.name.strip(), email=email, role="barber")
    session.add(user)
    session.flush()

    barber = Barber(
        user_id=user.id,
        specialties=_clean_specialties(payload.specialties),
    )
    session.add(barber)
    session.commit()
    session.refresh(barber)
    session.refresh(user)

    return _barber_out(barber, user)


@router.get("/")
def list_barbers(session: Session = Depends(get_session)):
    rows = session.exec(
        select(Barber, User).where(Barber.user_id == User.id).order_by(User.name)
    ).all()
    return [_barber_out(barber, user) for barber, user in rows]


@router.get("/{barber_id}")
def get_barber(barber_id: RecordId, session: Session = Depends(get_session)):
    barber = _get_barber(session, barber_id)
    return _barber_out(barber, session.get(User, barber.user_id))


# =========================
# EDITAR (nome, email, especialidades)
# =========================
@router.put("/{barber_id}")
def update_barber(
    barber_id: RecordId,
    payload: BarberUpdate,
    session: Session = Depends(get_session),
):
    barber = _get_barber(session, barber_id)
    email = payload.email.strip().lower()

    # email não pode ser de outro usuário
    taken = session.exec(
        select(User).where(User.email == email, User.id != barber.user_id)
    ).first()
    if taken:
        raise HTTPException(status_code=400, detail="Email já está em uso")

    user = session.get(User, barber.user_id)
    user.name = payload.name.strip()
    user.email = email
    barber.specialties = _clean_specialties(payload.specialties)

    session.add(user)
    session.add(barber)
    session.commit()
    session.refresh(barber)
    session.refresh(user)

    return _barber_out(barber, user)


# =========================
# EXCLUIR (barbeiro + usuário)
# =========================
@router.delete("/{barber_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_barber(barber_id: RecordId, session: Session = Depends(get_session)):
    barber = _get_barber(session, barber_id)

    if scheduler.has_future_appointments(session, barber_id=barber.id):
        raise HTTPException(
            status_code=400,
            detail="Não é possível excluir um barbeiro com agendamentos futuros",
        )

    user = session.get(User, barber.user_id)
    session.delete(barber)
    if user:
        session.delete(user)
    try:
        session.commit()
    except IntegrityError:
        # agendamentos antigos ainda apontam para o barbeiro
        session.rollback()
        raise HTTPException(status_code=400, detail="Barbeiro possui agendamentos vinculados")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
