from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.core import scheduler
from barbershop.core.validation import RecordId
from barbershop.database import get_session
from barbershop.models.service import Service, ServiceCreate, ServiceUpdate


router = APIRouter(
    prefix="/api/services",
    tags=["services"]
)


def _get_service(session: Session, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Serviço não encontrado")
    return service


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
):
    service = Service.model_validate(payload)

    session.add(service)
    session.commit()
    session.refresh(service)

    return service


@router.get("/")
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.name)).all()


@router.get("/{service_id}")
def get_service(service_id: RecordId, session: Session = Depends(get_session)):
    return _get_service(session, service_id)


@router.put("/{service_id}")
def update_service(
    service_id: RecordId,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
):
    service = _get_service(session, service_id)

    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(service, field, value)

    session.add(service)
    session.commit()
    session.refresh(service)

    return service


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(service_id: RecordId, session: Session = Depends(get_session)):
    service = _get_service(session, service_id)

    if scheduler.has_future_appointments(session, service_id=service.id):
        raise HTTPException(
            status_code=400,
            detail="Não é possível excluir um serviço com agendamentos futuros",
        )

    session.delete(service)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=400, detail="Serviço possui agendamentos vinculados")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
