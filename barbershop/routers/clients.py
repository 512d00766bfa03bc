import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, col, select

from barbershop.core.validation import RecordId
from barbershop.database import get_session
from barbershop.models.client import Client, ClientCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, session: Session = Depends(get_session)):
    client = Client(name=payload.name.strip(), phone=payload.phone)

    session.add(client)
    session.commit()
    session.refresh(client)
    return client


@router.get("/")
def list_clients(session: Session = Depends(get_session)):
    # mais recentes primeiro
    return session.exec(
        select(Client).order_by(col(Client.created_at).desc(), col(Client.id).desc())
    ).all()


@router.get("/{client_id}")
def get_client(client_id: RecordId, session: Session = Depends(get_session)):
    client = session.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return client


# =========================
# +1 PONTO DE FIDELIDADE (manual)
# =========================
@router.patch("/{client_id}/points")
def add_point(client_id: RecordId, session: Session = Depends(get_session)):
    client = session.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")

    client.points += 1
    session.add(client)
    session.commit()
    session.refresh(client)

    logger.info(f"Cliente {client.id} agora tem {client.points} pontos")
    return client
