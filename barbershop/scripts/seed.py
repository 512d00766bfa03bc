import logging

from sqlmodel import Session, select

from barbershop.models.barber import Barber
from barbershop.models.client import Client
from barbershop.models.service import Service
from barbershop.models.user import User

logger = logging.getLogger(__name__)


BARBER_EMAIL = "barbeiro@barbearia.com"
BARBER_NAME = "Barbeiro Demo"
CLIENT_NAME = "Cliente Demo"

SERVICES = [
    dict(name="Corte", duration=30, price=40.0),
    dict(name="Barba", duration=20, price=30.0),
    dict(name="Corte + Barba", duration=50, price=65.0),
]


def seed_demo_data(session: Session) -> dict:
    """Cria barbeiro, cliente e serviços de exemplo. Pode rodar várias vezes."""
    # 1) usuário + barbeiro
    user = session.exec(select(User).where(User.email == BARBER_EMAIL)).first()
    if not user:
        user = User(name=BARBER_NAME, email=BARBER_EMAIL, role="barber")
        session.add(user)
        session.flush()

    barber = session.exec(select(Barber).where(Barber.user_id == user.id)).first()
    if not barber:
        barber = Barber(user_id=user.id, specialties=["Corte", "Barba"])
        session.add(barber)

    # 2) serviços (se não existir)
    services = []
    for cfg in SERVICES:
        service = session.exec(select(Service).where(Service.name == cfg["name"])).first()
        if not service:
            service = Service(**cfg)
            session.add(service)
        services.append(service)

    # 3) cliente
    client = session.exec(select(Client).where(Client.name == CLIENT_NAME)).first()
    if not client:
        client = Client(name=CLIENT_NAME, phone="11999999999")
        session.add(client)

    session.commit()
    for obj in [barber, client, *services]:
        session.refresh(obj)

    logger.info(
        f"Seed concluído: barbeiro {barber.id} ({BARBER_EMAIL}), cliente {client.id}, "
        f"serviços {[s.id for s in services]}"
    )
    return {"barber": barber, "client": client, "services": services}


def main():
    from barbershop.database import create_db_and_tables, engine

    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as session:
        seed_demo_data(session)


if __name__ == "__main__":
    main()
