import logging

from sqlmodel import Session, SQLModel, create_engine

from barbershop.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _build_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        # SQLite (dev/local): sessões atravessam as threads do FastAPI
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = _build_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def create_db_and_tables():
    # importa os modelos para registrar as tabelas no metadata
    from barbershop.models import appointment, barber, client, service, user  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info(f"Tabelas verificadas em {engine.url.render_as_string(hide_password=True)}")


def dispose_engine():
    engine.dispose()
    logger.info("Conexões com o banco encerradas")


def get_session():
    with Session(engine) as session:
        yield session
