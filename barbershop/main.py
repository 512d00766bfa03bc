import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from barbershop.core.config import get_settings
from barbershop.core.dates import to_iso_utc, utcnow
from barbershop.core.errors import SchedulingError
from barbershop.database import create_db_and_tables, dispose_engine, engine
from barbershop.routers import appointments, barbers, clients, services
from barbershop.scripts.seed import seed_demo_data

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # o ciclo de vida da conexão é do processo, não das rotas
    create_db_and_tables()
    if settings.SEED_DEMO_DATA:
        with Session(engine) as session:
            seed_demo_data(session)
    logger.info(f"API iniciada (ambiente: {settings.ENVIRONMENT})")
    yield
    dispose_engine()
    logger.info("API finalizada")


app = FastAPI(title="Sistema Barbearia", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(clients.router)
app.include_router(barbers.router)
app.include_router(services.router)
app.include_router(appointments.router)


# =========================
# TRATAMENTO DE ERROS
# =========================

@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(expose_details=settings.expose_error_details),
    )


def _field_error(err) -> dict:
    field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
    ctx = err.get("ctx") or {}
    if err.get("type") == "missing":
        message = f"Campo obrigatório: {field}"
    elif err.get("type") == "value_error" and "error" in ctx:
        # mensagem dos nossos validadores, sem o prefixo "Value error, "
        message = str(ctx["error"])
    else:
        message = err.get("msg", "Valor inválido")
    return {"field": field, "message": message}


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [_field_error(err) for err in exc.errors()]
    logger.warning(f"Requisição inválida em {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"error": errors})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Erro inesperado em {request.url.path}")
    content = {"error": "Erro interno do servidor"}
    if settings.expose_error_details:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
def health_check():
    return {"status": "ok", "timestamp": to_iso_utc(utcnow())}
