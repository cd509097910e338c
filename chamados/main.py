import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from chamados.api.routes import auth, ping, reports, tickets
from chamados.core.config import Settings, get_settings
from chamados.core.logging import configure_logging, init_tracer, shutdown_tracer
from chamados.dependencies.tickets import connect_ticket_service
from chamados.security import BusinessDayGate, StaticCredentialStore, TokenService
from chamados.services.postgres import PostgresDatabase
from chamados.tickets import ImageStore, TicketReportGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - executed by framework
    settings: Settings = app.state.settings
    app.state.image_store.ensure_directory()
    configure_logging(settings)
    tracer_provider = init_tracer(settings)
    app.state.tracer_provider = tracer_provider

    database = PostgresDatabase(dsn=settings.postgres_dsn)
    app.state.database = database
    app.state.ticket_service = None
    if await connect_ticket_service(app.state) is not None:
        logger.info("Database connected")
    else:
        logger.error("Could not connect to the database; ticket routes retry on each request")
    try:
        yield
    finally:
        await database.close()
        shutdown_tracer(tracer_provider)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Requisição inválida", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": str(exc) or "Erro interno do servidor"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    image_store = ImageStore(settings.images_dir)

    app.state.settings = settings
    app.state.image_store = image_store
    app.state.token_service = TokenService(
        settings.secret_key,
        algorithm=settings.token_algorithm,
        lifetime=timedelta(days=settings.token_lifetime_days),
    )
    app.state.credential_verifier = StaticCredentialStore(
        email=settings.login_email,
        password=settings.login_password,
        name=settings.login_name,
    )
    app.state.business_day_gate = BusinessDayGate(settings.business_timezone)
    app.state.report_generator = TicketReportGenerator(settings.report_title, filename=settings.report_filename)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.mount("/assets", StaticFiles(directory=settings.assets_dir, check_dir=False), name="assets")
    app.include_router(ping.router)
    app.include_router(auth.router)
    app.include_router(tickets.router)
    app.include_router(reports.router)
    return app


app = create_app()
