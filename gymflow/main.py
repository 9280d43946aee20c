import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gymflow.core.logging_config import setup_logging

# Configurar logging ANTES de importar/crear otros elementos
setup_logging()

from gymflow.api.v1.api import api_router
from gymflow.core.broadcast import Broadcaster
from gymflow.core.config import get_settings
from gymflow.core.exceptions import GymFlowError
from gymflow.db.session import init_db

logger = logging.getLogger(__name__)

settings_instance = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Lifespan: Startup iniciado...")

    try:
        init_db()
        logger.info("Lifespan: Tablas verificadas.")
    except Exception as e:
        logger.error(f"Lifespan: Error al inicializar la base de datos: {e}", exc_info=True)
        raise

    # Registro de conexiones y relay de anuncios: viven lo mismo que la app
    broadcaster = Broadcaster(settings_instance)
    await broadcaster.start()
    app.state.broadcaster = broadcaster
    logger.info(
        f"Lifespan: Canal de anuncios iniciado ({'relay Redis' if broadcaster.relay_enabled else 'entrega local'})."
    )

    yield  # Aplicación en ejecución

    logger.info("Lifespan: Shutdown iniciado...")
    try:
        await broadcaster.stop()
        logger.info("Lifespan: Canal de anuncios cerrado.")
    except Exception as e:
        logger.error(f"Lifespan: Error cerrando el canal de anuncios: {e}", exc_info=True)


app = FastAPI(
    title=settings_instance.PROJECT_NAME,
    description=settings_instance.PROJECT_DESCRIPTION,
    version=settings_instance.VERSION,
    openapi_url=f"{settings_instance.API_V1_STR}/openapi.json",
    docs_url=f"{settings_instance.API_V1_STR}/docs",
    redoc_url=f"{settings_instance.API_V1_STR}/redoc",
    lifespan=lifespan,
)


@app.exception_handler(GymFlowError)
async def gymflow_error_handler(request: Request, exc: GymFlowError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.error_kind}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Petición inválida"
    return JSONResponse(status_code=400, content={"message": message, "errorKind": "ValidationError"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:]
        masked = f"Bearer ****{token[-6:]}" if len(token) > 6 else "Bearer ****"
    else:
        masked = "-"
    logger.info(f"Middleware: Recibida petición: {request.method} {request.url.path} (auth: {masked})")

    response = await call_next(request)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Middleware: {request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# Lista de orígenes permitidos para CORS
origins = [str(origin).rstrip("/") for origin in settings_instance.BACKEND_CORS_ORIGINS]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,  # 24 horas en segundos
)

# Incluir routers
app.include_router(api_router, prefix=settings_instance.API_V1_STR)


# Ruta raíz
@app.get("/")
def root():
    return {
        "message": f"Bienvenido a {settings_instance.PROJECT_NAME}",
        "docs": f"{settings_instance.API_V1_STR}/docs",
    }
