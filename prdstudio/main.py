import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prdstudio import __version__
from prdstudio.api.http import documents_router, health_router, projects_router
from prdstudio.core.config import settings
from prdstudio.core.db import SessionLocal, create_tables
from prdstudio.core.logging_config import configure_logging
from prdstudio.db.seed import seed_demo_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await create_tables()
    if settings.seed_demo_data:
        async with SessionLocal() as session:
            await seed_demo_data(session)
    logger.info("PRD Studio API started, version %s", __version__)
    yield


app = FastAPI(
    title="PRD Studio",
    description="Редактор PRD-документов с редактируемой таблицей документов",
    version=__version__,
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Ошибки отдаются в формате {"message": ...}"""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Rejected request body: %s", exc.errors(),
        extra={"method": request.method, "path": request.url.path}
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid document data", "errors": jsonable_encoder(exc.errors())},
    )


# Подключаем роутеры
app.include_router(health_router)
app.include_router(projects_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "PRD Studio API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }
