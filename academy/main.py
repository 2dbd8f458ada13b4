import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from academy.core.config import settings
from academy.core.exceptions import DomainError
from academy.db.init_db import create_database
from academy.db.base import Base
from academy.db.session import engine
from academy.api.v1.router import api_router
from academy.schemas.common import ErrorResponse
from academy.utils.reminders import reminder_loop

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure the database and tables exist
    create_database()
    Base.metadata.create_all(bind=engine)

    reminder_task = asyncio.create_task(reminder_loop())
    yield

    reminder_task.cancel()
    try:
        await reminder_task
    except asyncio.CancelledError:
        pass


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    body = ErrorResponse(error=exc.code, message=exc.message, details=exc.details or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {"Hello": settings.PROJECT_NAME}
