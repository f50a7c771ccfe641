import logging
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from .routers.api import api_router
from .db.session import Base, engine
from .core.config import settings
from .core.errors import AppError, InternalError
from .core.logger import configure_logging
from .lib.storage import MEDIA_URL_PREFIX

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="reelbox API")

@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("server.started port=%s storage=%s", settings.port, settings.storage_backend)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request.failed path=%s status=%s message=%s", request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=int(exc.status_code), content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("request.unhandled path=%s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"success": False, "message": "Malformed request body"})


@app.get("/health")
def health():
    return {"status": "Server is running"}

app.include_router(api_router)

if settings.storage_backend == "local":
    Path(settings.media_dir).mkdir(parents=True, exist_ok=True)
    app.mount(MEDIA_URL_PREFIX, StaticFiles(directory=settings.media_dir, check_dir=False), name="media")
