import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from reports_api.config import CORS_ORIGINS, LOG_LEVEL, PORT, PUBLIC_HOST, UPLOAD_DIR
from reports_api.db.db import engine, init_db
from reports_api.routers import auth, reports, users
from reports_api.utils.errors import ImageValidationError
from reports_api.utils.file_store import ensure_upload_dir

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Servidor corriendo en http://%s:%s", PUBLIC_HOST, PORT)
    logger.info("Acceso a imágenes: http://%s:%s/uploads/", PUBLIC_HOST, PORT)
    yield
    engine.dispose()


app = FastAPI(title="Reportes API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded images, served as-is
ensure_upload_dir()
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")

# Register routers
app.include_router(reports.router, prefix="/reports", tags=["Reports"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])


# Error responses carry a "message" key instead of FastAPI's "detail"
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(ImageValidationError)
async def image_validation_handler(request: Request, exc: ImageValidationError):
    logger.warning("Error al subir la imagen: %s", exc)
    return JSONResponse(status_code=400, content={"message": "Error al subir la imagen", "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"message": "Datos de la solicitud inválidos", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Error del servidor"})


@app.get("/")
def root():
    return {"status": "ok"}


def run():
    import uvicorn

    uvicorn.run("reports_api.main:app", host="0.0.0.0", port=PORT)
