# ───────────────────────────────────────────────────────────────
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# ─── Local imports ─────────────────────────────────────────────
from src.certifier.config import settings
from src.certifier.config.s3_config import S3_BUCKET_NAME, create_s3_client, get_s3_config_status
from src.certifier.db.session import Database
from src.certifier.utils.exceptions import (
    CertificateError,
    certificate_error_handler,
    unexpected_error_handler,
    validation_error_handler,
)
from src.certifier.utils.file import S3BlobStore
from src.certifier.utils.time import get_utc_time

# Import routers
from src.certifier.routers import admin_router, certificate_router

# ─── Env setup ─────────────────────────────────────────────
load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ─── FastAPI app ───────────────────────────────────────────────
app = FastAPI(
    title="Internship Certificate Portal",
    description="Issues internship completion certificates and reports issuance statistics",
    version="1.0.0",
)

# ─── Middlewares ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Error handlers ────────────────────────────────────────────
app.add_exception_handler(CertificateError, certificate_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)


# ─── Startup / shutdown ────────────────────────────────────────
@app.on_event("startup")
async def on_startup():
    logger.info("Connecting to the intern record store...")
    database = Database(settings.DATABASE_URL)
    try:
        database.connect()
    except Exception as e:
        logger.error(f"Failed to connect to the database: {e}", exc_info=True)
        raise
    app.state.database = database

    app.state.blob_store = S3BlobStore(create_s3_client(), S3_BUCKET_NAME)
    app.state.allow_list = settings.load_verified_emails()


@app.on_event("shutdown")
async def on_shutdown():
    database = getattr(app.state, "database", None)
    if database is not None:
        database.disconnect()


# ─── Routers ───────────────────────────────────────────────────
app.include_router(certificate_router.router, prefix="/api", tags=["Certificates"])
app.include_router(admin_router.router, prefix="/api/admin", tags=["Admin"])


# ─── Simple endpoints ──────────────────────────────────────────
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Internship Certificate Portal API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }


@app.get("/health")
async def health_check():
    database = getattr(app.state, "database", None)
    return {
        "status": "ok",
        "timestamp": get_utc_time().isoformat(),
        "database_connected": bool(database and database.is_connected),
        "storage": get_s3_config_status(),
    }
