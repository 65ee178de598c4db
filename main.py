import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gourls_app.config import settings
from gourls_app.database.connection import engine, Base, SessionLocal
from gourls_app.api.v1 import urls, redirect
from gourls_app.services.reserved_words import ReservedWords
from gourls_app.services.seed_service import seed_system_entries

# Import models to ensure they're registered with Base
from gourls_app.models import UrlEntry

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger("gourls")

# Create database tables
Base.metadata.create_all(bind=engine)


def seed_database() -> None:
    """Best-effort: a failure here is logged and the app starts anyway."""
    db = SessionLocal()
    try:
        seed_system_entries(db)
    except Exception:
        db.rollback()
        logger.exception("Could not seed database")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fatal on purpose: no reserved words, no service
    app.state.reserved_words = ReservedWords.from_csv(settings.reserved_words)

    if settings.seed_on_startup:
        seed_database()

    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Go links: short names that redirect to long URLs",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(urls.router, prefix="/api/v1")
# Catch-all /{short_name}: must stay last
app.include_router(redirect.router)
