import logging

from fastapi import FastAPI

from app.core.config import settings
from app.core.error_handlers import setup_exception_handlers
from app.core.logging_utils import setup_logging
from app.db.base import init_db
from app.api.routes import auth
from app.api.routes import admin as admin_router
from app.api.routes import admin_dashboard as admin_dashboard_router
from app.api.routes import bookings as bookings_router
from app.api.routes import catalog as catalog_router
from app.api.routes import student_dashboard as student_dashboard_router
from app.api.routes import feedback as feedback_router
from app.api.routes import parent as parent_router
from app.api.routes import parent_dashboard as parent_dashboard_router
from app.api.routes import preferences as preferences_router
from app.api.routes import professor_bookings as professor_bookings_router
from app.api.routes import professor_dashboard as professor_dashboard_router
from app.api.routes import professor_profile as professor_profile_router
from app.api.routes import review as review_router
from app.api.routes import search as search_router

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)

setup_exception_handlers(app)


@app.on_event("startup")
def startup():
    setup_logging(settings.log_level, settings.log_format)
    init_db()
    logger.info(f"{settings.app_name} v{settings.app_version} started ({settings.environment})")


@app.get("/")
def root():
    return {"message": f"{settings.app_name} running"}


@app.get("/health")
def health():
    return {"status": "ok", "version": settings.app_version}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(catalog_router.router)
app.include_router(bookings_router.router)
app.include_router(parent_router.router)
app.include_router(parent_dashboard_router.router)
app.include_router(professor_bookings_router.router)
app.include_router(professor_profile_router.router)
app.include_router(review_router.router)
app.include_router(feedback_router.router)
app.include_router(search_router.router)
app.include_router(preferences_router.router)
app.include_router(student_dashboard_router.router)
app.include_router(professor_dashboard_router.router)
app.include_router(admin_router.router)
app.include_router(admin_dashboard_router.router)
