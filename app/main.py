import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.core.exceptions import register_exception_handlers
from app.core.database import init_db, dispose_db
from app.middleware import CorrelationIdMiddleware

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# Middleware: correlation id
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route imports
from app.api.health import router as health_router
from app.api.v1 import projects as v1_projects
from app.api.v1 import project_drafts as v1_project_drafts
from app.api.v1 import locations as v1_locations
from app.api.v1 import service_orders as v1_service_orders
from app.api.v1 import subcontractors as v1_subcontractors
from app.api.v1 import employees as v1_employees
from app.api.v1 import inventory as v1_inventory

# Register routers
app.include_router(health_router, prefix="/api", tags=["health"])

# v1 API routes
app.include_router(v1_projects.router, prefix="/api/v1", tags=["projects"])
app.include_router(v1_project_drafts.router, prefix="/api/v1", tags=["project-editor"])
app.include_router(v1_locations.router, prefix="/api/v1", tags=["locations"])
app.include_router(v1_service_orders.router, prefix="/api/v1", tags=["service-orders"])
app.include_router(v1_subcontractors.router, prefix="/api/v1", tags=["subcontractors"])
app.include_router(v1_employees.router, prefix="/api/v1", tags=["employees"])
app.include_router(v1_inventory.router, prefix="/api/v1", tags=["inventory"])


# Exception handlers
register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    logger.info("Starting app", extra={"app": settings.APP_NAME})
    if settings.INIT_DB_ON_START:
        await init_db()


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Shutting down")
    await dispose_db()
