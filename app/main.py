from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.discipline_categories import router as discipline_categories_router
from app.api.discipline_employees import router as discipline_employees_router
from app.api.discipline_organizations import (
    router as discipline_organizations_router,
)
from app.api.discipline_reviews import router as discipline_reviews_router
from app.api.discipline_warnings import router as discipline_warnings_router
from app.errors import register_error_handlers
from app.logging import configure_logging

app = FastAPI(title="DotMac Discipline API")

configure_logging()
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(discipline_organizations_router)
_include_api_router(discipline_employees_router)
_include_api_router(discipline_categories_router)
_include_api_router(discipline_warnings_router)
_include_api_router(discipline_reviews_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
