# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Org Chart Service
=================
Keeps the venue's flat member collection, derives the reporting tree from
it, and validates reparent moves so the structure never gains a cycle.
Exposes Prometheus metrics and a bounded audit log.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from orgchart.controllers import member_controller, orgchart_controller, system_controller
from orgchart.core.config import settings
from orgchart.core.dependencies import get_member_repo, get_orgchart_service
from orgchart.core.logging import get_logger
from orgchart.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    member_repo = get_member_repo()
    member_repo.ensure_schema()
    if settings.SEED_DEFAULT_MEMBERS and member_repo.count() == 0:
        get_orgchart_service().seed_defaults()
    logger.info("%s v%s started", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    logger.info("Shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Org Chart Service",
    description="Derives the reporting tree from member records and guards reparent moves.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(member_controller.router)
app.include_router(orgchart_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
