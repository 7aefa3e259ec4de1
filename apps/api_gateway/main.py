"""
Status API (FastAPI).

Functions:
- /health
- /metrics
- task outcome lookup (written by worker_ledger into the result store)
- pinned content id lookup per user / complaint
- queue depths for operations

The API never writes to the queues or the ledger: producers enqueue directly
into Redis, the worker owns every ledger write.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from apps.api_gateway.routers.admin import router as admin_router
from apps.api_gateway.routers.tasks import router as tasks_router
from grievance_ledger import __version__
from grievance_ledger.common.logging import get_project_logger, setup_logging
from grievance_ledger.common.metrics import setup_metrics_endpoint
from grievance_ledger.contracts.versions import HTTP_API_VERSION
from grievance_ledger.services.readiness_service import enforce_startup_readiness

log = get_project_logger()


def _create_app() -> FastAPI:
    app = FastAPI(title="Grievance Ledger Status API", version=__version__)

    setup_metrics_endpoint(app)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"ok": True}

    app.include_router(tasks_router, prefix=f"/{HTTP_API_VERSION}")
    app.include_router(admin_router, prefix=f"/{HTTP_API_VERSION}")

    return app


setup_logging()
enforce_startup_readiness(service_name="api-gateway")

app = _create_app()


def main() -> None:
    import uvicorn

    from grievance_ledger.common.config import get_settings

    s = get_settings()
    uvicorn.run(app, host=s.api_host, port=int(s.api_port), log_config=None)


if __name__ == "__main__":
    main()
