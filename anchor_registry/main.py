from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from anchor_registry.api.anchors import router as anchors_router
from anchor_registry.api.error_handlers import register_error_handlers
from anchor_registry.api.governance import router as governance_router
from anchor_registry.api.health import router as health_router
from anchor_registry.api.issuers import router as issuers_router
from anchor_registry.api.metrics_endpoint import router as metrics_router
from anchor_registry.api.notifications import router as notifications_router
from anchor_registry.core.config import SETTINGS
from anchor_registry.core.logging import setup_logging
from anchor_registry.middleware.metrics import MetricsMiddleware
from anchor_registry.middleware.request_context import RequestContextMiddleware
from anchor_registry.services.bootstrap import bootstrap_from_settings
from anchor_registry.services.registry import get_registry

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # The registry is process-wide and starts empty; seed roles once,
    # nothing to tear down.
    bootstrap_from_settings(get_registry(), SETTINGS)
    yield


app = FastAPI(
    title="anchor-registry",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

register_error_handlers(app)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(governance_router)
app.include_router(anchors_router)
app.include_router(issuers_router)
app.include_router(notifications_router)

logger.info(
    "anchor-registry started  env=%s log_level=%s port=%d admin=%s docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    SETTINGS.registry_admin,
    "on" if SETTINGS.is_dev else "off",
)
