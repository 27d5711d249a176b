"""
FastAPI Application Entry Point - Order Service
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from storefront.database import engine, init_db
from storefront.errors import register_exception_handlers
from storefront.logging_setup import setup_logging
from storefront.order_service.api import health, orders
from storefront.order_service.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    logger.info("Starting %s...", settings.SERVICE_NAME)
    init_db()
    logger.info("Database initialized")
    logger.info("%s is running on port %d", settings.SERVICE_NAME, settings.SERVICE_PORT)
    yield
    logger.info("Shutting down %s...", settings.SERVICE_NAME)
    engine.dispose()


# Create FastAPI application
app = FastAPI(
    title="Order Service",
    description="Microservice for orders and stock reservation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(orders.router)
app.include_router(orders.user_orders_router)

register_exception_handlers(app)

# Prometheus metrics
Instrumentator().add(
    metrics.default(metric_namespace="storefront", metric_subsystem="order_service")
).instrument(app).expose(app)
