import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from clusterboot.config import Config
from clusterboot.discovery import publish_or_update
from clusterboot.middleware import RequestLoggingMiddleware
from clusterboot.routes import cluster_info, health
from clusterboot.store.sql import Database, SqlStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application lifespan")
    try:
        logger.info("Initializing database")
        await app.state.database.init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        logger.error(f"Database URL: {app.state.config.database.url}")
        logger.error("Please ensure your database is running and accessible.")
        raise

    bootstrap = app.state.config.bootstrap
    if bootstrap.publish_on_startup:
        logger.info(f"Publishing cluster-info from {bootstrap.kubeconfig_path}")
        await publish_or_update(app.state.store, bootstrap.kubeconfig_path)

    yield
    # Shutdown
    logger.info("Shutting down application")
    await app.state.database.close()
    logger.info("Database closed")


def create_app(config: Config | None = None) -> FastAPI:
    app = FastAPI(lifespan=lifespan)
    app.state.config = config if config is not None else Config()
    app.state.database = Database(app.state.config.database.url)
    app.state.store = SqlStore(app.state.database)

    if app.state.config.logging.log_requests:
        app.add_middleware(RequestLoggingMiddleware)
        logger.info("Request logging middleware enabled")

    api = APIRouter(prefix="/api")
    api.include_router(health.router)
    api.include_router(cluster_info.router)

    app.include_router(api)
    return app
