"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ordertracker.api.v1.router import api_router
from ordertracker.api.functions import reminders
from ordertracker.core.config import settings
from ordertracker.core.logging import setup_logging
from ordertracker.core.rate_limit import limiter
from ordertracker.db.session import init_db, close_db
from ordertracker.db.init_db import create_tables, seed_initial_data
from ordertracker.deps.di_container import Container, set_container


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes DB, schema, seed data and the DI container.
    """
    # Startup
    setup_logging()
    
    await init_db()
    await create_tables()
    await seed_initial_data()
    
    container = Container()
    container.config.from_dict({
        "database_url": settings.DATABASE_URL,
        "backend_url": settings.BACKEND_URL,
    })
    
    app.state.container = container
    set_container(container)
    
    yield
    
    # Shutdown
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Order, client and payment tracking API",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    
    # CORS middleware; wildcard origins require credentials off
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)
    app.include_router(reminders.router, prefix=settings.FUNCTIONS_PREFIX, tags=["functions"])
    
    # Add root-level health endpoint for convenience
    from ordertracker.api.v1.endpoints.health import get_health
    
    @app.get("/health", response_model=None, include_in_schema=False)
    async def root_health():
        """Root-level health check endpoint."""
        return await get_health()
    
    # Global exception handler
    from ordertracker.core.exceptions import setup_exception_handlers
    setup_exception_handlers(app)
    
    return app


app = create_app()
