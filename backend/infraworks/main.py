"""
Main FastAPI application.

WHY: This is the entry point for the application. It configures logging,
middleware, routes and exception handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from infraworks.api import achievements, auth, dashboard, leads, projects, users
from infraworks.core.config import settings
from infraworks.core.exception_handlers import register_exception_handlers
from infraworks.core.logging_config import configure_logging
from infraworks.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    WHY: Factory pattern allows easier testing with different configurations
    and makes it possible to create multiple app instances if needed.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Construction company back-office API",
        version=settings.VERSION,
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    )

    # Every error leaves in the same JSON envelope
    register_exception_handlers(app)

    # Request ids for log correlation; added first so it wraps the routes
    app.add_middleware(RequestContextMiddleware)

    # CORS
    # WHY: The marketing site and admin UI are served from other origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Health check endpoint
    # WHY: Load balancers need a cheap liveness probe that touches neither
    # the token verifier nor the database.
    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.VERSION}

    for module in (auth, users, projects, dashboard, leads, achievements):
        app.include_router(module.router, prefix=settings.API_V1_PREFIX)

    return app


# Create app instance
# WHY: Creating the app instance here allows it to be imported by uvicorn
# and other modules that need access to the FastAPI app.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    # WHY: This allows running the app directly with `python -m infraworks.main`
    # for development. In production, use `uvicorn infraworks.main:app` directly.
    uvicorn.run(
        "infraworks.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
    )
