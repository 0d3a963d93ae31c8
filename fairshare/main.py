import logging

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fairshare.core import errors
from fairshare.core.config import Settings, get_settings
from fairshare.core.logging import init_logging, request_context_middleware
from fairshare.db.migrate import apply_migrations
from fairshare.routers import (
    admin,
    auth,
    expenses,
    fixed_costs,
    health,
    months,
    settlement,
    templates,
    transfers,
)
from fairshare.routers.deps import require_auth


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(
            settings.db_path,  # type: ignore[arg-type]
            {"me": settings.me_name, "partner": settings.partner_name},
        )
    except Exception:
        logging.getLogger("fairshare").exception("failed to apply migrations on startup")
        raise

    app = FastAPI(title=settings.app_name, debug=settings.debug, version=settings.version)
    app.state.settings = settings

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.MonthNotFoundError, errors.month_not_found_handler)
    app.add_exception_handler(errors.MonthStateError, errors.month_state_handler)
    app.add_exception_handler(ValueError, errors.value_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers; everything except health and login sits behind the auth cookie
    protected = [Depends(require_auth)]
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(months.router, dependencies=protected)
    app.include_router(fixed_costs.router, dependencies=protected)
    app.include_router(expenses.router, dependencies=protected)
    app.include_router(transfers.router, dependencies=protected)
    app.include_router(templates.router, dependencies=protected)
    app.include_router(admin.router, dependencies=protected)
    app.include_router(settlement.router, dependencies=protected)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
