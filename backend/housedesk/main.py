from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from housedesk.core.config import settings
from housedesk.core.exceptions import HouseDeskException
from housedesk.core.logging import setup_logging
from housedesk.db.session import init_db
from housedesk.routers import auth, categories, operators, organizations, owners, tickets


def create_app(*, create_tables: bool = True) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    settings.validate_runtime_security()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if create_tables:
            init_db()
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(organizations.router, prefix="/api/organizations", tags=["organizations"])
    app.include_router(operators.router, prefix="/api/operators", tags=["operators"])
    app.include_router(owners.router, prefix="/api/owners", tags=["owners"])
    app.include_router(tickets.router, prefix="/api/tickets", tags=["tickets"])

    @app.exception_handler(HouseDeskException)
    async def handle_housedesk_exception(_: Request, exc: HouseDeskException) -> JSONResponse:
        headers = exc.headers if getattr(exc, "headers", None) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    return app


app = create_app()
