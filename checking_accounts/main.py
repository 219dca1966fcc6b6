from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from checking_accounts import __version__
from checking_accounts.core.config import Settings, get_settings
from checking_accounts.core.container import ApplicationContainer, build_container, get_container
from checking_accounts.core.logging import configure_logging
from checking_accounts.infrastructure.database.session import dispose_engine, init_db
from checking_accounts.interfaces.http import create_api_router
from checking_accounts.interfaces.http.errors import register_exception_handlers


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    if settings is None:
        settings = get_settings()
        container = container or get_container()
    elif container is None:
        container = build_container(settings)
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database.create_tables:
            await init_db()
        yield
        await dispose_engine()

    app = FastAPI(
        title=settings.project_name,
        description="Checking account balances, ledger and guarded withdrawals",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
