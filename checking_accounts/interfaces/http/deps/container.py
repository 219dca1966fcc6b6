"""Access to the application container stored on the FastAPI app."""

from fastapi import Request

from checking_accounts.core.container import ApplicationContainer


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


__all__ = ["get_app_container"]
