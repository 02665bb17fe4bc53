"""FastAPI dependencies."""

from fastapi import Request

from dropshare.services import Services


def get_services(request: Request) -> Services:
    """Return the service container attached to the application."""
    return request.app.state.services
