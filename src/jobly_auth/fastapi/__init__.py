"""FastAPI integration for jobly-auth."""

from jobly_auth.fastapi.app import create_app
from jobly_auth.fastapi.errors import install_error_handlers
from jobly_auth.fastapi.router import add_route, create_login_router

__all__ = ["add_route", "create_app", "create_login_router", "install_error_handlers"]
