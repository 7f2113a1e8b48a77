"""HTTP middleware and exception handlers."""

from fastapi import FastAPI

from nativespeak.config import Settings
from nativespeak.middleware.cors import setup_cors
from nativespeak.middleware.error_handler import setup_error_handlers
from nativespeak.middleware.logging import setup_logging
from nativespeak.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, exception handlers and middleware.

    Starlette runs middleware last-added-first, so CORS wraps the request id
    layer and its headers land on error responses too.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
