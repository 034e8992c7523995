import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from settings import Settings, get_allowed_origins_list

logger = logging.getLogger(__name__)


def attach_cors(app: FastAPI, settings: Settings):
    if settings.ALLOWED_ORIGINS.strip() == "*":
        allow_origins = ["*"]
    else:
        allow_origins = get_allowed_origins_list(settings.ALLOWED_ORIGINS)

    # browsers refuse credentialed responses with a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


def attach_request_logging(app: FastAPI):
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response
