# main.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from errors import ConfigurationError, ContactValidationError
from middleware import attach_cors, attach_request_logging
from models import (
    ChatRequest,
    ChatResponse,
    ContactRequest,
    ContactResponse,
    ContactSubmission,
    ResumeFile,
)
from services.contact_intake import ContactIntakeHandler, validate_submission
from services.keyword_responder import KeywordResponder
from services.openai_client import AIResponder
from settings import Settings

logger = logging.getLogger(__name__)

CHAT_MAX_LENGTH = 500
AI_CHAT_MAX_LENGTH = 1000

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────
def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={**extra, "error": message})


def _preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _build(factory, settings: Settings):
    try:
        return factory(settings)
    except ConfigurationError as e:
        logger.error("%s disabled: %s", factory.__name__, e)
        return None


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = tuple(first.get("loc") or ())
    if first.get("type") == "json_invalid":
        message = "Invalid JSON format"
    elif first.get("type") == "missing" and loc == ("body",):
        message = "Request body is required"
    elif first.get("type") == "missing":
        message = f"{str(loc[-1]).capitalize()} is required"
    else:
        message = f"Invalid request: {first.get('msg', 'malformed body')}"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


async def read_contact_submission(request: Request) -> ContactSubmission:
    """Multipart/urlencoded forms carry an optional resume; anything else is read as JSON."""
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except StarletteHTTPException as e:
            raise ContactValidationError(f"Invalid form data: {e.detail}")

        fields = {}
        upload = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key.lower() == "resume" and upload is None:
                    upload = value
            else:
                fields.setdefault(key, value)

        resume = None
        if upload is not None:
            content = await upload.read()
            # browsers send an empty part when no file was chosen
            if content:
                resume = ResumeFile(
                    filename=upload.filename or "resume",
                    content_type=upload.content_type or "",
                    content=content,
                )
        logger.info("[CONTACT] form submission, resume attached: %s", resume is not None)
        contact = ContactRequest.model_validate(fields)
        return ContactSubmission(
            email=contact.email,
            firstName=contact.firstName,
            lastName=contact.lastName,
            phone=contact.phone,
            resume=resume,
        )

    try:
        payload = await request.json()
    except ValueError:
        raise ContactValidationError("Invalid JSON format")
    if not isinstance(payload, dict):
        raise ContactValidationError("Invalid JSON format")
    try:
        contact = ContactRequest.model_validate(payload)
    except ValidationError:
        raise ContactValidationError("Contact fields must be strings")
    return ContactSubmission.from_json(contact)


# ─────────────────────────────────────────────────────────────
# App
# ─────────────────────────────────────────────────────────────
def create_app(settings: Optional[Settings] = None,
               *,
               keyword_responder: Optional[KeywordResponder] = None,
               ai_responder: Optional[AIResponder] = None,
               contact_handler: Optional[ContactIntakeHandler] = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(title="Skills Solutions Australia API", version="1.0.0")
    attach_cors(app, settings)
    attach_request_logging(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Missing credentials only disable the endpoint that needs them
    keyword_responder = keyword_responder or KeywordResponder(delay=settings.KEYWORD_REPLY_DELAY)
    if ai_responder is None:
        ai_responder = _build(AIResponder, settings)
    if contact_handler is None:
        contact_handler = _build(ContactIntakeHandler, settings)

    router = APIRouter()

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.post("/chat", response_model=ChatResponse, response_model_exclude={"isAI"})
    async def chat(req: ChatRequest):
        if len(req.message) > CHAT_MAX_LENGTH:
            return _error(400, f"Message too long. Maximum {CHAT_MAX_LENGTH} characters.")
        try:
            response = await keyword_responder.respond(req.message)
        except Exception:
            logger.exception("Error processing chatbot request")
            return _error(500, "Internal server error")
        logger.info("Generated response for message: %s", _preview(req.message))
        return response

    @router.post("/ai-chat", response_model=ChatResponse)
    async def ai_chat(req: ChatRequest):
        if len(req.message) > AI_CHAT_MAX_LENGTH:
            return _error(400, f"Message too long. Maximum {AI_CHAT_MAX_LENGTH} characters.")
        if ai_responder is None:
            return _error(500, "AI assistant is not configured")
        try:
            response = await ai_responder.respond(req.message, req.history)
        except Exception:
            logger.exception("Error processing AI chatbot request")
            return _error(500, "Internal server error")
        logger.info("Generated AI response for message: %s", _preview(req.message))
        return response

    @router.post("/hubspot-create-contact", response_model=ContactResponse, response_model_exclude_none=True)
    async def hubspot_create_contact(request: Request):
        try:
            submission = await read_contact_submission(request)
            validate_submission(submission, settings.RESUME_MAX_BYTES)
        except ContactValidationError as e:
            logger.warning("[CONTACT] rejected: %s", e)
            return _error(400, str(e), success=False)

        if contact_handler is None:
            logger.error("[CONTACT] HubSpot API key not configured")
            return _error(500, "HubSpot API key not configured", success=False)

        try:
            result = await contact_handler.submit(submission)
        except ContactValidationError as e:
            return _error(400, str(e), success=False)
        except Exception:
            logger.exception("[CONTACT] error creating HubSpot contact")
            return _error(500, "Internal server error", success=False)

        if not result.success:
            return JSONResponse(status_code=500, content=result.model_dump(exclude_none=True))
        return result

    app.include_router(router, prefix=settings.API_PREFIX.rstrip("/"))
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
