from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from config import logger, check_api_keys_on_startup
from exceptions import (
    FactCheckException,
    FactCheckNotFoundException,
    LLMException,
    CircuitBreakerOpenException,
    ValidationException,
)
from middleware.context import RequestContextMiddleware, get_request_id
from models.fact_checks import FactCheckRequest
from repositories import FactCheckRepository
from services import FactCheckService
from utils.validation import InputValidator, ValidationError

app = FastAPI(title="Fact-CheckIt API")

@app.on_event("startup")
async def startup_event():
    check_api_keys_on_startup()

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

def build_repository() -> Optional[FactCheckRepository]:
    if not config.settings.supabase_configured:
        return None
    try:
        return FactCheckRepository()
    except Exception as e:
        logger.error("Supabase unavailable, fact-checks will not be persisted: %s", e)
        return None

fact_check_service = FactCheckService(repository=build_repository())

PUBLIC_ERROR_MESSAGES = {
    LLMException: "Failed to fact-check. Please try again.",
    CircuitBreakerOpenException: "Fact-checking is temporarily unavailable. Please try again later.",
    FactCheckNotFoundException: "Fact-check not found",
}

def _public_message(exc: FactCheckException) -> str:
    if isinstance(exc, ValidationException):
        return exc.details.get("reason", exc.message)
    for exc_type, message in PUBLIC_ERROR_MESSAGES.items():
        if isinstance(exc, exc_type):
            return message
    return "Server error"

@app.exception_handler(FactCheckException)
async def fact_check_exception_handler(request: Request, exc: FactCheckException):
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.to_dict())
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": _public_message(exc), "requestId": get_request_id()},
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Claim is required", "requestId": get_request_id()},
    )

@app.get("/")
async def health_check():
    return {"status": "ok", "message": "Fact-CheckIt API is running."}

@app.post("/api/fact-check")
async def fact_check(request: FactCheckRequest):
    try:
        claim = InputValidator.sanitize_claim(request.claim, config.MAX_CLAIM_LENGTH)
    except ValidationError as e:
        raise ValidationException("claim", str(e))

    return await fact_check_service.check_claim(claim)

@app.get("/api/fact/{short_id}")
async def get_fact_check(short_id: str):
    try:
        InputValidator.validate_short_id(short_id)
    except ValidationError as e:
        raise ValidationException("shortId", str(e))

    return await fact_check_service.get_fact_check(short_id)
