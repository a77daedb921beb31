"""FastAPI server for Blueprint Studio."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from typing import Any, Awaitable, Optional
import asyncio
import logging

from config import settings
from errors import GenerationError, PipelineError, SchemaError, ValidationError
from models import Blueprint
from orchestrator import create_blueprint
from pipeline import GenerationClient, format_failure, format_success
from pipeline.formatter import DEFAULT_ERROR_MESSAGE

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Blueprint Studio API", version="1.0.0")

# Shared generation client; orchestrators are created per request.
generation_client: Optional[GenerationClient] = None

STATUS_CODES = {
    ValidationError: 400,
    GenerationError: 502,
    SchemaError: 502,
}

PUBLIC_MESSAGES = {
    GenerationError: "The content service is unavailable right now. Please try again.",
    SchemaError: "The generated blueprint was incomplete. Please try again.",
}


class ClientDisconnected(Exception):
    """The caller went away before the blueprint was ready."""


@app.on_event("startup")
async def startup():
    """Create the shared generation client on startup."""
    global generation_client
    if generation_client is None:
        generation_client = GenerationClient()
    logger.info("API server started")


@app.on_event("shutdown")
async def shutdown():
    logger.info("API server stopped")


def get_generation_client() -> GenerationClient:
    global generation_client
    if generation_client is None:
        generation_client = GenerationClient()
    return generation_client


async def run_until_disconnect(request: Request, work: Awaitable[Blueprint]) -> Blueprint:
    """Await the pipeline, cancelling it if the client disconnects."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=settings.disconnect_poll_seconds)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)


def error_response(error: PipelineError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(error), 500)
    message = PUBLIC_MESSAGES.get(type(error), str(error))
    return JSONResponse(
        status_code=status_code,
        content=format_failure(message).model_dump(exclude_none=True),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Blueprint Studio API",
        "version": "1.0.0",
        "endpoints": [
            "/api/generate",
            "/health",
        ]
    }


@app.post("/api/generate")
async def generate(request: Request):
    """Generate a production blueprint from a creative brief."""
    try:
        try:
            payload: Any = await request.json()
        except ValueError:
            raise ValidationError("payload", "must be valid JSON")

        blueprint = await run_until_disconnect(
            request,
            create_blueprint(payload, get_generation_client()),
        )
        return JSONResponse(content=format_success(blueprint).model_dump(exclude_none=True))
    except PipelineError as e:
        logger.error(f"Blueprint generation failed: {e!r}")
        return error_response(e)
    except ClientDisconnected:
        logger.warning("Client disconnected; blueprint generation cancelled")
        return JSONResponse(status_code=499, content=format_failure("Request cancelled").model_dump(exclude_none=True))
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=format_failure(DEFAULT_ERROR_MESSAGE).model_dump(exclude_none=True),
        )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "generation_client_initialized": generation_client is not None}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
