import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError

from app.config import Settings, get_settings
from app.errors import MissingFileError, MixFeedbackError, UploadTooLargeError
from app.feedback import FeedbackClient
from app.logging_config import configure_logging
from app.models import AnalyzeResponse, ErrorResponse
from app.pipeline import analyze_upload

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger("mix_feedback")

app = FastAPI(title="Mix Feedback Analyzer")

# Browser studio calls this service directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=4)
def _client_for(settings: Settings) -> FeedbackClient:
    return FeedbackClient.from_settings(settings)


def get_feedback_client(settings: Settings = Depends(get_settings)) -> FeedbackClient:
    """Shared completion client; overridden in tests."""
    return _client_for(settings)


@app.exception_handler(MixFeedbackError)
async def mix_feedback_error_handler(request: Request, exc: MixFeedbackError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # A form string sent in place of the upload arrives here, not in the route
    if any("file" in err.get("loc", ()) for err in exc.errors()):
        return JSONResponse(status_code=400, content={"error": MissingFileError().message})
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.get("/health")
async def health():
    """Lightweight health endpoint for uptime checks."""

    return {"status": "ok"}


@app.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def analyze(
    file: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_settings),
    client: FeedbackClient = Depends(get_feedback_client),
):
    """Analyse an uploaded mix and return level metrics plus model feedback.

    Decode and empty-signal failures are reported with their own status
    codes. Model failures never fail the request; the feedback object
    carries a fallback instead.
    """

    if file is None or not file.filename:
        raise MissingFileError()

    try:
        raw = await file.read()
        if len(raw) > settings.max_upload_bytes:
            raise UploadTooLargeError(len(raw), settings.max_upload_bytes)

        # Decoding and the completion call both block
        return await run_in_threadpool(analyze_upload, raw, file.content_type, client, settings)
    except MixFeedbackError:
        raise
    except Exception as exc:
        logger.exception("Unhandled error in analyze route: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "Internal server error"},
        )
    finally:
        await file.close()
