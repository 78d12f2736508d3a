"""HTTP routes for Drop Spot."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
from starlette.datastructures import UploadFile

from config import MAX_MESSAGE_BYTES, MESSAGE_ENCODING, UPLOAD_FIELD
from exchange.errors import EmptyMessageError, SharedFileNotFound
from exchange.models import LandingStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Injected by main.py at startup
_exchange_manager = None


def init_routes(exchange_manager) -> None:
    """Inject the exchange manager into the routes module."""
    global _exchange_manager
    _exchange_manager = exchange_manager


def _not_accepted() -> PlainTextResponse:
    logger.info("POST request not accepted")
    return PlainTextResponse("post request not accepted", status_code=400)


# --- Downloads ---

@router.get("/shared-files-list")
async def list_shared_files():
    """Return the names of files offered for download."""
    return await _exchange_manager.list_shared()


@router.get("/download/{file_path:path}")
async def download_file(file_path: str):
    """Send a hosted file as an attachment, or go back to the main page."""
    try:
        path = await _exchange_manager.resolve_download(file_path)
    except SharedFileNotFound as e:
        logger.info(f"Download not served: {e}")
        return RedirectResponse("/", status_code=303)

    logger.info(f"Sending file for download: {path.name}")
    return FileResponse(path, filename=path.name)


# --- Submissions ---

@router.post("/")
async def receive_submission(request: Request):
    """Accept a plain-text message or a multipart form with files."""
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type == "text/plain":
        return await _receive_text(request)
    if media_type == "multipart/form-data":
        return await _receive_files(request)
    return _not_accepted()


def _too_large() -> PlainTextResponse:
    logger.info("Text message rejected: larger than the size limit")
    return PlainTextResponse("text message too large", status_code=413)


async def _read_limited(request: Request, limit: int) -> bytes | None:
    """Read the request body, or return None once it exceeds ``limit`` bytes."""
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        return None

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            return None
    return bytes(body)


async def _receive_text(request: Request) -> PlainTextResponse:
    body = await _read_limited(request, MAX_MESSAGE_BYTES)
    if body is None:
        return _too_large()

    try:
        text = body.decode(MESSAGE_ENCODING)
    except UnicodeDecodeError:
        return _not_accepted()

    try:
        await _exchange_manager.submit_message(text)
    except EmptyMessageError:
        return _not_accepted()
    except OSError as e:
        logger.error(f"Failed to store text message: {e}")
        return PlainTextResponse(
            "your text message could not be saved", status_code=500
        )

    return PlainTextResponse("💌 your text message was received")


async def _receive_files(request: Request) -> PlainTextResponse:
    form = await request.form()
    try:
        uploads = [
            value for value in form.getlist(UPLOAD_FIELD)
            if isinstance(value, UploadFile)
        ]
        if not uploads:
            return _not_accepted()
        outcomes = await _exchange_manager.land_uploads(uploads)
    finally:
        await form.close()

    statuses = {o.status for o in outcomes}
    if LandingStatus.LANDED in statuses:
        status_code = 200
    elif LandingStatus.FAILED in statuses:
        status_code = 500
    else:
        status_code = 400

    report = "".join(f"{o.describe()}\n" for o in outcomes)
    return PlainTextResponse(report, status_code=status_code)
