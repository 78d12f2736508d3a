"""
Drop Spot: FastAPI application entry point.

Serves the exchange routes and the static web client over HTTPS and
announces the LAN address (with a QR code) on startup.
"""

import argparse
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import init_routes, router
from config import API_HOST, API_PORT, DROP_SPOT_DIR, TLS_DIR
from exchange.manager import ExchangeManager
from network.address import get_lan_ip, print_qr, public_url
from security.tls import load_or_create

# --- Logging ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Sent with every response, same set a hardened express app would send
SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; object-src 'none'; frame-ancestors 'self'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the drop spot directories before serving."""
    manager: ExchangeManager = app.state.exchange_manager
    try:
        manager.start()
        logger.info(f"Drop Spot ready, storing under {manager.store.root}")
        yield
    except Exception as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shutting down Drop Spot...")


# --- FastAPI app ---
app = FastAPI(
    title="Drop Spot",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


def use_exchange_manager(manager: ExchangeManager) -> None:
    """Point the app and its routes at ``manager``."""
    app.state.exchange_manager = manager
    init_routes(manager)


use_exchange_manager(ExchangeManager(DROP_SPOT_DIR))


@app.middleware("http")
async def log_and_harden(request: Request, call_next):
    client = request.client.host if request.client else "unknown"
    logger.info(f"Request from {client}: {request.method} {request.url.path}")
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def redirect_unhandled(request: Request, exc: StarletteHTTPException):
    # Unknown pages go back to the main page instead of showing an error
    if exc.status_code in (404, 405) and request.url.path != "/":
        return RedirectResponse("/", status_code=303)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def hide_internal_errors(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    # Runs outside the http middleware stack, so headers are added here
    return PlainTextResponse(
        "internal server error", status_code=500, headers=SECURITY_HEADERS
    )


app.include_router(router)


# --- Static Files (Frontend) ---
BASE_DIR = Path(__file__).parent.parent / "frontend" / "dist"

if BASE_DIR.exists():
    app.mount("/assets", StaticFiles(directory=BASE_DIR / "assets"), name="assets")

    @app.get("/")
    async def read_index():
        return FileResponse(BASE_DIR / "index.html")
else:
    logger.warning(f"Frontend dist not found at {BASE_DIR}. API only mode.")


def announce(host: str, port: int, lan_ip: str | None, tls: bool) -> None:
    """Log where the drop spot can be reached and show the LAN address as a QR code."""
    logger.info(f"Hosting drop spot at {public_url(host, port, tls)}")
    if lan_ip and host in ("0.0.0.0", lan_ip):
        url = public_url(lan_ip, port, tls)
        logger.info(f"Address on local network: {url}")
        print_qr(url)


def main() -> None:
    import uvicorn

    parser = argparse.ArgumentParser(
        description="Drop text messages and files over the local network."
    )
    parser.add_argument("--host", default=API_HOST,
                        help="interface to bind, 127.0.0.1 hides it from the LAN")
    parser.add_argument("--port", type=int, default=API_PORT)
    parser.add_argument("--root", type=Path, default=DROP_SPOT_DIR,
                        help="directory holding received and hosted files")
    parser.add_argument("--no-tls", action="store_true",
                        help="serve plain HTTP instead of HTTPS")
    args = parser.parse_args()

    use_exchange_manager(ExchangeManager(args.root))

    lan_ip = get_lan_ip()
    tls_files = None if args.no_tls else load_or_create(TLS_DIR, lan_ip)
    announce(args.host, args.port, lan_ip, tls=tls_files is not None)

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info",
        ssl_certfile=str(tls_files.certfile) if tls_files else None,
        ssl_keyfile=str(tls_files.keyfile) if tls_files else None,
        ssl_keyfile_password=tls_files.password if tls_files else None,
    )


if __name__ == "__main__":
    main()
