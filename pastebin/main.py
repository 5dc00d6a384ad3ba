import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from .clock import Clock, FixedClock, to_datetime
from .errors import InvalidInput, InvalidTTL, InvalidViewLimit, PasteError
from .ids import HandleGenerator
from .logging_config import configure_logging
from .rendering import render_home, render_paste
from .schemas import CreatePasteRequest, CreatePasteResponse, ErrorResponse, HealthResponse, PasteResponse
from .settings import Settings, settings as default_settings
from .store import PasteStore

logger = logging.getLogger(__name__)

TEST_NOW_HEADER = "x-test-now-ms"


class InvalidClockOverride(PasteError):
    code = "invalid_clock_override"
    message = f"{TEST_NOW_HEADER} must be an integer"


_BAD_REQUEST = (InvalidInput, InvalidTTL, InvalidViewLimit, InvalidClockOverride)


def request_clock(request: Request) -> Optional[Clock]:
    """Resolve the per-request clock override.

    Returns
    -------
    Optional[Clock]
        A `FixedClock` pinned to the `x-test-now-ms` header when test mode is
        enabled and the header is present, otherwise `None` (the store's own
        clock is used).

    Raises
    ------
    InvalidClockOverride
        If test mode is on and the header is not an integer.
    """

    if not request.app.state.settings.test_mode:
        return None
    raw = request.headers.get(TEST_NOW_HEADER)
    if raw is None:
        return None
    try:
        return FixedClock(int(raw))
    except ValueError:
        raise InvalidClockOverride() from None


def get_store(request: Request) -> PasteStore:
    return request.app.state.store


def create_app(settings: Optional[Settings] = None, store: Optional[PasteStore] = None) -> FastAPI:
    """Build the Pastebin Lite application.

    Parameters
    ----------
    settings : Optional[Settings]
        Runtime configuration. Defaults to the environment-derived `settings`.
    store : Optional[PasteStore]
        Backing store. A fresh, empty store is created when omitted.
    """

    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="Pastebin Lite", version="1.0.0")
    app.state.settings = settings
    app.state.store = store or PasteStore(ids=HandleGenerator(length=settings.handle_length))
    if settings.test_mode:
        logger.warning("test mode enabled: %s header overrides the clock", TEST_NOW_HEADER)

    @app.exception_handler(PasteError)
    async def paste_error_handler(request: Request, exc: PasteError):
        status = 400 if isinstance(exc, _BAD_REQUEST) else 404
        return JSONResponse(status_code=status, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "request body must be a JSON object"})

    @app.get("/api/healthz", response_model=HealthResponse)
    async def healthz():
        """Liveness probe. Always returns `{"ok": true}`."""

        return {"ok": True}

    @app.get("/", response_class=HTMLResponse)
    async def home():
        return render_home()

    @app.post("/api/pastes", status_code=201, response_model=CreatePasteResponse,
              responses={400: {"model": ErrorResponse}})
    async def create_paste(body: CreatePasteRequest, request: Request,
                           store: PasteStore = Depends(get_store),
                           clock: Optional[Clock] = Depends(request_clock)):
        """Create a paste and return its id and shareable URL.

        Raises
        ------
        InvalidInput, InvalidTTL, InvalidViewLimit
            Rendered as 400 with `{"error": <message>}`.
        """

        handle = store.create(body.content, body.ttl_seconds, body.max_views, clock=clock)
        base = settings.public_base_url or str(request.base_url).rstrip("/")
        return {"id": handle, "url": f"{base}/p/{handle}"}

    @app.get("/api/pastes/{handle}", response_model=PasteResponse,
             responses={404: {"model": ErrorResponse}})
    async def read_paste(handle: str, store: PasteStore = Depends(get_store),
                         clock: Optional[Clock] = Depends(request_clock)):
        """Return paste content, consuming one view if the paste is view-limited.

        Notes
        -----
        - Unknown, expired and exhausted pastes all answer 404 but with distinct
          messages: `Paste not found`, `Paste expired`, `View limit exceeded`.
        """

        result = store.read(handle, clock=clock)
        return {
            "content": result.content,
            "remaining_views": result.remaining_views,
            "expires_at": to_datetime(result.expires_at) if result.expires_at is not None else None,
        }

    @app.get("/p/{handle}", response_class=HTMLResponse)
    async def view_paste(handle: str, store: PasteStore = Depends(get_store),
                         clock: Optional[Clock] = Depends(request_clock)):
        """HTML view of a paste. Counts as a view, exactly like the API read."""

        try:
            result = store.read(handle, clock=clock)
        except PasteError as exc:
            return PlainTextResponse(exc.message, status_code=404)
        return HTMLResponse(render_paste(result.content))

    return app


app = create_app()
