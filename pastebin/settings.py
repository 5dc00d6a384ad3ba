import os
from typing import Optional

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration for the API.

    Notes
    -----
    - Instantiating `Settings()` directly gives the defaults; `Settings.from_env()`
      reads `PASTEBIN_*` environment variables first.
    - `test_mode` enables the `x-test-now-ms` request header, which pins the
      clock for that request. Never enable it in production.
    """

    test_mode: bool = False
    # Base used for the `url` returned on create; falls back to the request's base URL
    public_base_url: Optional[str] = None
    handle_length: int = Field(default=8, ge=4, le=64)
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        test_mode = os.getenv("PASTEBIN_TEST_MODE", os.getenv("TEST_MODE"))
        if test_mode is not None:
            values["test_mode"] = test_mode.strip().lower() in _TRUTHY
        base_url = os.getenv("PASTEBIN_PUBLIC_BASE_URL")
        if base_url:
            values["public_base_url"] = base_url.rstrip("/")
        handle_length = os.getenv("PASTEBIN_HANDLE_LENGTH")
        if handle_length:
            values["handle_length"] = handle_length
        log_level = os.getenv("PASTEBIN_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level
        host = os.getenv("PASTEBIN_HOST")
        if host:
            values["host"] = host
        port = os.getenv("PASTEBIN_PORT")
        if port:
            values["port"] = port
        return cls(**values)


settings = Settings.from_env()
