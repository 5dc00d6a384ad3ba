class PasteError(Exception):
    """Base class for every failure the paste store reports.

    Attributes
    ----------
    code : str
        Stable machine-readable identifier for the failure kind.
    message : str
        Human-readable message, safe to show to clients.
    """

    code = "paste_error"
    message = "Paste error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# creation-time validation, no state change
class InvalidInput(PasteError):
    code = "invalid_input"
    message = "content is required"


class InvalidTTL(PasteError):
    code = "invalid_ttl"
    message = "ttl_seconds must be >= 1"


class InvalidViewLimit(PasteError):
    code = "invalid_view_limit"
    message = "max_views must be >= 1"


# read-time failures; Expired and ViewLimitExceeded evict the entry
class NotFound(PasteError):
    code = "not_found"
    message = "Paste not found"


class Expired(PasteError):
    code = "expired"
    message = "Paste expired"


class ViewLimitExceeded(PasteError):
    code = "view_limit_exceeded"
    message = "View limit exceeded"
