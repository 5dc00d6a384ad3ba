import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from .clock import MAX_INSTANT_MS, Clock, SystemClock
from .errors import Expired, InvalidInput, InvalidTTL, InvalidViewLimit, NotFound, ViewLimitExceeded
from .ids import HandleGenerator

logger = logging.getLogger(__name__)


@dataclass
class Entry:
    """One stored paste.

    `remaining_views` is the only field that changes after creation, and only
    through `PasteStore.read`.
    """

    handle: str
    content: str
    created_at: int
    expires_at: Optional[int] = None
    remaining_views: Optional[int] = None


@dataclass(frozen=True)
class ReadResult:
    content: str
    remaining_views: Optional[int]
    expires_at: Optional[int]


class AccessState(enum.Enum):
    ACTIVE = "active"
    EXPIRED_BY_TIME = "expired_by_time"
    EXHAUSTED_BY_VIEWS = "exhausted_by_views"


def evaluate_access(entry: Entry, now: int) -> AccessState:
    """Decide whether `entry` may still be read at instant `now`.

    Time is checked first, strictly after `expires_at`; views are checked
    before the decrement, so a limit of N allows exactly N reads.
    """

    if entry.expires_at is not None and now > entry.expires_at:
        return AccessState.EXPIRED_BY_TIME
    if entry.remaining_views is not None and entry.remaining_views <= 0:
        return AccessState.EXHAUSTED_BY_VIEWS
    return AccessState.ACTIVE


def _positive_int(value: Any) -> Optional[int]:
    """Return `value` as an int if it is a positive integer, else None."""

    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value < 1:
        return None
    return value


class PasteStore:
    """In-memory mapping from handle to `Entry` with lazy, read-driven eviction.

    Parameters
    ----------
    clock : Optional[Clock]
        Default time source. Each operation may pass its own clock instead.
    ids : Optional[HandleGenerator]
        Source of fresh handles.

    Notes
    -----
    - One lock guards the whole map, so `create` and the
      check-evict-or-decrement sequence of `read` are atomic.
    - Expired or exhausted entries stay in memory until the next read of
      their handle; there is no background reaper and no capacity bound.
    - Every handle ever issued is remembered, so an evicted handle is never
      handed out again.
    - Every operation reads its clock exactly once.
    """

    def __init__(self, clock: Optional[Clock] = None, ids: Optional[HandleGenerator] = None):
        self.clock = clock or SystemClock()
        self.ids = ids or HandleGenerator()
        self._entries: Dict[str, Entry] = {}
        self._issued: Set[str] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def create(self, content: Any, ttl_seconds: Any = None, max_views: Any = None,
               clock: Optional[Clock] = None) -> str:
        """Store `content` and return its new handle.

        Parameters
        ----------
        content : str
            Paste body. Must contain something other than whitespace; it is
            stored exactly as given.
        ttl_seconds : Optional[int]
            Lifetime in seconds. Must be a positive integer when provided.
        max_views : Optional[int]
            Number of permitted reads. Must be a positive integer when provided.
        clock : Optional[Clock]
            Overrides the store's clock for this call.

        Raises
        ------
        InvalidInput
            If `content` is missing, not a string, or blank.
        InvalidTTL
            If `ttl_seconds` is given but not a positive integer, or puts the
            expiry past `MAX_INSTANT_MS`.
        InvalidViewLimit
            If `max_views` is given but not a positive integer.
        """

        if not isinstance(content, str) or not content.strip():
            raise InvalidInput()
        ttl = None
        if ttl_seconds is not None:
            ttl = _positive_int(ttl_seconds)
            if ttl is None:
                raise InvalidTTL()
        views = None
        if max_views is not None:
            views = _positive_int(max_views)
            if views is None:
                raise InvalidViewLimit()

        now = (clock or self.clock).now()
        expires_at = now + ttl * 1000 if ttl is not None else None
        if expires_at is not None and expires_at > MAX_INSTANT_MS:
            raise InvalidTTL()
        with self._lock:
            handle = self.ids.generate(taken=self._issued.__contains__)
            self._issued.add(handle)
            self._entries[handle] = Entry(
                handle=handle,
                content=content,
                created_at=now,
                expires_at=expires_at,
                remaining_views=views,
            )
        logger.debug("created paste %s (ttl=%s, max_views=%s)", handle, ttl, views)
        return handle

    def read(self, handle: str, clock: Optional[Clock] = None) -> ReadResult:
        """Return the content for `handle`, consuming one view if limited.

        Raises
        ------
        NotFound
            If the handle was never issued or has already been evicted.
        Expired
            If the TTL has elapsed. The entry is evicted.
        ViewLimitExceeded
            If all permitted views were used. The entry is evicted.
        """

        now = (clock or self.clock).now()
        with self._lock:
            entry = self._entries.get(handle)
            if entry is None:
                raise NotFound()
            state = evaluate_access(entry, now)
            if state is AccessState.EXPIRED_BY_TIME:
                del self._entries[handle]
                logger.info("evicted paste %s: expired", handle)
                raise Expired()
            if state is AccessState.EXHAUSTED_BY_VIEWS:
                del self._entries[handle]
                logger.info("evicted paste %s: view limit reached", handle)
                raise ViewLimitExceeded()
            if entry.remaining_views is not None:
                entry.remaining_views -= 1
            return ReadResult(entry.content, entry.remaining_views, entry.expires_at)
