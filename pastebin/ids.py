import secrets
from typing import Callable, Optional

# nanoid's URL-safe alphabet
ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"


class HandleSpaceExhausted(RuntimeError):
    """Raised when no free handle was found within the retry budget."""


class HandleGenerator:
    """Generator of short, opaque, URL-safe handles.

    Parameters
    ----------
    length : int
        Number of characters per handle. 8 characters over a 64-symbol
        alphabet gives 2**48 possible handles.
    max_attempts : int
        How many candidates `generate` tries before giving up when a
        `taken` predicate keeps reporting collisions.
    """

    def __init__(self, length: int = 8, max_attempts: int = 16):
        if length < 1:
            raise ValueError("length must be >= 1")
        self.length = length
        self.max_attempts = max_attempts

    def _candidate(self) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))

    def generate(self, taken: Optional[Callable[[str], bool]] = None) -> str:
        """Return a fresh handle.

        Parameters
        ----------
        taken : Optional[Callable[[str], bool]]
            Predicate reporting whether a candidate is already in use. When
            given, colliding candidates are discarded and a new one is drawn.

        Raises
        ------
        HandleSpaceExhausted
            If `max_attempts` candidates in a row were all taken.
        """

        for _ in range(self.max_attempts):
            handle = self._candidate()
            if taken is None or not taken(handle):
                return handle
        raise HandleSpaceExhausted(f"no free handle after {self.max_attempts} attempts")
