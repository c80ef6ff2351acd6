"""
Per-client header state.

``HttpHeaders`` is the one piece of mutable state shared by every request a
client issues. Request builders never hold on to it: they take a
``snapshot()`` synchronously while building a request, so a login or logout
that completes while another request is in flight cannot change the headers
of that request.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

# Header names defined by the upstream service.
SESSION_TOKEN_HEADER = "X-DreamFactory-Session-Token"
API_KEY_HEADER = "X-DreamFactory-Api-Key"


class HttpHeaders:
    """
    Ordered, case-insensitive header collection.

    Keys keep the spelling and position they had when first set; setting an
    existing key (in any case) only replaces its value.

    Example:
        headers = HttpHeaders({"Accept": "application/json"})
        headers.set("accept", "text/plain")
        headers.snapshot()  # {"Accept": "text/plain"}
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        # lower-cased name -> (original name, value)
        self._entries: dict[str, tuple[str, str]] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        """Add a header, or replace the value of an existing one."""
        if not name:
            raise ValueError("Header name cannot be empty")
        key = name.lower()
        existing = self._entries.get(key)
        original = existing[0] if existing else name
        self._entries[key] = (original, str(value))

    def remove(self, name: str) -> None:
        """Remove a header. Removing an absent header does nothing."""
        self._entries.pop(name.lower(), None)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of a header, or ``default`` when absent."""
        entry = self._entries.get(name.lower())
        return entry[1] if entry else default

    def snapshot(self) -> dict[str, str]:
        """Return an independent copy of the headers, in insertion order."""
        return {original: value for original, value in self._entries.values()}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter([original for original, _ in self._entries.values()])

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        # Values are withheld: the bag carries the session token.
        return f"HttpHeaders({list(self)!r})"
