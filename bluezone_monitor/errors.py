"""Poll-cycle failures.

These never leave a poller: ``poll()`` catches them, logs them and keeps
the last published snapshot.
"""

from __future__ import annotations


class PollError(Exception):
    """Base exception for a failed fetch against a polled endpoint."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"{url}: {message}")


class UnexpectedStatusError(PollError):
    """The endpoint answered, but not with a 2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"unexpected HTTP status {status_code}")


class MalformedPayloadError(PollError):
    """A 2xx response whose body could not be parsed or validated."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(url, f"malformed payload: {message}")
