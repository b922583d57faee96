# kickoff_hub/errors.py
from __future__ import annotations


class KioskError(Exception):
    """Base for every failure that the refresh boundary turns into an operator message."""


class NetworkError(KioskError):
    """Fetch failed at the transport level or the endpoint answered non-2xx."""

    def __init__(self, message: str, *, url: str = "", status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class FormatError(KioskError):
    """
    The body is not the expected envelope or table shape.

    Also raised when an HTML page (usually a Google sign-in page) comes back
    in place of data.
    """


class EmptyDataError(KioskError):
    """Well-formed response with a header but zero data rows."""


class ColumnMissingError(KioskError):
    """None of the expected columns were found after synonym matching."""

    def __init__(self, message: str, *, headers: list[str] | None = None):
        super().__init__(message)
        self.headers = list(headers or [])
