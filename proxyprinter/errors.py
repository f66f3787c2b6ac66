"""
Pipeline error hierarchy.

Only two conditions abort a request:

- CallerInputError: the request itself is unusable (no deck source, bad deck id).
  Raised before any I/O happens.
- SourceFetchError: the deck could not be obtained (unreadable deck list file,
  remote deck API failure). Raised before any image work starts.

A card that cannot be found or an image that fails to download is NOT an
exception. Those are logged and reported through ProgressEvent.error_message,
and the card simply contributes no images.
"""


class ProxyPrinterError(Exception):
    """Base class for fatal pipeline errors."""

    pass


class CallerInputError(ProxyPrinterError, ValueError):
    """Raised when the caller supplies an invalid or missing deck source."""

    pass


class SourceFetchError(ProxyPrinterError):
    """Raised when the deck list cannot be read or fetched."""

    pass
