"""Exception hierarchy for animeproxy.

Each error knows the HTTP status it maps to and how to render itself as the
``{success: false, ...}`` body that every failing endpoint returns.
"""


class AnimeProxyError(Exception):
    """Base exception for all animeproxy errors."""

    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.detail is not None:
            body["error"] = self.detail
        return body


class BadRequestError(AnimeProxyError):
    """Raised when a required request parameter is missing or unusable."""

    status_code = 400


class NotFoundError(AnimeProxyError):
    """Raised when an anime or episode cannot be resolved."""

    status_code = 404


class UpstreamError(AnimeProxyError):
    """Raised when the upstream catalog API fails or returns garbage."""

    status_code = 500
