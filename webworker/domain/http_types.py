"""Value types shared by the exchange pipeline."""

from dataclasses import dataclass
from typing import Optional

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404


@dataclass(frozen=True)
class RequestLine:
    """Method and path tokens taken from the first line of a request."""

    method: str
    path: str


@dataclass(frozen=True)
class ResolvedFile:
    """A requested resource mapped onto the local document root."""

    path: str
    extension: Optional[str]
    exists: bool
    requested_path: str = ""


@dataclass(frozen=True)
class ExchangeOutcome:
    """Result of one request/response exchange."""

    status_code: int
    path: Optional[str] = None
    content_type: Optional[str] = None
