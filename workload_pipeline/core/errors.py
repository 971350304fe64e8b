"""API-facing exceptions raised by the workload pipeline."""

from typing import Any, Optional

INVALID_OPTION = "InvalidOption"
INVALID_TYPE = "InvalidType"
NOT_FOUND = "NotFound"


class APIError(Exception):
    """Base class for errors surfaced to the API layer.

    Attributes:
        code: Machine-readable error code (e.g. "InvalidOption")
        message: Human-readable description
        status: HTTP status the API layer should answer with
    """

    def __init__(self, code: str, message: str, status: int = 422) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidOption(APIError):
    """Raised when two ports of one container resolve to the same name.

    Nothing is written when this is raised: all mutation happens on the
    in-memory document before the storage call.

    Attributes:
        kind: Service kind of the conflicting port
        container_port: containerPort of the conflicting port
        protocol: protocol of the conflicting port
    """

    def __init__(
        self,
        message: str,
        kind: Optional[Any] = None,
        container_port: Optional[Any] = None,
        protocol: Optional[Any] = None,
    ) -> None:
        super().__init__(INVALID_OPTION, message, status=422)
        self.kind = kind
        self.container_port = container_port
        self.protocol = protocol


class InvalidType(APIError):
    """Raised when a document is addressed through an unknown workload kind."""

    def __init__(self, message: str) -> None:
        super().__init__(INVALID_TYPE, message, status=422)


class NotFound(APIError):
    """Raised by stores when an identifier does not resolve to a document."""

    def __init__(self, message: str) -> None:
        super().__init__(NOT_FOUND, message, status=404)
