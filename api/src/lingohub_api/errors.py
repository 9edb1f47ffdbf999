"""Error taxonomy of the API.

Every error carries the HTTP status it maps to; ``main`` renders them as
plain-text responses, except on routes registered with
:func:`json_errors_for`, whose clients expect a JSON error body. Row-level
problems during import are not errors: they are reported in the import
result.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

ErrorBody = Callable[[str], Dict[str, Any]]

# path -> (body builder, extra headers) for routes whose clients read JSON errors
_json_error_routes: Dict[str, Tuple[ErrorBody, Dict[str, str]]] = {}


class LingoHubError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StructuralError(LingoHubError):
    """Request or file is unusable; raised before any write."""

    status_code = status.HTTP_400_BAD_REQUEST


class MissingFile(StructuralError):
    pass


class EmptyFile(StructuralError):
    pass


class InvalidHeader(StructuralError):
    pass


class InvalidMapping(StructuralError):
    pass


class InvalidPolicy(StructuralError):
    pass


class InvalidBody(StructuralError):
    pass


class Unauthorized(LingoHubError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(LingoHubError):
    status_code = status.HTTP_403_FORBIDDEN


class PersistenceError(LingoHubError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConfigurationError(LingoHubError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def json_errors_for(path: str, build: ErrorBody, headers: Optional[Dict[str, str]] = None) -> None:
    _json_error_routes[path] = (build, headers or {})


async def lingohub_error_handler(request: Request, exc: LingoHubError) -> Response:
    route = _json_error_routes.get(request.url.path)
    if route is not None:
        build, headers = route
        return JSONResponse(build(exc.message), status_code=exc.status_code, headers=headers)
    return PlainTextResponse(exc.message, status_code=exc.status_code)
