from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from starlette.datastructures import Headers

from .errors import UnauthorizedError
from .secret_store import API_KEY_SECRET_NAME, SecretProvider, get_secret_provider
from .telemetry import track_event

API_KEY_HEADER = "x-api-key"


# PUBLIC_INTERFACE
def extract_api_key(headers: Headers) -> Optional[str]:
    """
    Return the single x-api-key value to compare.

    The header name matches case-insensitively. When the header is repeated,
    only the first value counts; the remaining values are ignored.
    """
    values = headers.getlist(API_KEY_HEADER)
    return values[0] if values else None


# PUBLIC_INTERFACE
def authorize(headers: Headers, expected_key: Optional[str]) -> bool:
    """
    Exact, case-sensitive comparison of the presented key against expected_key.
    Missing header or missing expected key both fail.
    """
    presented = extract_api_key(headers)
    if presented is None or expected_key is None:
        return False
    return presented == expected_key


# PUBLIC_INTERFACE
def get_api_key_dependency(failure_event: Optional[str] = None):
    """
    Return a FastAPI dependency callable that enforces the x-api-key header.

    The expected key is fetched from the secret provider on every request;
    errors raised while fetching it propagate unchanged.

    Usage:
        router = APIRouter(dependencies=[Depends(get_api_key_dependency())])
        @router.patch("/validate", dependencies=[Depends(get_api_key_dependency("SomeEvent"))])

    Args:
        failure_event: telemetry event emitted before rejecting the request.
    """

    def _enforce(
        request: Request,
        provider: SecretProvider = Depends(get_secret_provider),
    ) -> None:
        """
        Raises:
            UnauthorizedError if the key is missing or does not match.
        """
        expected = provider.get_secret(API_KEY_SECRET_NAME)
        if not authorize(request.headers, expected):
            if failure_event:
                track_event(failure_event, {"Path": request.url.path})
            raise UnauthorizedError()

    return _enforce
