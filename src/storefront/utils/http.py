"""Shared httpx client for the storefront REST API.

Every endpoint answers with a JSON envelope ``{success, message?, data?}``.
``ApiClient.request`` unwraps successful envelopes and turns transport
failures and non-2xx answers into ``ServiceError`` carrying the server's
message when one was sent.
"""

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storefront.exceptions import ServiceError

logger = structlog.get_logger(__name__)


class ApiError(ServiceError):
    """Non-2xx answer from the API; keeps the decoded envelope for callers."""

    def __init__(self, message: str | None, status_code: int, payload: dict | None = None):
        super().__init__(message, status_code=status_code)
        self.payload = payload or {}


class MalformedResponse(ServiceError):
    """A 2xx answer whose data does not have the expected shape."""

    default_message = "The service sent an unexpected response. Please try again."


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], data: Any, **extra: Any) -> ModelT:
    """Validate an envelope's ``data`` as ``model``, with ``extra`` fields overriding it.

    Raises ``MalformedResponse`` when ``data`` is not an object or fails validation.
    """
    if not isinstance(data, dict):
        logger.warning("api_response_malformed", model=model.__name__, data_type=type(data).__name__)
        raise MalformedResponse()
    try:
        return model.model_validate({**data, **extra})
    except PydanticValidationError as exc:
        logger.warning("api_response_malformed", model=model.__name__, errors=exc.error_count())
        raise MalformedResponse() from exc


def _envelope(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {"data": body}


class ApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the envelope's ``data``."""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("api_request_failed", method=method, path=path, error=repr(exc))
            raise ServiceError() from exc

        body = _envelope(response)
        if response.is_error or body.get("success") is False:
            logger.info(
                "api_request_rejected",
                method=method,
                path=path,
                status=response.status_code,
                message=body.get("message"),
            )
            raise ApiError(body.get("message"), response.status_code, body)

        return body.get("data")

    async def aclose(self) -> None:
        await self._client.aclose()
