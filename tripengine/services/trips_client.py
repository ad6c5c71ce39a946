"""
Trips Client - Async REST client for the remote trips service.
"""
import httpx
import logging
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PayloadError

from ..config import get_client_config
from ..errors import ConflictError, NetworkError, NotFoundError, ServerError
from ..models.trip import Trip, TripPreview, TripRequest

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull the service's message out of an error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return response.text or None
    if isinstance(data, dict):
        return data.get("message") or data.get("error")
    return None


class ServiceClient:
    """Shared request plumbing: one short-lived httpx client per call, errors mapped to the engine taxonomy."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        headers: Optional[dict] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        config = get_client_config()
        self.base_url = (base_url or config["base_url"]).rstrip("/")
        self.timeout = timeout if timeout is not None else config["timeout"]
        self.headers = headers if headers is not None else config["headers"]
        self.transport = transport

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.headers,
            transport=self.transport,
        ) as client:
            try:
                response = await client.request(method, path, json=json)
            except httpx.TimeoutException as e:
                logger.error(f"{method} {path} timed out: {e}")
                raise NetworkError(f"{method} {path} timed out", timeout=True) from e
            except httpx.TransportError as e:
                logger.error(f"{method} {path} failed: {e}")
                raise NetworkError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            message = f"{method} {path} returned {response.status_code}"
            logger.error(f"{message}: {detail}")
            if response.status_code == 404:
                raise NotFoundError(message, response.status_code, detail)
            if response.status_code < 500:
                raise ConflictError(message, response.status_code, detail)
            raise ServerError(message, response.status_code, detail)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a body that is not JSON: {e}")
            raise ServerError(f"{method} {path} returned malformed JSON", 502) from e

    def _parse(self, model: Type[ModelT], data: Any, path: str) -> ModelT:
        """Validate a success payload; a payload the engine cannot read is a service fault."""
        try:
            return model.model_validate(data)
        except PayloadError as e:
            logger.error(f"Unreadable {model.__name__} from {path}: {e}")
            raise ServerError(f"{path} returned an unreadable {model.__name__}", 502, str(e)) from e


class TripsClient(ServiceClient):
    """Remote persistence operations for trips."""

    async def create(self, request: TripRequest) -> Trip:
        data = await self._request("POST", "/trips", json=request.to_wire())
        return self._parse(Trip, data, "/trips")

    async def preview(self, request: TripRequest) -> TripPreview:
        data = await self._request("POST", "/trips/preview", json=request.to_wire())
        return self._parse(TripPreview, data, "/trips/preview")

    async def get_all(self) -> list[Trip]:
        data = await self._request("GET", "/trips")
        if data is not None and not isinstance(data, list):
            raise ServerError("/trips returned something other than a list", 502)
        return [self._parse(Trip, item, "/trips") for item in data or []]

    async def get(self, trip_id: str) -> Trip:
        path = f"/trips/{trip_id}"
        return self._parse(Trip, await self._request("GET", path), path)

    async def update(self, trip_id: str, request: TripRequest) -> Trip:
        """Full update; the body has the same shape as create."""
        path = f"/trips/{trip_id}"
        return self._parse(Trip, await self._request("PUT", path, json=request.to_wire()), path)

    async def start(self, trip_id: str) -> Trip:
        path = f"/trips/{trip_id}/start"
        return self._parse(Trip, await self._request("PUT", path), path)

    async def complete(self, trip_id: str) -> Trip:
        path = f"/trips/{trip_id}/complete"
        return self._parse(Trip, await self._request("PUT", path), path)

    async def cancel(self, trip_id: str) -> Optional[Trip]:
        """Cancel a trip. The service may answer with the trip or with an empty body."""
        path = f"/trips/{trip_id}/cancel"
        data = await self._request("PUT", path)
        if not data:
            return None
        return self._parse(Trip, data, path)
